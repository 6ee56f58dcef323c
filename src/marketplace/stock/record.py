"""Stock record: the audit shadow of a variation's stock.

Holds the same quantity as its variation plus the last movement applied.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


class StockMovement(Enum):
    INITIAL = "initial"
    RESERVATION = "reservation"
    RELEASE = "release"
    ADJUSTMENT = "adjustment"


@marketplace.aggregate
class StockRecord:
    variation_id = Identifier(required=True, unique=True)
    quantity = Integer(required=True, min_value=0)
    last_change = Integer(default=0)
    last_movement = String(choices=StockMovement, default=StockMovement.INITIAL.value)
    updated_by = Identifier()
    updated_at = DateTime()

    @classmethod
    def track(cls, variation_id, quantity: int, updated_by=None):
        return cls(
            variation_id=variation_id,
            quantity=quantity,
            last_change=quantity,
            last_movement=StockMovement.INITIAL.value,
            updated_by=updated_by,
            updated_at=datetime.now(UTC),
        )

    def mirror(self, quantity: int, movement: StockMovement, updated_by=None):
        self.last_change = quantity - self.quantity
        self.quantity = quantity
        self.last_movement = movement.value
        self.updated_by = updated_by
        self.updated_at = datetime.now(UTC)
