"""Delivery aggregate: the single delivery attached to an order.

Delivery statuses are an explicit enumeration. Two of them drive the order
(see ``ORDER_STATUS_FOR_DELIVERY``); the others leave it untouched.
``delivered`` is terminal.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from marketplace.delivery.events import (
    CourierAssigned,
    DeliveryCreated,
    DeliveryRescheduled,
    DeliveryStatusChanged,
)
from marketplace.domain import marketplace
from marketplace.errors import DeliveryAlreadyCompleted, TerminalStateViolation
from marketplace.ordering.order import OrderStatus
from marketplace.utils.labels import parse_label


class DeliveryStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    POSTPONED = "postponed"

    @classmethod
    def parse(cls, value) -> "DeliveryStatus":
        return parse_label(cls, value, _STATUS_ALIASES)


_STATUS_ALIASES = {
    "en_attente": DeliveryStatus.PENDING,
    "en_cours": DeliveryStatus.IN_PROGRESS,
    "en_cours_de_livraison": DeliveryStatus.IN_PROGRESS,
    "en_livraison": DeliveryStatus.IN_PROGRESS,
    "in_delivery": DeliveryStatus.IN_PROGRESS,
    "livree": DeliveryStatus.DELIVERED,
    "livre": DeliveryStatus.DELIVERED,
    "completed": DeliveryStatus.DELIVERED,
    "annulee": DeliveryStatus.CANCELLED,
    "canceled": DeliveryStatus.CANCELLED,
    "reportee": DeliveryStatus.POSTPONED,
}

ORDER_STATUS_FOR_DELIVERY = {
    DeliveryStatus.IN_PROGRESS: OrderStatus.IN_DELIVERY,
    DeliveryStatus.DELIVERED: OrderStatus.DELIVERED,
}


@marketplace.aggregate
class Delivery:
    order_id = Identifier(required=True, unique=True)
    buyer_id = Identifier(required=True)
    courier_id = Identifier()
    address = String(required=True, max_length=255)
    details = String(max_length=255)
    city = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)
    scheduled_for = DateTime(required=True)
    status = String(choices=DeliveryStatus, default=DeliveryStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, order_id, buyer_id, address, city, phone, scheduled_for, details=None, courier_id=None):
        now = datetime.now(UTC)
        delivery = cls(
            order_id=order_id,
            buyer_id=buyer_id,
            courier_id=courier_id,
            address=address,
            details=details,
            city=city,
            phone=phone,
            scheduled_for=scheduled_for,
            status=DeliveryStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        delivery.raise_(
            DeliveryCreated(
                delivery_id=str(delivery.id),
                order_id=str(order_id),
                courier_id=str(courier_id) if courier_id else None,
                city=city,
                scheduled_for=scheduled_for,
                created_at=now,
            )
        )
        return delivery

    @property
    def current_status(self) -> DeliveryStatus:
        return DeliveryStatus(self.status)

    @property
    def is_completed(self) -> bool:
        return self.current_status == DeliveryStatus.DELIVERED

    def order_status(self) -> OrderStatus | None:
        """The order status this delivery's status implies, if any."""
        return ORDER_STATUS_FOR_DELIVERY.get(self.current_status)

    def change_status(self, target: DeliveryStatus) -> bool:
        """Move to ``target``. Returns False when nothing changed."""
        if self.is_completed:
            raise TerminalStateViolation(
                f"Delivery {self.id} is already delivered",
                delivery_id=str(self.id),
            )
        if self.current_status == target:
            return False

        now = datetime.now(UTC)
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            DeliveryStatusChanged(
                delivery_id=str(self.id),
                order_id=str(self.order_id),
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )
        return True

    def assign_courier(self, courier_id):
        """Hand the delivery to a courier, which puts it on the road."""
        if not courier_id:
            raise ValidationError({"courier_id": ["A courier is required"]})
        if self.is_completed:
            raise TerminalStateViolation(
                f"Delivery {self.id} is already delivered",
                delivery_id=str(self.id),
            )

        now = datetime.now(UTC)
        self.courier_id = courier_id
        self.updated_at = now
        self.raise_(
            CourierAssigned(
                delivery_id=str(self.id),
                order_id=str(self.order_id),
                courier_id=str(courier_id),
                assigned_at=now,
            )
        )
        self.change_status(DeliveryStatus.IN_PROGRESS)

    def update_details(self, address=None, details=None, city=None, phone=None, scheduled_for=None):
        changes = {
            "address": address,
            "details": details,
            "city": city,
            "phone": phone,
            "scheduled_for": scheduled_for,
        }
        changes = {field: value for field, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError({"delivery": ["Nothing to update"]})
        if self.is_completed:
            raise TerminalStateViolation(
                f"Delivery {self.id} is already delivered",
                delivery_id=str(self.id),
            )

        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            DeliveryRescheduled(
                delivery_id=str(self.id),
                address=self.address,
                city=self.city,
                scheduled_for=self.scheduled_for,
                updated_at=self.updated_at,
            )
        )

    def assert_removable(self):
        if self.is_completed:
            raise DeliveryAlreadyCompleted(
                f"Delivery {self.id} is completed and cannot be deleted",
                delivery_id=str(self.id),
            )
