"""Order aggregate with its OrderLine entities.

State machine:

    pending -> preparing -> ready_for_delivery -> in_delivery -> delivered
    pending | preparing -> cancelled
    pending | cancelled -> refunded

``delivered`` and ``refunded`` are terminal. ``in_delivery`` and
``delivered`` are only ever reached through the order's delivery. Deleting
the delivery sends the order back to ``preparing``.

Lines snapshot the unit price and the selling seller at purchase time and
are never edited afterwards.
"""

import json
from collections import defaultdict
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from marketplace.domain import marketplace
from marketplace.errors import InvalidStateForDeletion, InvalidTransition, TerminalStateViolation
from marketplace.ordering import pricing
from marketplace.ordering.events import (
    OrderCancelled,
    OrderDeleted,
    OrderPlaced,
    OrderRefunded,
    OrderStatusChanged,
)
from marketplace.utils.labels import parse_label


class OrderStatus(Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY_FOR_DELIVERY = "ready_for_delivery"
    IN_DELIVERY = "in_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"

    @classmethod
    def parse(cls, value) -> "OrderStatus":
        return parse_label(cls, value, _STATUS_ALIASES)


_STATUS_ALIASES = {
    "en_attente": OrderStatus.PENDING,
    "en_preparation": OrderStatus.PREPARING,
    "prete_pour_livraison": OrderStatus.READY_FOR_DELIVERY,
    "ready": OrderStatus.READY_FOR_DELIVERY,
    "en_livraison": OrderStatus.IN_DELIVERY,
    "en_cours_de_livraison": OrderStatus.IN_DELIVERY,
    "livree": OrderStatus.DELIVERED,
    "livre": OrderStatus.DELIVERED,
    "annulee": OrderStatus.CANCELLED,
    "canceled": OrderStatus.CANCELLED,
    "remboursee": OrderStatus.REFUNDED,
}

_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {
        OrderStatus.PREPARING,
        OrderStatus.READY_FOR_DELIVERY,
        OrderStatus.CANCELLED,
        OrderStatus.REFUNDED,
    },
    OrderStatus.PREPARING: {OrderStatus.READY_FOR_DELIVERY, OrderStatus.CANCELLED},
    OrderStatus.READY_FOR_DELIVERY: {
        OrderStatus.IN_DELIVERY,
        OrderStatus.DELIVERED,
        OrderStatus.PREPARING,
    },
    OrderStatus.IN_DELIVERY: {OrderStatus.DELIVERED, OrderStatus.PREPARING},
    OrderStatus.DELIVERED: set(),
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),
}

TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.REFUNDED})
DELETABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.CANCELLED})


@marketplace.entity(part_of="Order")
class OrderLine:
    article_id = Identifier(required=True)
    variation_id = Identifier()
    seller_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    service_fee = Float(default=0.0)

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity


@marketplace.aggregate
class Order:
    number = String(required=True, max_length=20)
    buyer_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    lines = HasMany(OrderLine)
    delivery_address = String(max_length=255)
    comment = Text()
    deliverable = Boolean(default=True)
    subtotal = Float(default=0.0)
    delivery_fee = Float(default=0.0)
    service_fee_total = Float(default=0.0)
    total_price = Float(default=0.0)
    stock_released = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, number, buyer_id, lines, delivery_address=None, comment=None, deliverable=True):
        """Create a pending order from priced line data.

        ``lines`` is a list of dicts with article_id, variation_id, seller_id,
        quantity and unit_price. Fees and totals are computed here.
        """
        if not lines:
            raise ValidationError({"lines": ["An order needs at least one line"]})

        now = datetime.now(UTC)
        order = cls(
            number=number,
            buyer_id=buyer_id,
            status=OrderStatus.PENDING.value,
            delivery_address=delivery_address,
            comment=comment,
            deliverable=deliverable,
            created_at=now,
            updated_at=now,
        )

        for line in lines:
            order.add_lines(
                OrderLine(
                    article_id=line["article_id"],
                    variation_id=line.get("variation_id"),
                    seller_id=line["seller_id"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    service_fee=pricing.service_fee(line["unit_price"], line["quantity"]),
                )
            )

        order.subtotal = sum(line.line_total for line in order.lines)
        order.service_fee_total = sum(line.service_fee for line in order.lines)
        order.delivery_fee = (
            pricing.delivery_fee(delivery_address, (str(line.seller_id) for line in order.lines))
            if deliverable
            else 0.0
        )
        order.total_price = order.subtotal + order.delivery_fee

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                number=number,
                buyer_id=str(buyer_id),
                lines=json.dumps(
                    [
                        {
                            "article_id": str(line.article_id),
                            "variation_id": str(line.variation_id) if line.variation_id else None,
                            "seller_id": str(line.seller_id),
                            "quantity": line.quantity,
                            "unit_price": line.unit_price,
                        }
                        for line in order.lines
                    ]
                ),
                total_price=order.total_price,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def seller_ids(self) -> set[str]:
        return {str(line.seller_id) for line in self.lines}

    def sold_by(self, seller_id) -> bool:
        return str(seller_id) in self.seller_ids

    def reserved_quantities(self) -> dict[str, int]:
        """Quantity per variation that this order holds out of stock."""
        demands = defaultdict(int)
        for line in self.lines:
            if line.variation_id:
                demands[str(line.variation_id)] += line.quantity
        return dict(demands)

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target: OrderStatus):
        current = self.current_status
        if current in TERMINAL_STATUSES:
            raise TerminalStateViolation(
                f"Order {self.id} is {current.value} and can no longer change",
                order_id=str(self.id),
                status=current.value,
            )
        if target not in _VALID_TRANSITIONS[current]:
            raise InvalidTransition(
                f"Cannot transition from {current.value} to {target.value}",
                order_id=str(self.id),
                status=current.value,
                target=target.value,
            )

    def _move_to(self, target: OrderStatus, changed_by=None):
        self._assert_can_transition(target)
        now = datetime.now(UTC)
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )

    def _surrender_reservations(self) -> dict[str, int]:
        """Hand back the quantities to release, at most once per order."""
        if self.stock_released:
            return {}
        self.stock_released = True
        return self.reserved_quantities()

    def start_preparation(self, changed_by=None):
        if self.current_status != OrderStatus.PENDING:
            self._assert_can_transition(OrderStatus.PREPARING)  # terminal statuses raise here
            raise InvalidTransition(
                f"Only pending orders can start preparation, order {self.id} is {self.status}",
                order_id=str(self.id),
                status=self.status,
            )
        self._move_to(OrderStatus.PREPARING, changed_by)

    def mark_ready_for_delivery(self, changed_by=None):
        """Advance a preparable order once its delivery exists."""
        if self.current_status == OrderStatus.READY_FOR_DELIVERY:
            return
        self._move_to(OrderStatus.READY_FOR_DELIVERY, changed_by)

    def follow_delivery(self, target: OrderStatus, changed_by=None):
        """Apply a status derived from the delivery. Repeats are no-ops."""
        if self.current_status == target:
            return
        self._move_to(target, changed_by)

    def return_to_preparation(self, changed_by=None):
        """Undo delivery progress after the delivery was removed."""
        if self.current_status in (OrderStatus.READY_FOR_DELIVERY, OrderStatus.IN_DELIVERY):
            self._move_to(OrderStatus.PREPARING, changed_by)

    def cancel(self, reason=None, cancelled_by=None) -> dict[str, int]:
        """Cancel the order and return the stock it should give back."""
        self._move_to(OrderStatus.CANCELLED, cancelled_by)
        released = self._surrender_reservations()
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                reason=reason,
                cancelled_by=str(cancelled_by) if cancelled_by else None,
                released_lines=len(released),
                cancelled_at=self.updated_at,
            )
        )
        return released

    def refund(self, refunded_by=None) -> dict[str, int]:
        """Refund the order. A pending order also gives its stock back."""
        self._move_to(OrderStatus.REFUNDED, refunded_by)
        released = self._surrender_reservations()
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                refunded_by=str(refunded_by) if refunded_by else None,
                amount=self.total_price,
                refunded_at=self.updated_at,
            )
        )
        return released

    # -------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------
    def assert_deletable(self):
        if self.current_status not in DELETABLE_STATUSES:
            raise InvalidStateForDeletion(
                f"Order {self.id} is {self.status}; only pending or cancelled orders can be deleted",
                order_id=str(self.id),
                status=self.status,
            )

    def discard(self, deleted_by=None) -> dict[str, int]:
        """Drop the lines ahead of deletion.

        Returns the stock to release, which is only non-empty while the
        order is still pending.
        """
        self.assert_deletable()
        released = self._surrender_reservations() if self.current_status == OrderStatus.PENDING else {}

        for line in list(self.lines):
            self.remove_lines(line)

        self.raise_(
            OrderDeleted(
                order_id=str(self.id),
                status=self.status,
                deleted_by=str(deleted_by) if deleted_by else None,
                stock_released=sum(released.values()),
                deleted_at=datetime.now(UTC),
            )
        )
        return released
