"""Order events."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    __version__ = 1

    order_id = Identifier(required=True)
    number = String(required=True)
    buyer_id = Identifier(required=True)
    lines = Text(required=True)  # JSON list of line dicts
    total_price = Float(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """Any status transition, including the ones driven by the delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier()
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    reason = String()
    cancelled_by = Identifier()
    released_lines = Integer(required=True)
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    refunded_by = Identifier()
    amount = Float(required=True)
    refunded_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderDeleted:
    __version__ = 1

    order_id = Identifier(required=True)
    status = String(required=True)
    deleted_by = Identifier()
    stock_released = Integer(required=True)
    deleted_at = DateTime(required=True)
