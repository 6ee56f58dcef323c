"""Delivery events."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Delivery")
class DeliveryCreated:
    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    courier_id = Identifier()
    city = String(required=True)
    scheduled_for = DateTime(required=True)
    created_at = DateTime(required=True)


@marketplace.event(part_of="Delivery")
class CourierAssigned:
    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    assigned_at = DateTime(required=True)


@marketplace.event(part_of="Delivery")
class DeliveryStatusChanged:
    __version__ = 1

    delivery_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Delivery")
class DeliveryRescheduled:
    __version__ = 1

    delivery_id = Identifier(required=True)
    address = String()
    city = String()
    scheduled_for = DateTime()
    updated_at = DateTime(required=True)
