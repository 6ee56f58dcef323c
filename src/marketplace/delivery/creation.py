"""CreateDelivery: attach the one delivery an order gets."""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.policy import is_seller_of, require_admin, require_any
from marketplace.access.roles import Caller
from marketplace.delivery.delivery import Delivery
from marketplace.domain import logger, marketplace
from marketplace.errors import DeliveryAlreadyExists
from marketplace.notifications import notify
from marketplace.ordering.order import Order


@marketplace.command(part_of="Delivery")
class CreateDelivery:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)
    scheduled_for = DateTime(required=True)
    details = String(max_length=255)
    courier_id = Identifier()


@marketplace.command_handler(part_of=Delivery)
class CreateDeliveryHandler:
    @handle(CreateDelivery)
    def create_delivery(self, command):
        caller = Caller.of(command)
        orders = current_domain.repository_for(Order)
        order = orders.get_order(command.order_id)
        require_any(caller, is_seller_of(caller, order), action="create a delivery for this order")
        if command.courier_id:
            require_admin(caller, action="assign couriers")

        deliveries = current_domain.repository_for(Delivery)
        if deliveries.for_order(order.id) is not None:
            raise DeliveryAlreadyExists(
                f"Order {order.id} already has a delivery",
                order_id=str(order.id),
            )

        order.mark_ready_for_delivery(changed_by=caller.user_id)

        delivery = Delivery.create(
            order_id=str(order.id),
            buyer_id=str(order.buyer_id),
            address=command.address,
            city=command.city,
            phone=command.phone,
            scheduled_for=command.scheduled_for,
            details=command.details,
            courier_id=command.courier_id,
        )
        deliveries.add(delivery)
        orders.add(order)

        logger.info(
            "delivery_created",
            delivery_id=str(delivery.id),
            order_id=str(order.id),
            order_status=order.status,
            created_by=caller.user_id,
        )

        notify(
            order.buyer_id,
            "Livraison programmée",
            f"La livraison de votre commande {order.number} est prévue à {command.city}.",
            f"/deliveries/{delivery.id}",
        )
        if command.courier_id:
            notify(
                command.courier_id,
                "Nouvelle livraison",
                f"La commande {order.number} vous a été assignée.",
                f"/deliveries/{delivery.id}",
            )
        return str(delivery.id)
