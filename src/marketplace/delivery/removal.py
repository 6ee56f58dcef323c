"""DeleteDelivery: administrators withdraw a delivery that has not completed."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.policy import require_admin
from marketplace.access.roles import Caller
from marketplace.delivery.delivery import Delivery
from marketplace.domain import logger, marketplace
from marketplace.ordering.order import Order


@marketplace.command(part_of="Delivery")
class DeleteDelivery:
    delivery_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)


@marketplace.command_handler(part_of=Delivery)
class DeleteDeliveryHandler:
    @handle(DeleteDelivery)
    def delete_delivery(self, command):
        caller = Caller.of(command)
        require_admin(caller, action="delete deliveries")

        deliveries = current_domain.repository_for(Delivery)
        delivery = deliveries.get_delivery(command.delivery_id)
        delivery.assert_removable()

        orders = current_domain.repository_for(Order)
        order = orders.get_order(delivery.order_id)
        order.return_to_preparation(changed_by=caller.user_id)
        orders.add(order)

        deliveries.remove(delivery)

        logger.info(
            "delivery_deleted",
            delivery_id=str(delivery.id),
            order_id=str(order.id),
            order_status=order.status,
            deleted_by=caller.user_id,
        )
        return str(delivery.id)
