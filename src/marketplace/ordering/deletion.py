"""DeleteOrder: remove a pending or cancelled order and everything hanging off it.

The delivery, the claims and the lines go with the order. A still-pending
order gives its reserved stock back first. The handler's unit of work
covers every step, so a failure anywhere leaves everything in place.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.policy import is_buyer_of, require_any
from marketplace.access.roles import Caller
from marketplace.claims.claim import Claim
from marketplace.delivery.delivery import Delivery
from marketplace.domain import logger, marketplace
from marketplace.ordering.order import Order
from marketplace.stock.ledger import StockLedger


@marketplace.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)


@marketplace.command_handler(part_of=Order)
class DeleteOrderHandler:
    @handle(DeleteOrder)
    def delete_order(self, command):
        caller = Caller.of(command)
        orders = current_domain.repository_for(Order)
        order = orders.get_order(command.order_id)
        require_any(caller, is_buyer_of(caller, order), action="delete this order")

        released = order.discard(deleted_by=caller.user_id)
        if released:
            StockLedger.from_domain().release_all(released, order_id=str(order.id))

        claims = current_domain.repository_for(Claim)
        removed_claims = claims.for_order(order.id)
        for claim in removed_claims:
            claims.remove(claim)

        deliveries = current_domain.repository_for(Delivery)
        delivery = deliveries.for_order(order.id)
        if delivery is not None:
            deliveries.remove(delivery)

        orders.add(order)
        orders.remove(order)

        logger.info(
            "order_deleted",
            order_id=str(order.id),
            deleted_by=caller.user_id,
            released_units=sum(released.values()),
            claims_removed=len(removed_claims),
            delivery_removed=delivery is not None,
        )
        return str(order.id)
