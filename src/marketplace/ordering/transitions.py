"""UpdateOrderStatus: the status changes a client may ask for directly.

Only ``preparing``, ``cancelled`` and ``refunded`` can be requested.
``ready_for_delivery``, ``in_delivery`` and ``delivered`` follow from the
order's delivery.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.policy import is_buyer_of, is_seller_of, require_admin, require_any
from marketplace.access.roles import Caller
from marketplace.domain import logger, marketplace
from marketplace.notifications import notify
from marketplace.ordering.order import Order, OrderStatus
from marketplace.stock.ledger import StockLedger

CLIENT_SETTABLE_STATUSES = frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED, OrderStatus.REFUNDED})

_BUYER_MESSAGES = {
    OrderStatus.PREPARING: ("Commande en préparation", "Votre commande {number} est en préparation."),
    OrderStatus.CANCELLED: ("Commande annulée", "Votre commande {number} a été annulée."),
    OrderStatus.REFUNDED: ("Commande remboursée", "Votre commande {number} a été remboursée."),
}


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    reason = String(max_length=500)


@marketplace.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        target = OrderStatus.parse(command.status)
        if target not in CLIENT_SETTABLE_STATUSES:
            raise ValidationError({"status": [f"Orders cannot be set to {target.value} directly"]})

        caller = Caller.of(command)
        repo = current_domain.repository_for(Order)
        order = repo.get_order(command.order_id)

        released = {}
        if target == OrderStatus.PREPARING:
            require_any(caller, is_seller_of(caller, order), action="prepare this order")
            order.start_preparation(changed_by=caller.user_id)
        elif target == OrderStatus.CANCELLED:
            require_any(
                caller,
                is_buyer_of(caller, order),
                is_seller_of(caller, order),
                action="cancel this order",
            )
            released = order.cancel(reason=command.reason, cancelled_by=caller.user_id)
        else:
            require_admin(caller, action="refund orders")
            released = order.refund(refunded_by=caller.user_id)

        if released:
            StockLedger.from_domain().release_all(released, order_id=str(order.id))
        repo.add(order)

        logger.info(
            "order_status_updated",
            order_id=str(order.id),
            status=target.value,
            changed_by=caller.user_id,
            released_units=sum(released.values()),
        )

        title, message = _BUYER_MESSAGES[target]
        notify(order.buyer_id, title, message.format(number=order.number), f"/orders/{order.id}")
        return str(order.id)
