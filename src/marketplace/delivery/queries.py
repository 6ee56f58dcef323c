"""Read access to deliveries."""

from protean.utils.globals import current_domain

from marketplace.access.policy import is_assigned_courier, require_any
from marketplace.access.roles import Caller
from marketplace.delivery.delivery import Delivery
from marketplace.ordering.order import Order


def delivery_for(caller: Caller, delivery_id) -> Delivery:
    delivery = current_domain.repository_for(Delivery).get_delivery(delivery_id)
    order = current_domain.repository_for(Order).get_order(delivery.order_id)
    require_any(
        caller,
        is_assigned_courier(caller, delivery),
        str(delivery.buyer_id) == caller.user_id,
        order.sold_by(caller.user_id),
        action="view this delivery",
    )
    return delivery


def deliveries_assigned_to(caller: Caller) -> list[Delivery]:
    return current_domain.repository_for(Delivery).assigned_to(caller.user_id)
