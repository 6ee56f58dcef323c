"""Read access to orders."""

from protean.utils.globals import current_domain

from marketplace.access.policy import is_assigned_courier, is_buyer_of, is_seller_of, require_any
from marketplace.access.roles import Caller
from marketplace.delivery.delivery import Delivery
from marketplace.ordering.order import Order


def order_for(caller: Caller, order_id) -> Order:
    """Load an order the caller is allowed to see.

    Buyers see their orders, sellers the orders containing their articles,
    couriers the orders they deliver, administrators everything.
    """
    order = current_domain.repository_for(Order).get_order(order_id)
    delivery = current_domain.repository_for(Delivery).for_order(order.id)
    require_any(
        caller,
        is_buyer_of(caller, order),
        is_seller_of(caller, order),
        delivery is not None and is_assigned_courier(caller, delivery),
        action="view this order",
    )
    return order


def orders_of(caller: Caller) -> list[Order]:
    return current_domain.repository_for(Order).placed_by(caller.user_id)
