"""Carry a delivery's status over to its order (delivery to order only)."""

from protean.utils.globals import current_domain

from marketplace.domain import logger
from marketplace.ordering.order import Order


def propagate_to_order(delivery, changed_by=None):
    """Apply the order status implied by ``delivery``, if it implies one."""
    target = delivery.order_status()
    if target is None:
        return None

    orders = current_domain.repository_for(Order)
    order = orders.get_order(delivery.order_id)
    previous = order.status
    order.follow_delivery(target, changed_by=changed_by)
    orders.add(order)

    if previous != order.status:
        logger.info(
            "order_status_propagated",
            order_id=str(order.id),
            delivery_id=str(delivery.id),
            previous_status=previous,
            new_status=order.status,
        )
    return order
