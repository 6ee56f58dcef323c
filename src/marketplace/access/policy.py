"""Ownership and role checks applied before any state change."""

from marketplace.access.roles import Caller, Role
from marketplace.errors import Forbidden


def require_role(caller: Caller, *roles: Role, action: str) -> None:
    if caller.role not in roles:
        raise Forbidden(f"{caller.role.value} may not {action}", user_id=caller.user_id)


def require_admin(caller: Caller, action: str) -> None:
    require_role(caller, Role.ADMINISTRATOR, action=action)


def is_buyer_of(caller: Caller, order) -> bool:
    return str(order.buyer_id) == caller.user_id


def is_seller_of(caller: Caller, order) -> bool:
    return caller.role == Role.SELLER and order.sold_by(caller.user_id)


def is_assigned_courier(caller: Caller, delivery) -> bool:
    return delivery.courier_id is not None and str(delivery.courier_id) == caller.user_id


def require_any(caller: Caller, *checks: bool, action: str) -> None:
    """Allow administrators, or callers for whom at least one check holds."""
    if caller.is_admin or any(checks):
        return
    raise Forbidden(f"Not allowed to {action}", user_id=caller.user_id)
