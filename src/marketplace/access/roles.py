"""Caller identity as seen by the marketplace: a user id and one role."""

from dataclasses import dataclass
from enum import Enum

from marketplace.utils.labels import parse_label


class Role(Enum):
    BUYER = "Buyer"
    SELLER = "Seller"
    COURIER = "Courier"
    ADMINISTRATOR = "Administrator"


# Role names found in existing user records
_ROLE_ALIASES = {
    "client": Role.BUYER,
    "acheteur": Role.BUYER,
    "vendeur": Role.SELLER,
    "boutique": Role.SELLER,
    "livreur": Role.COURIER,
    "admin": Role.ADMINISTRATOR,
    "administrateur": Role.ADMINISTRATOR,
}


def parse_role(value) -> Role:
    return parse_label(Role, value, _ROLE_ALIASES, field="role")


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMINISTRATOR

    @classmethod
    def of(cls, command) -> "Caller":
        """Build the caller recorded on a command (``requested_by``/``requester_role``)."""
        return cls(user_id=str(command.requested_by), role=parse_role(command.requester_role))
