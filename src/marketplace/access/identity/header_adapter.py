"""Trusted-header identity adapter.

The API gateway authenticates the session and forwards the user id and role
as ``X-User-Id`` and ``X-User-Role``.
"""

from collections.abc import Mapping

from protean.exceptions import ValidationError

from marketplace.access.identity.port import IdentityProvider
from marketplace.access.roles import Caller, parse_role
from marketplace.errors import Unauthenticated

USER_ID_HEADER = "x-user-id"
ROLE_HEADER = "x-user-role"


class TrustedHeaderIdentityProvider(IdentityProvider):
    def resolve(self, headers: Mapping[str, str]) -> Caller:
        lowered = {key.lower(): value for key, value in headers.items()}
        user_id = (lowered.get(USER_ID_HEADER) or "").strip()
        if not user_id:
            raise Unauthenticated("Missing authenticated user")

        try:
            role = parse_role(lowered.get(ROLE_HEADER))
        except ValidationError as exc:
            raise Unauthenticated("Missing or unknown user role", user_id=user_id) from exc

        return Caller(user_id=user_id, role=role)
