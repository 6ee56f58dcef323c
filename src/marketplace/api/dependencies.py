"""FastAPI dependencies shared by the routers."""

from fastapi import Request

from marketplace.access.identity import get_identity_provider
from marketplace.access.roles import Caller


def current_caller(request: Request) -> Caller:
    """Resolve the authenticated caller, raising ``Unauthenticated`` when absent."""
    return get_identity_provider().resolve(request.headers)
