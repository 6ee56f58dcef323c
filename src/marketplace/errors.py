"""Error taxonomy for the marketplace back office.

Every failure an orchestrated operation can surface belongs to one stable
kind. Malformed input uses Protean's ``ValidationError`` directly; everything
else raises a ``MarketplaceError`` subclass, which the API layer maps to an
HTTP status by its ``kind``.
"""

from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "Validation"
    NOT_FOUND = "NotFound"
    FORBIDDEN = "Forbidden"
    UNAUTHENTICATED = "Unauthenticated"
    CONFLICT = "Conflict"
    DEPENDENCY_FAILURE = "DependencyFailure"


class MarketplaceError(Exception):
    kind = ErrorKind.DEPENDENCY_FAILURE
    retryable = False

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    @property
    def code(self) -> str:
        return type(self).__name__


# ---------------------------------------------------------------------------
# Identity and authorization
# ---------------------------------------------------------------------------
class Unauthenticated(MarketplaceError):
    kind = ErrorKind.UNAUTHENTICATED


class Forbidden(MarketplaceError):
    kind = ErrorKind.FORBIDDEN


# ---------------------------------------------------------------------------
# Missing entities
# ---------------------------------------------------------------------------
class NotFound(MarketplaceError):
    kind = ErrorKind.NOT_FOUND
    entity = "Entity"

    def __init__(self, identifier, message: str | None = None):
        super().__init__(message or f"{self.entity} {identifier} does not exist", identifier=str(identifier))
        self.identifier = str(identifier)


class OrderNotFound(NotFound):
    entity = "Order"


class DeliveryNotFound(NotFound):
    entity = "Delivery"


class ClaimNotFound(NotFound):
    entity = "Claim"


class ArticleNotFound(NotFound):
    entity = "Article"


class VariationNotFound(NotFound):
    entity = "Variation"


# ---------------------------------------------------------------------------
# Conflicts with current state
# ---------------------------------------------------------------------------
class Conflict(MarketplaceError):
    kind = ErrorKind.CONFLICT


class InsufficientStock(Conflict):
    def __init__(self, variation_id, requested: int, available: int):
        super().__init__(
            f"Variation {variation_id} has {available} in stock, {requested} requested",
            variation_id=str(variation_id),
            requested=requested,
            available=available,
        )
        self.variation_id = str(variation_id)
        self.requested = requested
        self.available = available


class DeliveryAlreadyExists(Conflict):
    pass


class DeliveryAlreadyCompleted(Conflict):
    pass


class InvalidStateForDeletion(Conflict):
    pass


class TerminalStateViolation(Conflict):
    pass


class InvalidTransition(Conflict):
    pass


class ConcurrentModification(Conflict):
    """Another request updated the same aggregate first. Safe to retry."""

    retryable = True


# ---------------------------------------------------------------------------
# Internal consistency
# ---------------------------------------------------------------------------
class StockOutOfSync(MarketplaceError):
    """Variation stock and its shadow stock record disagree."""

    kind = ErrorKind.DEPENDENCY_FAILURE
