"""Marketplace back office: order fulfillment and inventory consistency.

Covers stock reservations per variation, the order lifecycle, the single
delivery attached to each order, and the claims buyers raise against orders.
"""

import structlog
from protean.domain import Domain

marketplace = Domain(name="marketplace")

logger = structlog.get_logger(__name__)
