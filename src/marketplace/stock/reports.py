"""Low-stock report for sellers and administrators."""

import os
from enum import Enum

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from marketplace.access.policy import require_role
from marketplace.access.roles import Caller, Role
from marketplace.stock.variation import Variation

DEFAULT_LOW_STOCK_THRESHOLD = 5


class LowStockKind(Enum):
    ALL = "all"
    OUT = "out"
    LOW = "low"


def default_threshold() -> int:
    return int(os.environ.get("LOW_STOCK_THRESHOLD", DEFAULT_LOW_STOCK_THRESHOLD))


def low_stock_report(caller: Caller, threshold: int | None = None, kind: str = "all") -> dict:
    """Variations at or below ``threshold``, lowest stock first.

    ``out`` keeps only empty variations, ``low`` only the ones that still
    have some stock. Sellers see their own variations, administrators all.
    """
    require_role(caller, Role.SELLER, Role.ADMINISTRATOR, action="read stock alerts")

    threshold = default_threshold() if threshold is None else threshold
    if threshold < 0:
        raise ValidationError({"threshold": ["Threshold cannot be negative"]})
    try:
        kind = LowStockKind(kind)
    except ValueError:
        raise ValidationError({"type": [f"Unknown report type: {kind}"]}) from None

    repo = current_domain.repository_for(Variation)
    variations = repo.all_variations() if caller.is_admin else repo.belonging_to(caller.user_id)

    alerts = [v for v in variations if v.stock <= threshold]
    if kind == LowStockKind.OUT:
        alerts = [v for v in alerts if v.stock == 0]
    elif kind == LowStockKind.LOW:
        alerts = [v for v in alerts if v.stock > 0]
    alerts.sort(key=lambda v: v.stock)

    return {
        "threshold": threshold,
        "type": kind.value,
        "alerts": [
            {
                "variation_id": str(v.id),
                "article_id": str(v.article_id),
                "seller_id": str(v.seller_id),
                "color": v.color,
                "size": v.size,
                "stock": v.stock,
            }
            for v in alerts
        ],
        "summary": {
            "total": len(alerts),
            "out_of_stock": sum(1 for v in alerts if v.stock == 0),
            "low_stock": sum(1 for v in alerts if v.stock > 0),
        },
    }
