from marketplace.api.errors import register_error_handlers
from marketplace.api.routes import article_router, claim_router, delivery_router, order_router, stock_router

__all__ = [
    "article_router",
    "claim_router",
    "delivery_router",
    "order_router",
    "stock_router",
    "register_error_handlers",
]
