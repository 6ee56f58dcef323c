"""Catalogue events."""

from protean.fields import Boolean, DateTime, Float, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Article")
class ArticleRegistered:
    """A seller listed a new article."""

    __version__ = 1

    article_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    title = String(required=True)
    price = Float(required=True)
    registered_at = DateTime(required=True)


@marketplace.event(part_of="Article")
class ArticlePromotionChanged:
    __version__ = 1

    article_id = Identifier(required=True)
    on_promotion = Boolean(required=True)
    promotion_price = Float()
