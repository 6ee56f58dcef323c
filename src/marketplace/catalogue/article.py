"""Article aggregate: a sellable product owned by one seller.

Purchasable variants (color/size) and their stock live in the stock
component; the article only knows its list and promotion prices.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, String

from marketplace.catalogue.events import ArticlePromotionChanged, ArticleRegistered
from marketplace.domain import marketplace


@marketplace.aggregate
class Article:
    seller_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    price = Float(required=True, min_value=0.0)
    promotion_price = Float(min_value=0.0)
    on_promotion = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def promotion_requires_a_promotion_price(self):
        if self.on_promotion and not self.promotion_price:
            raise ValidationError({"promotion_price": ["A promotion needs a promotion price"]})

    @classmethod
    def register(cls, seller_id, title, price, promotion_price=None, on_promotion=False):
        now = datetime.now(UTC)
        article = cls(
            seller_id=seller_id,
            title=title,
            price=price,
            promotion_price=promotion_price,
            on_promotion=on_promotion,
            created_at=now,
            updated_at=now,
        )
        article.raise_(
            ArticleRegistered(
                article_id=str(article.id),
                seller_id=str(seller_id),
                title=title,
                price=price,
                registered_at=now,
            )
        )
        return article

    def change_promotion(self, on_promotion: bool, promotion_price=None):
        self.promotion_price = promotion_price if on_promotion else self.promotion_price
        self.on_promotion = on_promotion
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ArticlePromotionChanged(
                article_id=str(self.id),
                on_promotion=on_promotion,
                promotion_price=self.promotion_price,
            )
        )

    def unit_price(self, variation_price=None) -> float:
        """Price a buyer pays for one unit right now.

        A running promotion wins, then a non-zero variation price, then the
        article's list price.
        """
        if self.on_promotion and self.promotion_price:
            return float(self.promotion_price)
        if variation_price:
            return float(variation_price)
        return float(self.price)
