"""Variation aggregate: a purchasable color/size variant of an article.

Owns the available stock. The stock only changes through ``reserve``,
``release`` and ``set_level``, all driven by the stock ledger.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.errors import InsufficientStock
from marketplace.stock.events import StockLevelSet, StockReleased, StockReserved, VariationAdded


@marketplace.aggregate
class Variation:
    article_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    color = String(max_length=100)
    size = String(max_length=50)
    price = Float(min_value=0.0, default=0.0)
    stock = Integer(default=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def stock_cannot_be_negative(self):
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

    @classmethod
    def add(cls, article_id, seller_id, stock=0, color=None, size=None, price=0.0):
        now = datetime.now(UTC)
        variation = cls(
            article_id=article_id,
            seller_id=seller_id,
            color=color,
            size=size,
            price=price or 0.0,
            stock=stock,
            created_at=now,
            updated_at=now,
        )
        variation.raise_(
            VariationAdded(
                variation_id=str(variation.id),
                article_id=str(article_id),
                seller_id=str(seller_id),
                color=color,
                size=size,
                stock=stock,
                added_at=now,
            )
        )
        return variation

    def reserve(self, quantity: int, order_id=None):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        if self.stock < quantity:
            raise InsufficientStock(self.id, requested=quantity, available=self.stock)

        now = datetime.now(UTC)
        self.stock -= quantity
        self.updated_at = now
        self.raise_(
            StockReserved(
                variation_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                remaining=self.stock,
                reserved_at=now,
            )
        )

    def release(self, quantity: int, order_id=None):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        self.stock += quantity
        self.updated_at = now
        self.raise_(
            StockReleased(
                variation_id=str(self.id),
                order_id=str(order_id) if order_id else None,
                quantity=quantity,
                remaining=self.stock,
                released_at=now,
            )
        )

    def set_level(self, quantity: int, set_by=None):
        if quantity < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})

        now = datetime.now(UTC)
        previous = self.stock
        self.stock = quantity
        self.updated_at = now
        self.raise_(
            StockLevelSet(
                variation_id=str(self.id),
                previous=previous,
                stock=quantity,
                set_by=str(set_by) if set_by else None,
                set_at=now,
            )
        )
