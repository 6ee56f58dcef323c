"""Catalog port: read-only pricing and ownership lookups for order lines."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogEntry:
    article_id: str
    variation_id: str | None
    seller_id: str
    unit_price: float


class CatalogPort(ABC):
    @abstractmethod
    def lookup(self, article_id: str, variation_id: str | None = None) -> CatalogEntry:
        """Return the current price and owning seller of an article (or one of its variations).

        Raises ``ArticleNotFound`` or ``VariationNotFound``.
        """
        ...
