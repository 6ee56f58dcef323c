"""Repositories for variations and their stock records."""

from protean.exceptions import ObjectNotFoundError

from marketplace.domain import marketplace
from marketplace.errors import VariationNotFound
from marketplace.stock.record import StockRecord
from marketplace.stock.variation import Variation


@marketplace.repository(part_of=Variation)
class VariationRepository:
    def get_variation(self, variation_id) -> Variation:
        try:
            return self.get(str(variation_id))
        except ObjectNotFoundError:
            raise VariationNotFound(variation_id) from None

    def of_article(self, article_id) -> list[Variation]:
        return self._dao.query.filter(article_id=str(article_id)).all().items

    def belonging_to(self, seller_id) -> list[Variation]:
        return self._dao.query.filter(seller_id=str(seller_id)).all().items

    def all_variations(self) -> list[Variation]:
        return self._dao.query.all().items


@marketplace.repository(part_of=StockRecord)
class StockRecordRepository:
    def for_variation(self, variation_id) -> StockRecord | None:
        return self._dao.query.filter(variation_id=str(variation_id)).all().first
