import pytest
from marketplace.catalogue.article import Article
from marketplace.errors import InsufficientStock
from marketplace.stock.events import StockLevelSet, StockReleased, StockReserved, VariationAdded
from marketplace.stock.record import StockMovement, StockRecord
from marketplace.stock.variation import Variation
from protean.exceptions import ValidationError


def _make_variation(stock=3, price=0.0):
    return Variation.add(article_id="art-1", seller_id="seller-1", stock=stock, color="Bleu", size="L", price=price)


class TestVariation:
    def test_add_raises_variation_added(self):
        variation = _make_variation()
        assert isinstance(variation._events[0], VariationAdded)
        assert variation._events[0].stock == 3

    def test_reserve_decrements(self):
        variation = _make_variation(stock=3)
        variation.reserve(3, order_id="ord-1")

        assert variation.stock == 0
        event = variation._events[-1]
        assert isinstance(event, StockReserved)
        assert event.remaining == 0
        assert event.order_id == "ord-1"

    def test_reserve_beyond_stock_fails_and_changes_nothing(self):
        variation = _make_variation(stock=2)
        with pytest.raises(InsufficientStock) as exc_info:
            variation.reserve(3)

        assert exc_info.value.requested == 3
        assert exc_info.value.available == 2
        assert variation.stock == 2

    def test_reserve_needs_positive_quantity(self):
        with pytest.raises(ValidationError):
            _make_variation().reserve(0)

    def test_release_increments(self):
        variation = _make_variation(stock=1)
        variation.release(2, order_id="ord-1")

        assert variation.stock == 3
        assert isinstance(variation._events[-1], StockReleased)

    def test_set_level(self):
        variation = _make_variation(stock=1)
        variation.set_level(10, set_by="seller-1")

        assert variation.stock == 10
        event = variation._events[-1]
        assert isinstance(event, StockLevelSet)
        assert event.previous == 1

    def test_set_level_rejects_negative(self):
        with pytest.raises(ValidationError):
            _make_variation().set_level(-1)


class TestStockRecord:
    def test_track_starts_with_initial_movement(self):
        record = StockRecord.track("var-1", 4)
        assert record.quantity == 4
        assert record.last_movement == StockMovement.INITIAL.value

    def test_mirror_keeps_last_change(self):
        record = StockRecord.track("var-1", 4)
        record.mirror(1, StockMovement.RESERVATION)

        assert record.quantity == 1
        assert record.last_change == -3
        assert record.last_movement == "reservation"


class TestArticleUnitPrice:
    def _make_article(self, **overrides):
        defaults = {"seller_id": "seller-1", "title": "Sac", "price": 20000}
        defaults.update(overrides)
        return Article.register(**defaults)

    def test_list_price_by_default(self):
        assert self._make_article().unit_price() == 20000

    def test_variation_price_overrides_list_price(self):
        assert self._make_article().unit_price(variation_price=18000) == 18000

    def test_zero_variation_price_is_ignored(self):
        assert self._make_article().unit_price(variation_price=0) == 20000

    def test_promotion_wins(self):
        article = self._make_article(on_promotion=True, promotion_price=15000)
        assert article.unit_price(variation_price=18000) == 15000

    def test_promotion_requires_promotion_price(self):
        with pytest.raises(ValidationError):
            self._make_article(on_promotion=True)

    def test_ending_promotion(self):
        article = self._make_article(on_promotion=True, promotion_price=15000)
        article.change_promotion(False)
        assert article.unit_price() == 20000
