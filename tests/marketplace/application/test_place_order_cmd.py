"""Application tests for PlaceOrder via domain.process()."""

import json

import pytest
from marketplace.errors import ArticleNotFound, InsufficientStock, VariationNotFound
from marketplace.ordering.order import Order, OrderStatus
from marketplace.ordering.placement import PlaceOrder
from marketplace.stock.variation import Variation
from protean import current_domain
from protean.exceptions import ValidationError


def _stock_of(variation_id):
    return current_domain.repository_for(Variation).get(variation_id).stock


def _line(article_id, variation_id, quantity):
    return {"article_id": article_id, "variation_id": variation_id, "quantity": quantity}


class TestPlaceOrder:
    def test_order_for_all_remaining_stock(self, stocked_variation, place_order):
        article_id, variation_id = stocked_variation(stock=3)

        order_id = place_order([_line(article_id, variation_id, 3)])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.PENDING.value
        assert _stock_of(variation_id) == 0

    def test_repeating_the_order_fails(self, stocked_variation, place_order):
        article_id, variation_id = stocked_variation(stock=3)
        place_order([_line(article_id, variation_id, 3)])

        with pytest.raises(InsufficientStock):
            place_order([_line(article_id, variation_id, 3)])
        assert _stock_of(variation_id) == 0

    def test_buyer_is_the_caller(self, stocked_variation, place_order, buyer):
        article_id, variation_id = stocked_variation()
        order = current_domain.repository_for(Order).get(place_order([_line(article_id, variation_id, 1)]))
        assert str(order.buyer_id) == buyer["requested_by"]

    def test_lines_snapshot_catalog_price_and_seller(self, stocked_variation, place_order, seller):
        article_id, variation_id = stocked_variation(price=12000, variation_price=11000)

        order = current_domain.repository_for(Order).get(place_order([_line(article_id, variation_id, 2)]))

        line = order.lines[0]
        assert line.unit_price == 11000
        assert str(line.seller_id) == seller["requested_by"]
        assert line.service_fee == 600
        assert order.total_price == 22000 + 2500

    def test_order_numbers_follow_each_other(self, stocked_variation, place_order):
        article_id, variation_id = stocked_variation(stock=5)
        first = current_domain.repository_for(Order).get(place_order([_line(article_id, variation_id, 1)]))
        second = current_domain.repository_for(Order).get(place_order([_line(article_id, variation_id, 1)]))

        assert first.number.startswith("CMD-")
        assert int(second.number[-5:]) == int(first.number[-5:]) + 1

    def test_same_variation_on_two_lines_is_checked_as_a_whole(self, stocked_variation, place_order):
        article_id, variation_id = stocked_variation(stock=3)

        with pytest.raises(InsufficientStock):
            place_order([_line(article_id, variation_id, 2), _line(article_id, variation_id, 2)])
        assert _stock_of(variation_id) == 3


class TestAllOrNothing:
    def test_shortfall_on_one_line_leaves_every_stock_untouched(self, stocked_variation, place_order, other_seller):
        article_a, plenty = stocked_variation(stock=10)
        article_b, scarce = stocked_variation(stock=1, seller=other_seller)

        with pytest.raises(InsufficientStock):
            place_order([_line(article_a, plenty, 3), _line(article_b, scarce, 2)])

        assert _stock_of(plenty) == 10
        assert _stock_of(scarce) == 1
        assert current_domain.repository_for(Order).placed_by("buyer-1") == []


class TestCatalogFailures:
    def test_unknown_article(self, place_order):
        with pytest.raises(ArticleNotFound):
            place_order([_line("art-missing", None, 1)])

    def test_unknown_variation(self, stocked_variation, place_order):
        article_id, _ = stocked_variation()
        with pytest.raises(VariationNotFound):
            place_order([_line(article_id, "var-missing", 1)])

    def test_variation_of_another_article(self, stocked_variation, place_order):
        article_a, _ = stocked_variation()
        _, variation_b = stocked_variation()
        with pytest.raises(VariationNotFound):
            place_order([_line(article_a, variation_b, 1)])


class TestInvalidInput:
    @pytest.mark.parametrize(
        "lines",
        [
            "not json",
            json.dumps([]),
            json.dumps([{"article_id": "art-1", "quantity": 0}]),
            json.dumps([{"quantity": 1}]),
        ],
    )
    def test_malformed_lines(self, buyer, lines):
        with pytest.raises(ValidationError):
            current_domain.process(PlaceOrder(lines=lines, **buyer), asynchronous=False)


class TestNotifications:
    def test_buyer_and_seller_are_notified(self, stocked_variation, place_order, notifications):
        article_id, variation_id = stocked_variation()
        place_order([_line(article_id, variation_id, 1)])

        assert notifications.sent_to("buyer-1")
        assert notifications.sent_to("seller-1")

    def test_failing_sink_does_not_block_the_order(self, stocked_variation, place_order, notifications):
        notifications.configure(should_succeed=False)
        article_id, variation_id = stocked_variation(stock=2)

        order_id = place_order([_line(article_id, variation_id, 1)])

        assert current_domain.repository_for(Order).get(order_id).status == "pending"
        assert _stock_of(variation_id) == 1
