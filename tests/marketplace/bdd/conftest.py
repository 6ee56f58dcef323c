"""Shared BDD steps for the marketplace."""

import pytest
from marketplace.ordering.order import Order
from marketplace.stock.variation import Variation
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def outcome():
    """Holds the error raised by the last When step, if any."""
    return {}


@given(
    parsers.cfparse('seller "{seller_id}" lists an article with {stock:d} units in stock'),
    target_fixture="listed",
)
def _(stocked_variation, seller_id, stock):
    article_id, variation_id = stocked_variation(
        stock=stock,
        seller={"requested_by": seller_id, "requester_role": "Seller"},
    )
    return {"article_id": article_id, "variation_id": variation_id}


@then(parsers.cfparse('the order is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse("{stock:d} units remain in stock"))
def _(listed, stock):
    assert current_domain.repository_for(Variation).get(listed["variation_id"]).stock == stock
