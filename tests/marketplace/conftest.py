import os
from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain

ADMIN = {"requested_by": "admin-1", "requester_role": "Administrator"}
BUYER = {"requested_by": "buyer-1", "requester_role": "Buyer"}
OTHER_BUYER = {"requested_by": "buyer-2", "requester_role": "Buyer"}
SELLER = {"requested_by": "seller-1", "requester_role": "Seller"}
OTHER_SELLER = {"requested_by": "seller-2", "requester_role": "Seller"}
COURIER = {"requested_by": "courier-1", "requester_role": "Courier"}


@pytest.fixture(scope="session")
def _marketplace_domain(request):
    """Initialize the marketplace domain once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from marketplace.domain import marketplace

    marketplace.init()
    return marketplace


@pytest.fixture(scope="session", autouse=True)
def setup_db(_marketplace_domain):
    from marketplace.utils.db import drop_db, setup_db

    setup_db(_marketplace_domain)

    yield

    drop_db(_marketplace_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_marketplace_domain):
    """Push domain context before each test, cleanup after."""
    from marketplace.access.identity import reset_identity_provider
    from marketplace.catalogue.lookup import reset_catalog
    from marketplace.notifications import reset_notification_sink

    reset_notification_sink()
    ctx = _marketplace_domain.domain_context()
    ctx.push()

    yield

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()

    reset_catalog()
    reset_identity_provider()
    reset_notification_sink()


# ---------------------------------------------------------------------------
# Callers
# ---------------------------------------------------------------------------
@pytest.fixture()
def admin():
    return dict(ADMIN)


@pytest.fixture()
def buyer():
    return dict(BUYER)


@pytest.fixture()
def other_buyer():
    return dict(OTHER_BUYER)


@pytest.fixture()
def seller():
    return dict(SELLER)


@pytest.fixture()
def other_seller():
    return dict(OTHER_SELLER)


@pytest.fixture()
def courier():
    return dict(COURIER)


@pytest.fixture()
def notifications():
    from marketplace.notifications import get_notification_sink

    return get_notification_sink()


# ---------------------------------------------------------------------------
# Catalogue and orders
# ---------------------------------------------------------------------------
@pytest.fixture()
def stocked_variation():
    """Factory: register an article for a seller and add one variation to it.

    Returns ``(article_id, variation_id)``.
    """
    from marketplace.catalogue.listing import RegisterArticle
    from marketplace.stock.management import AddVariation

    def _make(stock=3, price=10000.0, variation_price=0.0, seller=SELLER, **article_kwargs):
        article_id = current_domain.process(
            RegisterArticle(title="Pagne wax", price=price, **article_kwargs, **seller),
            asynchronous=False,
        )
        variation_id = current_domain.process(
            AddVariation(article_id=article_id, color="Rouge", size="M", price=variation_price, stock=stock, **seller),
            asynchronous=False,
        )
        return article_id, variation_id

    return _make


@pytest.fixture()
def place_order():
    """Factory: place an order and return its id."""
    import json

    from marketplace.ordering.placement import PlaceOrder

    def _place(lines, requester=BUYER, address="Quartier Louis, Libreville", deliverable=True):
        return current_domain.process(
            PlaceOrder(
                lines=json.dumps(lines),
                delivery_address=address,
                deliverable=deliverable,
                **requester,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def pending_order(stocked_variation, place_order):
    """A pending order for 2 units of a variation that had 5 in stock.

    Returns ``(order_id, variation_id)``.
    """
    article_id, variation_id = stocked_variation(stock=5)
    order_id = place_order([{"article_id": article_id, "variation_id": variation_id, "quantity": 2}])
    return order_id, variation_id


@pytest.fixture()
def create_delivery():
    """Factory: create the delivery of an order and return its id."""
    from marketplace.delivery.creation import CreateDelivery

    def _create(order_id, requester=ADMIN, courier_id=None):
        return current_domain.process(
            CreateDelivery(
                order_id=order_id,
                address="Quartier Louis",
                city="Libreville",
                phone="+24174000000",
                scheduled_for=datetime.now(UTC) + timedelta(days=1),
                courier_id=courier_id,
                **requester,
            ),
            asynchronous=False,
        )

    return _create
