from datetime import UTC, datetime, timedelta

import pytest
from marketplace.delivery.delivery import ORDER_STATUS_FOR_DELIVERY, Delivery, DeliveryStatus
from marketplace.delivery.events import CourierAssigned, DeliveryStatusChanged
from marketplace.errors import DeliveryAlreadyCompleted, TerminalStateViolation
from marketplace.ordering.order import OrderStatus
from protean.exceptions import ValidationError


def _make_delivery(**overrides):
    defaults = {
        "order_id": "ord-1",
        "buyer_id": "buyer-1",
        "address": "Quartier Louis",
        "city": "Libreville",
        "phone": "+24174000000",
        "scheduled_for": datetime.now(UTC) + timedelta(days=1),
    }
    defaults.update(overrides)
    delivery = Delivery.create(**defaults)
    delivery._events.clear()
    return delivery


class TestStatusVocabulary:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("in_progress", DeliveryStatus.IN_PROGRESS),
            ("In progress", DeliveryStatus.IN_PROGRESS),
            ("En cours de livraison", DeliveryStatus.IN_PROGRESS),
            ("Livrée", DeliveryStatus.DELIVERED),
            ("LIVRE", DeliveryStatus.DELIVERED),
            ("delivered", DeliveryStatus.DELIVERED),
            ("En attente", DeliveryStatus.PENDING),
            ("Annulée", DeliveryStatus.CANCELLED),
            ("Reportée", DeliveryStatus.POSTPONED),
        ],
    )
    def test_legacy_labels(self, label, expected):
        assert DeliveryStatus.parse(label) == expected

    @pytest.mark.parametrize("label", ["", "on the moon", "presque livrée"])
    def test_unknown_labels_are_rejected(self, label):
        with pytest.raises(ValidationError) as exc_info:
            DeliveryStatus.parse(label)
        assert "status" in exc_info.value.messages


class TestOrderMapping:
    def test_only_progress_and_completion_drive_the_order(self):
        assert ORDER_STATUS_FOR_DELIVERY == {
            DeliveryStatus.IN_PROGRESS: OrderStatus.IN_DELIVERY,
            DeliveryStatus.DELIVERED: OrderStatus.DELIVERED,
        }

    @pytest.mark.parametrize("status", [DeliveryStatus.PENDING, DeliveryStatus.CANCELLED, DeliveryStatus.POSTPONED])
    def test_other_statuses_imply_nothing(self, status):
        delivery = _make_delivery()
        delivery.change_status(status)
        assert delivery.order_status() is None


class TestDeliveryLifecycle:
    def test_created_pending(self):
        assert _make_delivery().status == DeliveryStatus.PENDING.value

    def test_change_status(self):
        delivery = _make_delivery()
        assert delivery.change_status(DeliveryStatus.POSTPONED) is True
        assert isinstance(delivery._events[-1], DeliveryStatusChanged)

    def test_same_status_is_not_a_change(self):
        delivery = _make_delivery()
        assert delivery.change_status(DeliveryStatus.PENDING) is False
        assert delivery._events == []

    def test_assigning_courier_puts_delivery_on_the_road(self):
        delivery = _make_delivery()
        delivery.assign_courier("courier-1")

        assert str(delivery.courier_id) == "courier-1"
        assert delivery.status == DeliveryStatus.IN_PROGRESS.value
        assert delivery.order_status() == OrderStatus.IN_DELIVERY
        assert isinstance(delivery._events[0], CourierAssigned)

    def test_delivered_is_terminal(self):
        delivery = _make_delivery()
        delivery.change_status(DeliveryStatus.DELIVERED)

        with pytest.raises(TerminalStateViolation):
            delivery.change_status(DeliveryStatus.POSTPONED)
        with pytest.raises(TerminalStateViolation):
            delivery.assign_courier("courier-2")

    def test_completed_delivery_is_not_removable(self):
        delivery = _make_delivery()
        delivery.assert_removable()
        delivery.change_status(DeliveryStatus.DELIVERED)

        with pytest.raises(DeliveryAlreadyCompleted):
            delivery.assert_removable()

    def test_update_details(self):
        delivery = _make_delivery()
        delivery.update_details(city="Akanda", phone="+24166000000")

        assert delivery.city == "Akanda"
        assert delivery.phone == "+24166000000"
        assert delivery.address == "Quartier Louis"

    def test_update_details_needs_a_change(self):
        with pytest.raises(ValidationError):
            _make_delivery().update_details()
