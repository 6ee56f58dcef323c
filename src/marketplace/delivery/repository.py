"""Repository for the Delivery aggregate."""

from protean.exceptions import ObjectNotFoundError

from marketplace.delivery.delivery import Delivery
from marketplace.domain import marketplace
from marketplace.errors import DeliveryNotFound


@marketplace.repository(part_of=Delivery)
class DeliveryRepository:
    def get_delivery(self, delivery_id) -> Delivery:
        try:
            return self.get(str(delivery_id))
        except ObjectNotFoundError:
            raise DeliveryNotFound(delivery_id) from None

    def for_order(self, order_id) -> Delivery | None:
        return self._dao.query.filter(order_id=str(order_id)).all().first

    def assigned_to(self, courier_id) -> list[Delivery]:
        return self._dao.query.filter(courier_id=str(courier_id)).all().items

    def remove(self, delivery: Delivery) -> None:
        self._dao.delete(delivery)
