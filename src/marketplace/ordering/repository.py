"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from marketplace.domain import marketplace
from marketplace.errors import OrderNotFound
from marketplace.ordering.order import Order


@marketplace.repository(part_of=Order)
class OrderRepository:
    def get_order(self, order_id) -> Order:
        try:
            return self.get(str(order_id))
        except ObjectNotFoundError:
            raise OrderNotFound(order_id) from None

    def placed_by(self, buyer_id) -> list[Order]:
        orders = self._dao.query.filter(buyer_id=str(buyer_id)).all().items
        return sorted(orders, key=lambda o: o.created_at, reverse=True)

    def remove(self, order: Order) -> None:
        self._dao.delete(order)
