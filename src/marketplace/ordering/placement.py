"""PlaceOrder: turn a checked-out basket into a pending order.

Every line is priced from the catalog, then stock for the whole order is
reserved in one go. If any variation falls short nothing is reserved and
no order is stored.
"""

import json
from collections import defaultdict

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.access.roles import Caller
from marketplace.catalogue.lookup import get_catalog
from marketplace.domain import logger, marketplace
from marketplace.notifications import notify
from marketplace.ordering.numbering import next_order_number
from marketplace.ordering.order import Order
from marketplace.stock.ledger import StockLedger


@marketplace.command(part_of="Order")
class PlaceOrder:
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    lines = Text(required=True)  # JSON list of {article_id, variation_id?, quantity}
    delivery_address = String(max_length=255)
    comment = Text()
    deliverable = Boolean(default=True)


def _parse_lines(raw) -> list[dict]:
    try:
        lines = json.loads(raw) if isinstance(raw, str) else raw
    except (json.JSONDecodeError, TypeError):
        raise ValidationError({"lines": ["Lines must be valid JSON"]}) from None

    if not isinstance(lines, list) or not lines:
        raise ValidationError({"lines": ["An order needs at least one line"]})

    parsed = []
    for index, line in enumerate(lines):
        if not isinstance(line, dict) or not line.get("article_id"):
            raise ValidationError({"lines": [f"Line {index + 1} has no article"]})
        quantity = line.get("quantity")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValidationError({"lines": [f"Line {index + 1} needs a quantity of at least 1"]})
        parsed.append(
            {
                "article_id": str(line["article_id"]),
                "variation_id": str(line["variation_id"]) if line.get("variation_id") else None,
                "quantity": quantity,
            }
        )
    return parsed


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        caller = Caller.of(command)
        requested = _parse_lines(command.lines)

        catalog = get_catalog()
        priced = []
        demands = defaultdict(int)
        for line in requested:
            entry = catalog.lookup(line["article_id"], line["variation_id"])
            priced.append(
                {
                    "article_id": entry.article_id,
                    "variation_id": entry.variation_id,
                    "seller_id": entry.seller_id,
                    "quantity": line["quantity"],
                    "unit_price": entry.unit_price,
                }
            )
            if entry.variation_id:
                demands[entry.variation_id] += line["quantity"]

        order = Order.place(
            number=next_order_number(),
            buyer_id=caller.user_id,
            lines=priced,
            delivery_address=command.delivery_address,
            comment=command.comment,
            deliverable=command.deliverable,
        )

        StockLedger.from_domain().reserve_all(dict(demands), order_id=str(order.id))
        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            number=order.number,
            buyer_id=caller.user_id,
            total_price=order.total_price,
        )

        notify(
            caller.user_id,
            "Commande confirmée",
            f"Votre commande {order.number} a été enregistrée.",
            f"/orders/{order.id}",
        )
        for seller_id in sorted(order.seller_ids):
            notify(
                seller_id,
                "Nouvelle commande",
                f"La commande {order.number} contient vos articles.",
                f"/orders/{order.id}",
            )

        return str(order.id)
