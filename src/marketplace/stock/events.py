"""Stock events: every change to a variation's available quantity."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Variation")
class VariationAdded:
    __version__ = 1

    variation_id = Identifier(required=True)
    article_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    color = String()
    size = String()
    stock = Integer(required=True)
    added_at = DateTime(required=True)


@marketplace.event(part_of="Variation")
class StockReserved:
    """Stock was committed to an order."""

    __version__ = 1

    variation_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    remaining = Integer(required=True)
    reserved_at = DateTime(required=True)


@marketplace.event(part_of="Variation")
class StockReleased:
    """Previously reserved stock returned to the shelf."""

    __version__ = 1

    variation_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    remaining = Integer(required=True)
    released_at = DateTime(required=True)


@marketplace.event(part_of="Variation")
class StockLevelSet:
    __version__ = 1

    variation_id = Identifier(required=True)
    previous = Integer(required=True)
    stock = Integer(required=True)
    set_by = Identifier()
    set_at = DateTime(required=True)
