"""Order pricing: per-line service fees and the delivery fee.

Amounts are in XAF. The service fee is withheld from the seller and is not
added to what the buyer pays.
"""

from collections.abc import Iterable

# (exclusive upper bound on unit price, fee per unit)
SERVICE_FEE_TIERS = ((15000, 300), (50000, 500))
TOP_SERVICE_FEE = 1000

DELIVERY_BASE_FEES = {"libreville": 2500, "akanda": 2000, "owendo": 3000}
DEFAULT_DELIVERY_BASE_FEE = 3000
DELIVERY_FEE_CAP = 8000


def service_fee(unit_price: float, quantity: int) -> float:
    for bound, fee in SERVICE_FEE_TIERS:
        if unit_price < bound:
            return float(fee * quantity)
    return float(TOP_SERVICE_FEE * quantity)


def delivery_base_fee(address: str | None) -> int:
    text = (address or "").lower()
    for city, fee in DELIVERY_BASE_FEES.items():
        if city in text:
            return fee
    return DEFAULT_DELIVERY_BASE_FEE


def delivery_fee(address: str | None, seller_ids: Iterable[str]) -> float:
    """Base fee for the destination, once per distinct seller, capped."""
    sellers = len(set(seller_ids))
    if sellers == 0:
        return 0.0
    return float(min(delivery_base_fee(address) * sellers, DELIVERY_FEE_CAP))
