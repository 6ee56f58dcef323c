"""Pydantic request/response schemas for the marketplace API.

These are the external contract; commands stay internal.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class OrderLineRequest(BaseModel):
    article_id: str
    variation_id: str | None = None
    quantity: int = Field(ge=1)


class PlaceOrderRequest(BaseModel):
    lines: list[OrderLineRequest] = Field(min_length=1)
    delivery_address: str | None = None
    comment: str | None = None
    deliverable: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "lines": [{"article_id": "art-001", "variation_id": "var-001", "quantity": 2}],
                    "delivery_address": "Quartier Louis, Libreville",
                    "comment": "Appeler avant de livrer",
                    "deliverable": True,
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str
    reason: str | None = None


class OrderLineResponse(BaseModel):
    id: str
    article_id: str
    variation_id: str | None = None
    seller_id: str
    quantity: int
    unit_price: float
    service_fee: float


class OrderResponse(BaseModel):
    id: str
    number: str
    buyer_id: str
    status: str
    lines: list[OrderLineResponse]
    delivery_address: str | None = None
    comment: str | None = None
    deliverable: bool
    subtotal: float
    delivery_fee: float
    total_price: float
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Deliveries
# ---------------------------------------------------------------------------
class CreateDeliveryRequest(BaseModel):
    order_id: str
    address: str
    city: str
    phone: str
    scheduled_for: datetime
    details: str | None = None
    courier_id: str | None = None


class UpdateDeliveryStatusRequest(BaseModel):
    status: str


class AssignCourierRequest(BaseModel):
    courier_id: str


class UpdateDeliveryDetailsRequest(BaseModel):
    address: str | None = None
    details: str | None = None
    city: str | None = None
    phone: str | None = None
    scheduled_for: datetime | None = None


class DeliveryResponse(BaseModel):
    id: str
    order_id: str
    buyer_id: str
    courier_id: str | None = None
    address: str
    details: str | None = None
    city: str
    phone: str
    scheduled_for: datetime
    status: str


# ---------------------------------------------------------------------------
# Claims
# ---------------------------------------------------------------------------
class FileClaimRequest(BaseModel):
    order_id: str
    description: str = Field(min_length=1)
    phone: str


class UpdateClaimStatusRequest(BaseModel):
    status: str


class UpdateClaimDetailsRequest(BaseModel):
    description: str | None = None
    phone: str | None = None


class ClaimResponse(BaseModel):
    id: str
    order_id: str
    claimant_id: str
    description: str
    phone: str
    status: str
    created_at: datetime | None = None


# ---------------------------------------------------------------------------
# Catalogue and stock
# ---------------------------------------------------------------------------
class RegisterArticleRequest(BaseModel):
    title: str
    price: float = Field(ge=0)
    promotion_price: float | None = Field(default=None, ge=0)
    on_promotion: bool = False
    seller_id: str | None = None


class ChangePromotionRequest(BaseModel):
    on_promotion: bool
    promotion_price: float | None = Field(default=None, ge=0)


class AddVariationRequest(BaseModel):
    color: str | None = None
    size: str | None = None
    price: float = Field(default=0.0, ge=0)
    stock: int = Field(default=0, ge=0)


class SetStockLevelRequest(BaseModel):
    stock: int = Field(ge=0)


class StockLevelResponse(BaseModel):
    variation_id: str
    stock: int


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class IdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str = "ok"
