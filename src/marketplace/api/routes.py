"""FastAPI routes for the marketplace back office.

Each route resolves the caller, translates the request body into a command
and hands it to the domain. Reads go through the component query helpers,
which apply the same ownership rules as the commands.
"""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from marketplace.access.roles import Caller
from marketplace.api.dependencies import current_caller
from marketplace.api.schemas import (
    AddVariationRequest,
    AssignCourierRequest,
    ChangePromotionRequest,
    ClaimResponse,
    CreateDeliveryRequest,
    DeliveryResponse,
    FileClaimRequest,
    IdResponse,
    OrderResponse,
    PlaceOrderRequest,
    RegisterArticleRequest,
    SetStockLevelRequest,
    StatusResponse,
    StockLevelResponse,
    UpdateClaimDetailsRequest,
    UpdateClaimStatusRequest,
    UpdateDeliveryDetailsRequest,
    UpdateDeliveryStatusRequest,
    UpdateOrderStatusRequest,
)
from marketplace.api.views import claim_view, delivery_view, order_view
from marketplace.catalogue.listing import ChangeArticlePromotion, RegisterArticle
from marketplace.claims.queries import claim_for
from marketplace.claims.register import DeleteClaim, FileClaim, UpdateClaimDetails, UpdateClaimStatus
from marketplace.delivery.creation import CreateDelivery
from marketplace.delivery.queries import deliveries_assigned_to, delivery_for
from marketplace.delivery.removal import DeleteDelivery
from marketplace.delivery.tracking import AssignCourier, UpdateDeliveryDetails, UpdateDeliveryStatus
from marketplace.ordering.deletion import DeleteOrder
from marketplace.ordering.placement import PlaceOrder
from marketplace.ordering.queries import order_for, orders_of
from marketplace.ordering.transitions import UpdateOrderStatus
from marketplace.stock.ledger import StockLedger
from marketplace.stock.management import AddVariation, SetStockLevel
from marketplace.stock.reports import low_stock_report


def _requester(caller: Caller) -> dict:
    return {"requested_by": caller.user_id, "requester_role": caller.role.value}


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(current_caller)) -> OrderResponse:
    """Place an order for the calling buyer, reserving stock for every line."""
    command = PlaceOrder(
        lines=json.dumps([line.model_dump() for line in body.lines]),
        delivery_address=body.delivery_address,
        comment=body.comment,
        deliverable=body.deliverable,
        **_requester(caller),
    )
    order_id = current_domain.process(command, asynchronous=False)
    return order_view(order_for(caller, order_id))


@order_router.get("/mine", response_model=list[OrderResponse])
async def my_orders(caller: Caller = Depends(current_caller)) -> list[OrderResponse]:
    return [order_view(order) for order in orders_of(caller)]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, caller: Caller = Depends(current_caller)) -> OrderResponse:
    return order_view(order_for(caller, order_id))


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, caller: Caller = Depends(current_caller)
) -> OrderResponse:
    """Move an order to preparing, cancelled or refunded."""
    command = UpdateOrderStatus(order_id=order_id, status=body.status, reason=body.reason, **_requester(caller))
    current_domain.process(command, asynchronous=False)
    return order_view(order_for(caller, order_id))


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def delete_order(order_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    """Delete a pending or cancelled order with its delivery and claims."""
    current_domain.process(DeleteOrder(order_id=order_id, **_requester(caller)), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


@delivery_router.post("", status_code=201, response_model=DeliveryResponse)
async def create_delivery(body: CreateDeliveryRequest, caller: Caller = Depends(current_caller)) -> DeliveryResponse:
    command = CreateDelivery(
        order_id=body.order_id,
        address=body.address,
        city=body.city,
        phone=body.phone,
        scheduled_for=body.scheduled_for,
        details=body.details,
        courier_id=body.courier_id,
        **_requester(caller),
    )
    delivery_id = current_domain.process(command, asynchronous=False)
    return delivery_view(delivery_for(caller, delivery_id))


@delivery_router.get("/assigned", response_model=list[DeliveryResponse])
async def assigned_deliveries(caller: Caller = Depends(current_caller)) -> list[DeliveryResponse]:
    return [delivery_view(delivery) for delivery in deliveries_assigned_to(caller)]


@delivery_router.get("/{delivery_id}", response_model=DeliveryResponse)
async def get_delivery(delivery_id: str, caller: Caller = Depends(current_caller)) -> DeliveryResponse:
    return delivery_view(delivery_for(caller, delivery_id))


@delivery_router.put("/{delivery_id}/status", response_model=DeliveryResponse)
async def update_delivery_status(
    delivery_id: str, body: UpdateDeliveryStatusRequest, caller: Caller = Depends(current_caller)
) -> DeliveryResponse:
    """Record delivery progress; the order follows in_progress and delivered."""
    command = UpdateDeliveryStatus(delivery_id=delivery_id, status=body.status, **_requester(caller))
    current_domain.process(command, asynchronous=False)
    return delivery_view(delivery_for(caller, delivery_id))


@delivery_router.put("/{delivery_id}/courier", response_model=DeliveryResponse)
async def assign_courier(
    delivery_id: str, body: AssignCourierRequest, caller: Caller = Depends(current_caller)
) -> DeliveryResponse:
    command = AssignCourier(delivery_id=delivery_id, courier_id=body.courier_id, **_requester(caller))
    current_domain.process(command, asynchronous=False)
    return delivery_view(delivery_for(caller, delivery_id))


@delivery_router.put("/{delivery_id}", response_model=DeliveryResponse)
async def update_delivery_details(
    delivery_id: str, body: UpdateDeliveryDetailsRequest, caller: Caller = Depends(current_caller)
) -> DeliveryResponse:
    command = UpdateDeliveryDetails(delivery_id=delivery_id, **body.model_dump(), **_requester(caller))
    current_domain.process(command, asynchronous=False)
    return delivery_view(delivery_for(caller, delivery_id))


@delivery_router.delete("/{delivery_id}", response_model=StatusResponse)
async def delete_delivery(delivery_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    current_domain.process(DeleteDelivery(delivery_id=delivery_id, **_requester(caller)), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Claim Router
# ---------------------------------------------------------------------------
claim_router = APIRouter(prefix="/claims", tags=["claims"])


@claim_router.post("", status_code=201, response_model=ClaimResponse)
async def file_claim(body: FileClaimRequest, caller: Caller = Depends(current_caller)) -> ClaimResponse:
    command = FileClaim(
        order_id=body.order_id,
        description=body.description,
        phone=body.phone,
        **_requester(caller),
    )
    claim_id = current_domain.process(command, asynchronous=False)
    return claim_view(claim_for(caller, claim_id))


@claim_router.get("/{claim_id}", response_model=ClaimResponse)
async def get_claim(claim_id: str, caller: Caller = Depends(current_caller)) -> ClaimResponse:
    return claim_view(claim_for(caller, claim_id))


@claim_router.put("/{claim_id}/status", response_model=ClaimResponse)
async def update_claim_status(
    claim_id: str, body: UpdateClaimStatusRequest, caller: Caller = Depends(current_caller)
) -> ClaimResponse:
    command = UpdateClaimStatus(claim_id=claim_id, status=body.status, **_requester(caller))
    current_domain.process(command, asynchronous=False)
    return claim_view(claim_for(caller, claim_id))


@claim_router.put("/{claim_id}", response_model=ClaimResponse)
async def update_claim_details(
    claim_id: str, body: UpdateClaimDetailsRequest, caller: Caller = Depends(current_caller)
) -> ClaimResponse:
    command = UpdateClaimDetails(
        claim_id=claim_id,
        description=body.description,
        phone=body.phone,
        **_requester(caller),
    )
    current_domain.process(command, asynchronous=False)
    return claim_view(claim_for(caller, claim_id))


@claim_router.delete("/{claim_id}", response_model=StatusResponse)
async def delete_claim(claim_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    current_domain.process(DeleteClaim(claim_id=claim_id, **_requester(caller)), asynchronous=False)
    return StatusResponse(status="deleted")


# ---------------------------------------------------------------------------
# Article and Stock Routers
# ---------------------------------------------------------------------------
article_router = APIRouter(prefix="/articles", tags=["articles"])
stock_router = APIRouter(prefix="/stock", tags=["stock"])


@article_router.post("", status_code=201, response_model=IdResponse)
async def register_article(body: RegisterArticleRequest, caller: Caller = Depends(current_caller)) -> IdResponse:
    command = RegisterArticle(
        title=body.title,
        price=body.price,
        promotion_price=body.promotion_price,
        on_promotion=body.on_promotion,
        seller_id=body.seller_id,
        **_requester(caller),
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@article_router.put("/{article_id}/promotion", response_model=IdResponse)
async def change_promotion(
    article_id: str, body: ChangePromotionRequest, caller: Caller = Depends(current_caller)
) -> IdResponse:
    command = ChangeArticlePromotion(
        article_id=article_id,
        on_promotion=body.on_promotion,
        promotion_price=body.promotion_price,
        **_requester(caller),
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@article_router.post("/{article_id}/variations", status_code=201, response_model=IdResponse)
async def add_variation(
    article_id: str, body: AddVariationRequest, caller: Caller = Depends(current_caller)
) -> IdResponse:
    command = AddVariation(
        article_id=article_id,
        color=body.color,
        size=body.size,
        price=body.price,
        stock=body.stock,
        **_requester(caller),
    )
    return IdResponse(id=current_domain.process(command, asynchronous=False))


@stock_router.get("/low")
async def low_stock(
    threshold: int | None = Query(default=None, ge=0),
    kind: str = Query(default="all", alias="type"),
    caller: Caller = Depends(current_caller),
) -> dict:
    """Variations at or below the threshold, lowest first."""
    return low_stock_report(caller, threshold=threshold, kind=kind)


@stock_router.put("/{variation_id}", response_model=StockLevelResponse)
async def set_stock_level(
    variation_id: str, body: SetStockLevelRequest, caller: Caller = Depends(current_caller)
) -> StockLevelResponse:
    command = SetStockLevel(variation_id=variation_id, stock=body.stock, **_requester(caller))
    current_domain.process(command, asynchronous=False)
    return StockLevelResponse(variation_id=variation_id, stock=StockLedger.from_domain().available(variation_id))
