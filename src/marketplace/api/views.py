"""Aggregate to response-schema conversion."""

from marketplace.api.schemas import ClaimResponse, DeliveryResponse, OrderLineResponse, OrderResponse


def _opt(value):
    return str(value) if value else None


def order_view(order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        number=order.number,
        buyer_id=str(order.buyer_id),
        status=order.status,
        lines=[
            OrderLineResponse(
                id=str(line.id),
                article_id=str(line.article_id),
                variation_id=_opt(line.variation_id),
                seller_id=str(line.seller_id),
                quantity=line.quantity,
                unit_price=line.unit_price,
                service_fee=line.service_fee,
            )
            for line in order.lines
        ],
        delivery_address=order.delivery_address,
        comment=order.comment,
        deliverable=bool(order.deliverable),
        subtotal=order.subtotal,
        delivery_fee=order.delivery_fee,
        total_price=order.total_price,
        created_at=order.created_at,
    )


def delivery_view(delivery) -> DeliveryResponse:
    return DeliveryResponse(
        id=str(delivery.id),
        order_id=str(delivery.order_id),
        buyer_id=str(delivery.buyer_id),
        courier_id=_opt(delivery.courier_id),
        address=delivery.address,
        details=delivery.details,
        city=delivery.city,
        phone=delivery.phone,
        scheduled_for=delivery.scheduled_for,
        status=delivery.status,
    )


def claim_view(claim) -> ClaimResponse:
    return ClaimResponse(
        id=str(claim.id),
        order_id=str(claim.order_id),
        claimant_id=str(claim.claimant_id),
        description=claim.description,
        phone=claim.phone,
        status=claim.status,
        created_at=claim.created_at,
    )
