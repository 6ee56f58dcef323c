"""Application tests for the claim commands."""

import pytest
from marketplace.access.roles import Caller, Role
from marketplace.claims.claim import Claim, ClaimStatus
from marketplace.claims.queries import claim_for
from marketplace.claims.register import DeleteClaim, FileClaim, UpdateClaimDetails, UpdateClaimStatus
from marketplace.delivery.delivery import Delivery
from marketplace.errors import ClaimNotFound, Forbidden, OrderNotFound
from marketplace.ordering.order import Order, OrderStatus
from protean import current_domain
from protean.exceptions import ValidationError

def _file(order_id, requester, description="Le pagne est déchiré", phone="+24174000000"):
    return current_domain.process(
        FileClaim(order_id=order_id, description=description, phone=phone, **requester),
        asynchronous=False,
    )

def _claim(claim_id):
    return current_domain.repository_for(Claim).get(claim_id)

class TestFileClaim:
    def test_buyer_files_a_claim(self, pending_order, buyer, notifications):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        claim = _claim(claim_id)
        assert claim.status == ClaimStatus.PENDING_REVIEW.value
        assert str(claim.claimant_id) == "buyer-1"
        assert str(claim.order_id) == order_id
        assert any(n["title"] == "Réclamation enregistrée" for n in notifications.sent_to("buyer-1"))

    def test_other_buyer_cannot_claim(self, pending_order, other_buyer):
        order_id, _ = pending_order
        with pytest.raises(Forbidden):
            _file(order_id, other_buyer)

    def test_seller_cannot_claim(self, pending_order, seller):
        order_id, _ = pending_order
        with pytest.raises(Forbidden):
            _file(order_id, seller)

    def test_blank_description(self, pending_order, buyer):
        order_id, _ = pending_order
        with pytest.raises(ValidationError):
            _file(order_id, buyer, description="   ")

    def test_unknown_order(self, buyer):
        with pytest.raises(OrderNotFound):
            _file("ord-missing", buyer)

class TestClaimStatus:
    def test_admin_moves_claim_along(self, pending_order, buyer, admin, notifications):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        current_domain.process(UpdateClaimStatus(claim_id=claim_id, status="En cours", **admin), asynchronous=False)

        assert _claim(claim_id).status == ClaimStatus.IN_PROGRESS.value
        assert any(n["title"] == "Suivi de réclamation" for n in notifications.sent_to("buyer-1"))

    def test_refunded_claim_leaves_order_and_delivery_alone(self, pending_order, buyer, admin, create_delivery):
        order_id, _ = pending_order
        delivery_id = create_delivery(order_id)
        claim_id = _file(order_id, buyer)

        current_domain.process(UpdateClaimStatus(claim_id=claim_id, status="refunded", **admin), asynchronous=False)

        assert _claim(claim_id).status == ClaimStatus.REFUNDED.value
        assert current_domain.repository_for(Order).get(order_id).status == OrderStatus.READY_FOR_DELIVERY.value
        assert current_domain.repository_for(Delivery).get(delivery_id).status == "pending"

    def test_buyer_cannot_change_status(self, pending_order, buyer):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        with pytest.raises(Forbidden):
            current_domain.process(
                UpdateClaimStatus(claim_id=claim_id, status="rejected", **buyer),
                asynchronous=False,
            )

    def test_unknown_status(self, pending_order, buyer, admin):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateClaimStatus(claim_id=claim_id, status="escalated", **admin),
                asynchronous=False,
            )

class TestClaimantEdits:
    def test_claimant_updates_details(self, pending_order, buyer):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        current_domain.process(
            UpdateClaimDetails(claim_id=claim_id, phone="+24177000000", **buyer),
            asynchronous=False,
        )

        claim = _claim(claim_id)
        assert claim.phone == "+24177000000"
        assert claim.description == "Le pagne est déchiré"

    def test_admin_cannot_edit_someone_elses_claim(self, pending_order, buyer, admin):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        with pytest.raises(Forbidden):
            current_domain.process(
                UpdateClaimDetails(claim_id=claim_id, description="Autre chose", **admin),
                asynchronous=False,
            )

    def test_claimant_deletes_claim(self, pending_order, buyer):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        current_domain.process(DeleteClaim(claim_id=claim_id, **buyer), asynchronous=False)

        assert current_domain.repository_for(Claim).for_order(order_id) == []
        with pytest.raises(ClaimNotFound):
            claim_for(Caller(user_id="buyer-1", role=Role.BUYER), claim_id)

    def test_other_user_cannot_delete(self, pending_order, buyer, other_buyer):
        order_id, _ = pending_order
        claim_id = _file(order_id, buyer)

        with pytest.raises(Forbidden):
            current_domain.process(DeleteClaim(claim_id=claim_id, **other_buyer), asynchronous=False)
