"""Roles, caller resolution from headers, and the ownership checks."""

import pytest
from marketplace.access.identity.header_adapter import TrustedHeaderIdentityProvider
from marketplace.access.policy import require_admin, require_any
from marketplace.access.roles import Caller, Role, parse_role
from marketplace.errors import Forbidden, Unauthenticated
from marketplace.ordering.order import OrderStatus
from protean.exceptions import ValidationError


class TestRoles:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("Buyer", Role.BUYER),
            ("client", Role.BUYER),
            ("Vendeur", Role.SELLER),
            ("livreur", Role.COURIER),
            ("Administrateur", Role.ADMINISTRATOR),
            ("ADMINISTRATOR", Role.ADMINISTRATOR),
        ],
    )
    def test_parse_role(self, label, expected):
        assert parse_role(label) == expected

    def test_unknown_role(self):
        with pytest.raises(ValidationError):
            parse_role("Superviseur")


class TestHeaderIdentity:
    def test_resolves_caller(self):
        caller = TrustedHeaderIdentityProvider().resolve({"X-User-Id": "u-1", "X-User-Role": "Livreur"})
        assert caller == Caller(user_id="u-1", role=Role.COURIER)

    def test_missing_user_is_unauthenticated(self):
        with pytest.raises(Unauthenticated):
            TrustedHeaderIdentityProvider().resolve({"X-User-Role": "Buyer"})

    def test_unknown_role_is_unauthenticated(self):
        with pytest.raises(Unauthenticated):
            TrustedHeaderIdentityProvider().resolve({"x-user-id": "u-1", "x-user-role": "Pirate"})


class TestPolicy:
    def test_admin_passes_every_check(self):
        require_any(Caller("admin-1", Role.ADMINISTRATOR), False, action="anything")

    def test_owner_passes(self):
        require_any(Caller("buyer-1", Role.BUYER), True, action="view")

    def test_others_are_forbidden(self):
        with pytest.raises(Forbidden):
            require_any(Caller("buyer-2", Role.BUYER), False, action="view")

    def test_require_admin(self):
        with pytest.raises(Forbidden):
            require_admin(Caller("seller-1", Role.SELLER), action="refund")


class TestOrderStatusLabels:
    @pytest.mark.parametrize(
        "label, expected",
        [
            ("En attente", OrderStatus.PENDING),
            ("en_preparation", OrderStatus.PREPARING),
            ("Prête pour livraison", OrderStatus.READY_FOR_DELIVERY),
            ("en_livraison", OrderStatus.IN_DELIVERY),
            ("Livrée", OrderStatus.DELIVERED),
            ("Annulée", OrderStatus.CANCELLED),
            ("remboursee", OrderStatus.REFUNDED),
            ("ready_for_delivery", OrderStatus.READY_FOR_DELIVERY),
        ],
    )
    def test_parse(self, label, expected):
        assert OrderStatus.parse(label) == expected
