"""Claim events."""

from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Claim")
class ClaimFiled:
    __version__ = 1

    claim_id = Identifier(required=True)
    order_id = Identifier(required=True)
    claimant_id = Identifier(required=True)
    filed_at = DateTime(required=True)


@marketplace.event(part_of="Claim")
class ClaimStatusChanged:
    __version__ = 1

    claim_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_by = Identifier()
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Claim")
class ClaimDetailsUpdated:
    __version__ = 1

    claim_id = Identifier(required=True)
    updated_at = DateTime(required=True)
