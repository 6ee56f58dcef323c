"""Claim aggregate: a buyer's dispute about one of their orders.

A claim's status never touches the order or its delivery.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from marketplace.claims.events import ClaimDetailsUpdated, ClaimFiled, ClaimStatusChanged
from marketplace.domain import marketplace
from marketplace.utils.labels import parse_label


class ClaimStatus(Enum):
    PENDING_REVIEW = "pending_review"
    IN_PROGRESS = "in_progress"
    REJECTED = "rejected"
    REFUNDED = "refunded"

    @classmethod
    def parse(cls, value) -> "ClaimStatus":
        return parse_label(cls, value, _STATUS_ALIASES)


_STATUS_ALIASES = {
    "en_attente_de_traitement": ClaimStatus.PENDING_REVIEW,
    "en_attente": ClaimStatus.PENDING_REVIEW,
    "pending": ClaimStatus.PENDING_REVIEW,
    "en_cours": ClaimStatus.IN_PROGRESS,
    "rejetee": ClaimStatus.REJECTED,
    "remboursee": ClaimStatus.REFUNDED,
}


@marketplace.aggregate
class Claim:
    order_id = Identifier(required=True)
    claimant_id = Identifier(required=True)
    description = Text(required=True)
    phone = String(required=True, max_length=30)
    status = String(choices=ClaimStatus, default=ClaimStatus.PENDING_REVIEW.value)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def file(cls, order_id, claimant_id, description, phone):
        if not (description or "").strip():
            raise ValidationError({"description": ["Describe the problem"]})

        now = datetime.now(UTC)
        claim = cls(
            order_id=order_id,
            claimant_id=claimant_id,
            description=description.strip(),
            phone=phone,
            status=ClaimStatus.PENDING_REVIEW.value,
            created_at=now,
            updated_at=now,
        )
        claim.raise_(
            ClaimFiled(
                claim_id=str(claim.id),
                order_id=str(order_id),
                claimant_id=str(claimant_id),
                filed_at=now,
            )
        )
        return claim

    def change_status(self, target: ClaimStatus, changed_by=None):
        now = datetime.now(UTC)
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            ClaimStatusChanged(
                claim_id=str(self.id),
                previous_status=previous,
                new_status=target.value,
                changed_by=str(changed_by) if changed_by else None,
                changed_at=now,
            )
        )

    def update_details(self, description=None, phone=None):
        if description is None and phone is None:
            raise ValidationError({"claim": ["Nothing to update"]})
        if description is not None:
            if not description.strip():
                raise ValidationError({"description": ["Describe the problem"]})
            self.description = description.strip()
        if phone is not None:
            self.phone = phone

        self.updated_at = datetime.now(UTC)
        self.raise_(ClaimDetailsUpdated(claim_id=str(self.id), updated_at=self.updated_at))
