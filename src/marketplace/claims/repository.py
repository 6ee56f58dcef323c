"""Repository for the Claim aggregate."""

from protean.exceptions import ObjectNotFoundError

from marketplace.claims.claim import Claim
from marketplace.domain import marketplace
from marketplace.errors import ClaimNotFound


@marketplace.repository(part_of=Claim)
class ClaimRepository:
    def get_claim(self, claim_id) -> Claim:
        try:
            return self.get(str(claim_id))
        except ObjectNotFoundError:
            raise ClaimNotFound(claim_id) from None

    def for_order(self, order_id) -> list[Claim]:
        return self._dao.query.filter(order_id=str(order_id)).all().items

    def remove(self, claim: Claim) -> None:
        self._dao.delete(claim)
