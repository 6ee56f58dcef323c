"""Read access to claims."""

from protean.utils.globals import current_domain

from marketplace.access.policy import require_any
from marketplace.access.roles import Caller
from marketplace.claims.claim import Claim


def claim_for(caller: Caller, claim_id) -> Claim:
    claim = current_domain.repository_for(Claim).get_claim(claim_id)
    require_any(caller, str(claim.claimant_id) == caller.user_id, action="view this claim")
    return claim
