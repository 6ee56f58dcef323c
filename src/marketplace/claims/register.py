"""Claim commands: FileClaim, UpdateClaimStatus, UpdateClaimDetails, DeleteClaim."""

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.access.policy import is_buyer_of, require_admin
from marketplace.access.roles import Caller
from marketplace.claims.claim import Claim, ClaimStatus
from marketplace.domain import logger, marketplace
from marketplace.errors import Forbidden
from marketplace.notifications import notify
from marketplace.ordering.order import Order

_STATUS_MESSAGES = {
    ClaimStatus.PENDING_REVIEW: "Votre réclamation est en attente de traitement.",
    ClaimStatus.IN_PROGRESS: "Votre réclamation est en cours de traitement.",
    ClaimStatus.REJECTED: "Votre réclamation a été rejetée.",
    ClaimStatus.REFUNDED: "Votre réclamation a donné lieu à un remboursement.",
}


@marketplace.command(part_of="Claim")
class FileClaim:
    order_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    description = Text(required=True)
    phone = String(required=True, max_length=30)


@marketplace.command(part_of="Claim")
class UpdateClaimStatus:
    claim_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)


@marketplace.command(part_of="Claim")
class UpdateClaimDetails:
    claim_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    description = Text()
    phone = String(max_length=30)


@marketplace.command(part_of="Claim")
class DeleteClaim:
    claim_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)


def _require_claimant(caller: Caller, claim: Claim, action: str):
    if str(claim.claimant_id) != caller.user_id:
        raise Forbidden(f"Only the claimant may {action}", user_id=caller.user_id)


@marketplace.command_handler(part_of=Claim)
class ClaimRegisterHandler:
    @handle(FileClaim)
    def file_claim(self, command):
        caller = Caller.of(command)
        order = current_domain.repository_for(Order).get_order(command.order_id)
        if not is_buyer_of(caller, order):
            raise Forbidden("Only the buyer of an order may file a claim", user_id=caller.user_id)

        claim = Claim.file(
            order_id=str(order.id),
            claimant_id=caller.user_id,
            description=command.description,
            phone=command.phone,
        )
        current_domain.repository_for(Claim).add(claim)

        logger.info("claim_filed", claim_id=str(claim.id), order_id=str(order.id), claimant_id=caller.user_id)
        notify(
            caller.user_id,
            "Réclamation enregistrée",
            f"Votre réclamation sur la commande {order.number} a bien été reçue.",
            f"/claims/{claim.id}",
        )
        return str(claim.id)

    @handle(UpdateClaimStatus)
    def update_status(self, command):
        target = ClaimStatus.parse(command.status)
        caller = Caller.of(command)
        require_admin(caller, action="change claim statuses")

        repo = current_domain.repository_for(Claim)
        claim = repo.get_claim(command.claim_id)
        claim.change_status(target, changed_by=caller.user_id)
        repo.add(claim)

        logger.info("claim_status_updated", claim_id=str(claim.id), status=target.value)
        notify(claim.claimant_id, "Suivi de réclamation", _STATUS_MESSAGES[target], f"/claims/{claim.id}")
        return str(claim.id)

    @handle(UpdateClaimDetails)
    def update_details(self, command):
        caller = Caller.of(command)
        repo = current_domain.repository_for(Claim)
        claim = repo.get_claim(command.claim_id)
        _require_claimant(caller, claim, "edit this claim")

        claim.update_details(description=command.description, phone=command.phone)
        repo.add(claim)
        return str(claim.id)

    @handle(DeleteClaim)
    def delete_claim(self, command):
        caller = Caller.of(command)
        repo = current_domain.repository_for(Claim)
        claim = repo.get_claim(command.claim_id)
        _require_claimant(caller, claim, "delete this claim")

        repo.remove(claim)
        logger.info("claim_deleted", claim_id=str(claim.id), deleted_by=caller.user_id)
        return str(claim.id)
