"""Delivery progress: UpdateDeliveryStatus, AssignCourier, UpdateDeliveryDetails."""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from marketplace.access.policy import is_assigned_courier, require_admin, require_any
from marketplace.access.roles import Caller
from marketplace.delivery.delivery import Delivery, DeliveryStatus
from marketplace.delivery.propagation import propagate_to_order
from marketplace.domain import logger, marketplace
from marketplace.notifications import notify

_BUYER_MESSAGES = {
    DeliveryStatus.PENDING: "Votre livraison est en attente.",
    DeliveryStatus.IN_PROGRESS: "Votre commande est en cours de livraison.",
    DeliveryStatus.DELIVERED: "Votre commande a été livrée.",
    DeliveryStatus.CANCELLED: "Votre livraison a été annulée.",
    DeliveryStatus.POSTPONED: "Votre livraison a été reportée.",
}


@marketplace.command(part_of="Delivery")
class UpdateDeliveryStatus:
    delivery_id = Identifier(required=True)
    status = String(required=True, max_length=100)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)


@marketplace.command(part_of="Delivery")
class AssignCourier:
    delivery_id = Identifier(required=True)
    courier_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)


@marketplace.command(part_of="Delivery")
class UpdateDeliveryDetails:
    delivery_id = Identifier(required=True)
    requested_by = Identifier(required=True)
    requester_role = String(required=True, max_length=50)
    address = String(max_length=255)
    details = String(max_length=255)
    city = String(max_length=100)
    phone = String(max_length=30)
    scheduled_for = DateTime()


@marketplace.command_handler(part_of=Delivery)
class DeliveryTrackingHandler:
    @handle(UpdateDeliveryStatus)
    def update_status(self, command):
        target = DeliveryStatus.parse(command.status)
        caller = Caller.of(command)

        deliveries = current_domain.repository_for(Delivery)
        delivery = deliveries.get_delivery(command.delivery_id)
        require_any(caller, is_assigned_courier(caller, delivery), action="update this delivery")

        if delivery.change_status(target):
            propagate_to_order(delivery, changed_by=caller.user_id)
            deliveries.add(delivery)

            logger.info(
                "delivery_status_updated",
                delivery_id=str(delivery.id),
                status=target.value,
                changed_by=caller.user_id,
            )
            notify(delivery.buyer_id, "Suivi de livraison", _BUYER_MESSAGES[target], f"/deliveries/{delivery.id}")

        return str(delivery.id)

    @handle(AssignCourier)
    def assign_courier(self, command):
        caller = Caller.of(command)
        require_admin(caller, action="assign couriers")

        deliveries = current_domain.repository_for(Delivery)
        delivery = deliveries.get_delivery(command.delivery_id)
        delivery.assign_courier(str(command.courier_id))
        propagate_to_order(delivery, changed_by=caller.user_id)
        deliveries.add(delivery)

        logger.info("courier_assigned", delivery_id=str(delivery.id), courier_id=str(command.courier_id))

        notify(
            command.courier_id,
            "Nouvelle livraison",
            f"Une livraison vous a été assignée pour {delivery.city}.",
            f"/deliveries/{delivery.id}",
        )
        notify(
            delivery.buyer_id,
            "Suivi de livraison",
            _BUYER_MESSAGES[DeliveryStatus.IN_PROGRESS],
            f"/deliveries/{delivery.id}",
        )
        return str(delivery.id)

    @handle(UpdateDeliveryDetails)
    def update_details(self, command):
        caller = Caller.of(command)
        deliveries = current_domain.repository_for(Delivery)
        delivery = deliveries.get_delivery(command.delivery_id)
        require_any(caller, is_assigned_courier(caller, delivery), action="update this delivery")

        delivery.update_details(
            address=command.address,
            details=command.details,
            city=command.city,
            phone=command.phone,
            scheduled_for=command.scheduled_for,
        )
        deliveries.add(delivery)
        return str(delivery.id)
