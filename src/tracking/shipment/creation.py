"""Tracking creation: one shipment record per order, one order per tracking number."""

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from shared.errors import InvalidState
from tracking.domain import tracking
from tracking.shipment.tracking import OrderTracking, ShippingMethod

logger = structlog.get_logger(__name__)


@tracking.command(part_of="OrderTracking")
class CreateTracking:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    carrier = String(required=True, max_length=100)
    shipping_method = String(max_length=20, choices=ShippingMethod, default=ShippingMethod.STANDARD.value)
    estimated_delivery = DateTime()
    partner_id = Identifier()
    admin_id = Identifier()


@tracking.command_handler(part_of=OrderTracking)
class CreateTrackingHandler:
    @handle(CreateTracking)
    def create_tracking(self, command):
        repo = current_domain.repository_for(OrderTracking)
        existing = repo.find_by_order(command.order_id)
        if existing is not None:
            raise InvalidState(
                "Order already has a tracking record",
                field="order_id",
                order_id=str(command.order_id),
                tracking_id=str(existing.id),
            )
        duplicate = repo.find_by_tracking_number(command.tracking_number)
        if duplicate is not None:
            raise InvalidState(
                "Tracking number is already in use",
                field="tracking_number",
                tracking_number=command.tracking_number,
                order_id=str(duplicate.order_id),
            )

        shipment = OrderTracking.create(
            order_id=command.order_id,
            tracking_number=command.tracking_number,
            carrier=command.carrier,
            shipping_method=command.shipping_method,
            estimated_delivery=command.estimated_delivery,
            partner_id=command.partner_id,
            admin_id=command.admin_id,
        )
        repo.add(shipment)
        logger.info(
            "Tracking created",
            tracking_id=str(shipment.id),
            order_id=str(command.order_id),
            tracking_number=command.tracking_number,
            carrier=command.carrier,
        )
        return str(shipment.id)
