"""Tracking status updates and delivery estimate changes."""

from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from shared.errors import NotFound
from tracking.domain import tracking
from tracking.shipment.tracking import OrderTracking


@tracking.command(part_of="OrderTracking")
class UpdateTrackingStatus:
    tracking_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    location = String(max_length=255)
    description = String(max_length=500)
    admin_id = Identifier()


@tracking.command(part_of="OrderTracking")
class UpdateEstimatedDelivery:
    tracking_id = Identifier(required=True)
    estimated_delivery = DateTime(required=True)


@tracking.command_handler(part_of=OrderTracking)
class TrackingStatusHandler:
    def _load(self, tracking_id):
        shipment = current_domain.repository_for(OrderTracking).find(tracking_id)
        if shipment is None:
            raise NotFound("OrderTracking", tracking_id)
        return shipment

    @handle(UpdateTrackingStatus)
    def update_status(self, command):
        shipment = self._load(command.tracking_id)
        shipment.update_status(
            status=command.status,
            location=command.location,
            description=command.description,
            updated_by=command.admin_id,
        )
        current_domain.repository_for(OrderTracking).add(shipment)
        return shipment.status

    @handle(UpdateEstimatedDelivery)
    def update_estimated_delivery(self, command):
        shipment = self._load(command.tracking_id)
        shipment.update_estimated_delivery(command.estimated_delivery)
        current_domain.repository_for(OrderTracking).add(shipment)
