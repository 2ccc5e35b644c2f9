"""Tracking removal (admin only). Deletes the record and its history."""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from shared.errors import NotFound
from tracking.domain import tracking
from tracking.shipment.tracking import OrderTracking

logger = structlog.get_logger(__name__)


@tracking.command(part_of="OrderTracking")
class DeleteTracking:
    tracking_id = Identifier(required=True)


@tracking.command_handler(part_of=OrderTracking)
class DeleteTrackingHandler:
    @handle(DeleteTracking)
    def delete_tracking(self, command):
        repo = current_domain.repository_for(OrderTracking)
        shipment = repo.find(command.tracking_id)
        if shipment is None:
            raise NotFound("OrderTracking", command.tracking_id)

        update_count = len(shipment.updates)
        repo.remove(shipment)
        logger.info(
            "Tracking deleted",
            tracking_id=str(command.tracking_id),
            order_id=str(shipment.order_id),
            updates_removed=update_count,
        )
