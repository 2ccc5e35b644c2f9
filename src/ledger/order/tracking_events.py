"""Inbound cross-domain event handler: Ledger reacts to Tracking events.

A new tracking moves the order to ``shipped``; a delivered shipment moves it
to ``delivered`` (which makes it eligible for payout). Every status change
is also emailed to the owning partner.

Cross-domain events are imported from shared.events.tracking and registered
as external events via ledger.register_external_event().
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ledger import engine
from ledger.domain import ledger
from ledger.order.order import Order
from ledger.partner.partner import PartnerProfile
from notifications.dispatch import send_notification
from notifications.types import NotificationType
from shared.errors import NotFound
from shared.events.tracking import ShipmentDelivered, TrackingCreated, TrackingStatusUpdated

logger = structlog.get_logger(__name__)

ledger.register_external_event(TrackingCreated, "Tracking.TrackingCreated.v1")
ledger.register_external_event(TrackingStatusUpdated, "Tracking.TrackingStatusUpdated.v1")
ledger.register_external_event(ShipmentDelivered, "Tracking.ShipmentDelivered.v1")

_STATUS_LABELS = {
    "processing": "Processing",
    "shipped": "Shipped",
    "in_transit": "In Transit",
    "out_for_delivery": "Out for Delivery",
    "delivered": "Delivered",
}


def _partner_email(order_id, partner_id) -> str | None:
    if not partner_id:
        order = current_domain.repository_for(Order).find(str(order_id))
        partner_id = order.partner_id if order else None
    if not partner_id:
        return None
    return current_domain.repository_for(PartnerProfile).contact_email_for(str(partner_id))


@ledger.event_handler(part_of=Order, stream_category="tracking::order_tracking")
class TrackingOrderEventHandler:
    """Keeps the order status and its tracking cache in step with shipments."""

    @handle(TrackingCreated)
    def on_tracking_created(self, event: TrackingCreated) -> None:
        logger.info(
            "Marking order shipped from new tracking",
            order_id=str(event.order_id),
            tracking_number=event.tracking_number,
            carrier=event.carrier,
        )
        try:
            engine.mark_shipped(
                str(event.order_id),
                tracking_number=event.tracking_number,
                carrier=event.carrier,
            )
        except (NotFound, ValidationError) as exc:
            logger.warning(
                "Order not moved to shipped",
                order_id=str(event.order_id),
                error=str(exc),
            )

    @handle(TrackingStatusUpdated)
    def on_status_updated(self, event: TrackingStatusUpdated) -> None:
        send_notification(
            _partner_email(event.order_id, event.partner_id),
            NotificationType.SHIPPING_UPDATE.value,
            {
                "order_id": str(event.order_id),
                "tracking_number": event.tracking_number,
                "status": event.status,
                "status_label": _STATUS_LABELS.get(event.status, event.status),
                "location": event.location,
            },
        )

    @handle(ShipmentDelivered)
    def on_shipment_delivered(self, event: ShipmentDelivered) -> None:
        try:
            engine.mark_delivered(str(event.order_id))
        except (NotFound, ValidationError) as exc:
            logger.warning(
                "Order not moved to delivered",
                order_id=str(event.order_id),
                error=str(exc),
            )

        send_notification(
            _partner_email(event.order_id, event.partner_id),
            NotificationType.DELIVERY_CONFIRMATION.value,
            {
                "order_id": str(event.order_id),
                "tracking_number": event.tracking_number,
                "delivered_at": event.actual_delivery.date().isoformat() if event.actual_delivery else "today",
            },
        )
