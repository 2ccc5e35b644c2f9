"""Domain events for the OrderTracking aggregate.

TrackingCreated and ShipmentDelivered are consumed by the Ledger domain
(see shared.events.tracking) to move the owning order forward.
"""

from protean.fields import DateTime, Identifier, String

from tracking.domain import tracking


@tracking.event(part_of="OrderTracking")
class TrackingCreated:
    """A shipment was registered for an order and handed to the carrier."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    carrier = String(required=True)
    shipping_method = String()
    partner_id = Identifier()
    admin_id = Identifier()
    estimated_delivery = DateTime()
    created_at = DateTime(required=True)


@tracking.event(part_of="OrderTracking")
class TrackingStatusUpdated:
    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    partner_id = Identifier()
    previous_status = String(required=True)
    status = String(required=True)
    location = String()
    description = String()
    updated_by = Identifier()
    updated_at = DateTime(required=True)


@tracking.event(part_of="OrderTracking")
class ShipmentDelivered:
    """The carrier reported the shipment as delivered."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    partner_id = Identifier()
    actual_delivery = DateTime(required=True)


@tracking.event(part_of="OrderTracking")
class EstimatedDeliveryUpdated:
    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    previous_estimate = DateTime()
    estimated_delivery = DateTime(required=True)
    updated_at = DateTime(required=True)
