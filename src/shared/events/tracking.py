"""Cross-domain event contracts for Tracking domain events.

The Ledger domain consumes these to move orders to ``shipped`` and
``delivered`` and to notify partners about shipment progress. They are
registered as external events via ``ledger.register_external_event()`` with
the ``__type__`` strings the Tracking domain publishes.

The source-of-truth events are in src/tracking/shipment/events.py.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class TrackingCreated(BaseEvent):
    """A shipment was registered for an order."""

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


class TrackingStatusUpdated(BaseEvent):
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


class ShipmentDelivered(BaseEvent):
    """The carrier reported the shipment as delivered."""

    __version__ = 1

    tracking_id = Identifier(required=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    partner_id = Identifier()
    actual_delivery = DateTime(required=True)
