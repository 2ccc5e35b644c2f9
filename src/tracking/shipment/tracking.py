"""OrderTracking aggregate (CQRS): shipment state and its status history.

State Machine (forward only):
    PROCESSING → SHIPPED → IN_TRANSIT → OUT_FOR_DELIVERY → DELIVERED

A shipment may skip ahead (a carrier scan can jump straight to
``out_for_delivery``) and may repeat its current status to record another
scan, but it never moves backwards and nothing follows DELIVERED.

Every status change appends exactly one TrackingUpdate. Updates are never
edited or removed while the tracking exists.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, String

from shared.errors import InvalidState, InvalidTransition
from tracking.domain import tracking
from tracking.shipment.events import (
    EstimatedDeliveryUpdated,
    ShipmentDelivered,
    TrackingCreated,
    TrackingStatusUpdated,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class TrackingStatus(Enum):
    PROCESSING = "processing"
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"


class ShippingMethod(Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    OVERNIGHT = "overnight"


_STATUS_SEQUENCE = [
    TrackingStatus.PROCESSING,
    TrackingStatus.SHIPPED,
    TrackingStatus.IN_TRANSIT,
    TrackingStatus.OUT_FOR_DELIVERY,
    TrackingStatus.DELIVERED,
]

STATUS_LABELS = {
    TrackingStatus.PROCESSING.value: "Processing",
    TrackingStatus.SHIPPED.value: "Shipped",
    TrackingStatus.IN_TRANSIT.value: "In Transit",
    TrackingStatus.OUT_FOR_DELIVERY.value: "Out for Delivery",
    TrackingStatus.DELIVERED.value: "Delivered",
}


def can_transition(current: TrackingStatus, target: TrackingStatus) -> bool:
    if current == TrackingStatus.DELIVERED:
        return False
    return _STATUS_SEQUENCE.index(target) >= _STATUS_SEQUENCE.index(current)


def _update_order(update) -> tuple:
    # Updates sharing a timestamp are ordered by their position in the status sequence
    return (update.timestamp, _STATUS_SEQUENCE.index(TrackingStatus(update.status)))


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@tracking.entity(part_of="OrderTracking")
class TrackingUpdate:
    """One timestamped entry in a shipment's status history."""

    status = String(max_length=50, choices=TrackingStatus, required=True)
    location = String(max_length=255)
    description = String(max_length=500)
    updated_by = Identifier()
    timestamp = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@tracking.aggregate
class OrderTracking:
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    carrier = String(required=True, max_length=100)
    shipping_method = String(
        max_length=20,
        choices=ShippingMethod,
        default=ShippingMethod.STANDARD.value,
    )
    status = String(
        max_length=50,
        choices=TrackingStatus,
        default=TrackingStatus.PROCESSING.value,
    )
    admin_id = Identifier()
    partner_id = Identifier()
    estimated_delivery = DateTime()
    actual_delivery = DateTime()
    updates = HasMany(TrackingUpdate)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def latest_update_matches_status(self):
        if not self.updates:
            return
        if self.latest_update().status != self.status:
            raise ValidationError({"updates": ["Latest tracking update must match the shipment status"]})

    @invariant.post
    def delivered_shipment_has_delivery_date(self):
        if self.status == TrackingStatus.DELIVERED.value and self.actual_delivery is None:
            raise ValidationError({"actual_delivery": ["A delivered shipment must record its delivery date"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        order_id: str,
        tracking_number: str,
        carrier: str,
        shipping_method: str | None = None,
        estimated_delivery: datetime | None = None,
        partner_id: str | None = None,
        admin_id: str | None = None,
    ):
        """Register a shipment handed to ``carrier``.

        The history starts with a single ``shipped`` entry; ``processing`` is
        the implicit state before the tracking existed.
        """
        now = datetime.now(UTC)
        shipment = cls(
            order_id=order_id,
            tracking_number=tracking_number,
            carrier=carrier,
            shipping_method=shipping_method or ShippingMethod.STANDARD.value,
            admin_id=admin_id,
            partner_id=partner_id,
            estimated_delivery=estimated_delivery,
            created_at=now,
            updated_at=now,
        )
        with atomic_change(shipment):
            shipment.status = TrackingStatus.SHIPPED.value
            shipment.add_updates(
                TrackingUpdate(
                    status=TrackingStatus.SHIPPED.value,
                    description=f"Package shipped via {carrier}",
                    updated_by=admin_id,
                    timestamp=now,
                )
            )
        shipment.raise_(
            TrackingCreated(
                tracking_id=str(shipment.id),
                order_id=str(order_id),
                tracking_number=tracking_number,
                carrier=carrier,
                shipping_method=shipment.shipping_method,
                partner_id=partner_id,
                admin_id=admin_id,
                estimated_delivery=estimated_delivery,
                created_at=now,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def history(self) -> list:
        """Status updates, newest first."""
        return sorted(self.updates, key=_update_order, reverse=True)

    def latest_update(self):
        return max(self.updates, key=_update_order)

    @property
    def is_delivered(self) -> bool:
        return self.status == TrackingStatus.DELIVERED.value

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: TrackingStatus) -> None:
        current = TrackingStatus(self.status)
        if not can_transition(current, target_status):
            raise InvalidTransition(current.value, target_status.value)

    def update_status(
        self,
        status: str,
        location: str | None = None,
        description: str | None = None,
        updated_by: str | None = None,
    ) -> None:
        try:
            target = TrackingStatus(status)
        except ValueError as exc:
            raise ValidationError({"status": [f"Unknown tracking status: {status}"]}) from exc
        self._assert_can_transition(target)

        previous = self.status
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = target.value
            if target == TrackingStatus.DELIVERED:
                self.actual_delivery = now
            self.updated_at = now
            self.add_updates(
                TrackingUpdate(
                    status=target.value,
                    location=location,
                    description=description or f"Status updated to {STATUS_LABELS[target.value]}",
                    updated_by=updated_by,
                    timestamp=now,
                )
            )

        self.raise_(
            TrackingStatusUpdated(
                tracking_id=str(self.id),
                order_id=str(self.order_id),
                tracking_number=self.tracking_number,
                partner_id=self.partner_id,
                previous_status=previous,
                status=target.value,
                location=location,
                description=description,
                updated_by=updated_by,
                updated_at=now,
            )
        )
        if target == TrackingStatus.DELIVERED:
            self.raise_(
                ShipmentDelivered(
                    tracking_id=str(self.id),
                    order_id=str(self.order_id),
                    tracking_number=self.tracking_number,
                    partner_id=self.partner_id,
                    actual_delivery=now,
                )
            )

    def discard_history(self) -> None:
        """Drop every status update. Only used when the tracking itself is deleted."""
        with atomic_change(self):
            for update in list(self.updates):
                self.remove_updates(update)

    def update_estimated_delivery(self, estimated_delivery: datetime) -> None:
        if self.is_delivered:
            raise InvalidState("Shipment has already been delivered", tracking_id=str(self.id))

        previous = self.estimated_delivery
        now = datetime.now(UTC)
        self.estimated_delivery = estimated_delivery
        self.updated_at = now
        self.raise_(
            EstimatedDeliveryUpdated(
                tracking_id=str(self.id),
                order_id=str(self.order_id),
                previous_estimate=previous,
                estimated_delivery=estimated_delivery,
                updated_at=now,
            )
        )
