"""Serialized entry points for Tracking write operations.

Creation locks on the order and the tracking number so two concurrent creates
cannot both pass the one-tracking-per-order or unique-number checks. Status
changes lock on the tracking record.
Persistence failures surface as StorageError.
"""

from datetime import datetime

from protean.utils.globals import current_domain

from shared.locking import KeyedLocks, tracking_key, tracking_number_key, tracking_order_key
from shared.persistence import storage_guard
from tracking.shipment.creation import CreateTracking
from tracking.shipment.removal import DeleteTracking
from tracking.shipment.status import UpdateEstimatedDelivery, UpdateTrackingStatus
from tracking.shipment.tracking import ShippingMethod

locks = KeyedLocks()


def _process(command):
    with storage_guard(type(command).__name__):
        return current_domain.process(command, asynchronous=False)


def create_tracking(
    order_id: str,
    tracking_number: str,
    carrier: str,
    shipping_method: str = ShippingMethod.STANDARD.value,
    estimated_delivery: datetime | None = None,
    partner_id: str | None = None,
    admin_id: str | None = None,
) -> str:
    with locks.hold(tracking_order_key(order_id), tracking_number_key(tracking_number)):
        return _process(
            CreateTracking(
                order_id=order_id,
                tracking_number=tracking_number,
                carrier=carrier,
                shipping_method=shipping_method,
                estimated_delivery=estimated_delivery,
                partner_id=partner_id,
                admin_id=admin_id,
            )
        )


def update_status(
    tracking_id: str,
    status: str,
    location: str | None = None,
    description: str | None = None,
    admin_id: str | None = None,
) -> str:
    with locks.hold(tracking_key(tracking_id)):
        return _process(
            UpdateTrackingStatus(
                tracking_id=tracking_id,
                status=status,
                location=location,
                description=description,
                admin_id=admin_id,
            )
        )


def update_estimated_delivery(tracking_id: str, estimated_delivery: datetime) -> None:
    with locks.hold(tracking_key(tracking_id)):
        _process(UpdateEstimatedDelivery(tracking_id=tracking_id, estimated_delivery=estimated_delivery))


def delete_tracking(tracking_id: str) -> None:
    with locks.hold(tracking_key(tracking_id)):
        _process(DeleteTracking(tracking_id=tracking_id))
