"""Read-only tracking lookups. Histories are returned newest first."""

from protean.utils.globals import current_domain

from shared.persistence import degrade_on_storage_error
from tracking.shipment.tracking import STATUS_LABELS, OrderTracking


def tracking_view(shipment: OrderTracking) -> dict:
    return {
        "id": str(shipment.id),
        "order_id": str(shipment.order_id),
        "tracking_number": shipment.tracking_number,
        "carrier": shipment.carrier,
        "shipping_method": shipment.shipping_method,
        "status": shipment.status,
        "status_label": STATUS_LABELS.get(shipment.status, shipment.status),
        "admin_id": str(shipment.admin_id) if shipment.admin_id else None,
        "partner_id": str(shipment.partner_id) if shipment.partner_id else None,
        "estimated_delivery": shipment.estimated_delivery,
        "actual_delivery": shipment.actual_delivery,
        "created_at": shipment.created_at,
        "updated_at": shipment.updated_at,
        "updates": [
            {
                "id": str(update.id),
                "tracking_id": str(shipment.id),
                "status": update.status,
                "location": update.location,
                "description": update.description,
                "updated_by": str(update.updated_by) if update.updated_by else None,
                "timestamp": update.timestamp,
            }
            for update in shipment.history()
        ],
    }


def _repo():
    return current_domain.repository_for(OrderTracking)


@degrade_on_storage_error(lambda: None)
def get_by_tracking_number(tracking_number: str) -> dict | None:
    shipment = _repo().find_by_tracking_number(tracking_number)
    return tracking_view(shipment) if shipment else None


@degrade_on_storage_error(lambda: None)
def get_by_order_id(order_id: str) -> dict | None:
    shipment = _repo().find_by_order(order_id)
    return tracking_view(shipment) if shipment else None


@degrade_on_storage_error(lambda: None)
def get_tracking(tracking_id: str) -> dict | None:
    shipment = _repo().find(tracking_id)
    return tracking_view(shipment) if shipment else None


@degrade_on_storage_error(list)
def list_partner_tracking(partner_id: str) -> list[dict]:
    return [tracking_view(shipment) for shipment in _repo().for_partner(partner_id)]


@degrade_on_storage_error(list)
def list_all_tracking() -> list[dict]:
    return [tracking_view(shipment) for shipment in _repo().everything()]
