"""FastAPI routes for the Tracking domain."""

from fastapi import APIRouter, Response

from shared.errors import NotFound
from tracking import manager, queries
from tracking.api.schemas import (
    CreateTrackingRequest,
    StatusResponse,
    TrackingIdResponse,
    TrackingResponse,
    UpdateEstimatedDeliveryRequest,
    UpdateTrackingStatusRequest,
)

tracking_router = APIRouter(prefix="/tracking", tags=["tracking"])


def _found(view: dict | None, entity: str, identifier: str) -> TrackingResponse:
    if view is None:
        raise NotFound(entity, identifier)
    return TrackingResponse(**view)


@tracking_router.post("", status_code=201, response_model=TrackingIdResponse)
async def create_tracking(body: CreateTrackingRequest) -> TrackingIdResponse:
    tracking_id = manager.create_tracking(
        order_id=body.order_id,
        tracking_number=body.tracking_number,
        carrier=body.carrier,
        shipping_method=body.shipping_method,
        estimated_delivery=body.estimated_delivery,
        partner_id=body.partner_id,
        admin_id=body.admin_id,
    )
    return TrackingIdResponse(tracking_id=tracking_id)


@tracking_router.get("", response_model=list[TrackingResponse])
async def list_all_tracking() -> list[TrackingResponse]:
    return [TrackingResponse(**view) for view in queries.list_all_tracking()]


@tracking_router.get("/number/{tracking_number}", response_model=TrackingResponse)
async def get_by_tracking_number(tracking_number: str) -> TrackingResponse:
    return _found(queries.get_by_tracking_number(tracking_number), "OrderTracking", tracking_number)


@tracking_router.get("/orders/{order_id}", response_model=TrackingResponse)
async def get_by_order(order_id: str) -> TrackingResponse:
    return _found(queries.get_by_order_id(order_id), "OrderTracking", order_id)


@tracking_router.get("/partners/{partner_id}", response_model=list[TrackingResponse])
async def list_partner_tracking(partner_id: str) -> list[TrackingResponse]:
    return [TrackingResponse(**view) for view in queries.list_partner_tracking(partner_id)]


@tracking_router.get("/{tracking_id}", response_model=TrackingResponse)
async def get_tracking(tracking_id: str) -> TrackingResponse:
    return _found(queries.get_tracking(tracking_id), "OrderTracking", tracking_id)


@tracking_router.put("/{tracking_id}/status", response_model=StatusResponse)
async def update_status(tracking_id: str, body: UpdateTrackingStatusRequest) -> StatusResponse:
    status = manager.update_status(
        tracking_id,
        status=body.status,
        location=body.location,
        description=body.description,
        admin_id=body.admin_id,
    )
    return StatusResponse(status=status)


@tracking_router.put("/{tracking_id}/estimated-delivery", response_model=StatusResponse)
async def update_estimated_delivery(tracking_id: str, body: UpdateEstimatedDeliveryRequest) -> StatusResponse:
    manager.update_estimated_delivery(tracking_id, body.estimated_delivery)
    return StatusResponse(status="estimated_delivery_updated")


@tracking_router.delete("/{tracking_id}", status_code=204)
async def delete_tracking(tracking_id: str) -> Response:
    manager.delete_tracking(tracking_id)
    return Response(status_code=204)
