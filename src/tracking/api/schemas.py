"""Pydantic API schemas for the Tracking domain."""

from datetime import datetime

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class CreateTrackingRequest(BaseModel):
    order_id: str
    tracking_number: str
    carrier: str
    shipping_method: str = "standard"
    estimated_delivery: datetime | None = None
    partner_id: str | None = None
    admin_id: str | None = None


class UpdateTrackingStatusRequest(BaseModel):
    status: str
    location: str | None = None
    description: str | None = None
    admin_id: str | None = None


class UpdateEstimatedDeliveryRequest(BaseModel):
    estimated_delivery: datetime


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class TrackingIdResponse(BaseModel):
    tracking_id: str


class StatusResponse(BaseModel):
    status: str


class TrackingUpdateResponse(BaseModel):
    id: str
    tracking_id: str
    status: str
    location: str | None = None
    description: str | None = None
    updated_by: str | None = None
    timestamp: datetime


class TrackingResponse(BaseModel):
    id: str
    order_id: str
    tracking_number: str
    carrier: str
    shipping_method: str | None = None
    status: str
    status_label: str
    admin_id: str | None = None
    partner_id: str | None = None
    estimated_delivery: datetime | None = None
    actual_delivery: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    updates: list[TrackingUpdateResponse] = []
