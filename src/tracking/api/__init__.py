"""Tracking domain API package."""

from tracking.api.routes import tracking_router

__all__ = ["tracking_router"]
