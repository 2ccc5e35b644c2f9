"""Ledger domain API package."""

from ledger.api.routes import order_router, partner_router, wallet_router

__all__ = ["order_router", "partner_router", "wallet_router"]
