"""Pydantic API schemas for the Ledger domain.

These are the external API contracts, separate from domain commands.
The API layer translates between these schemas and domain commands.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from shared.money import DEFAULT_CURRENCY, is_valid_currency


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class RegisterPartnerRequest(BaseModel):
    user_id: str
    store_name: str
    contact_email: str
    commission_rate: float = Field(ge=0.0, le=1.0)
    store_slug: str | None = None
    contact_phone: str | None = None


class UpdateCommissionRateRequest(BaseModel):
    commission_rate: float = Field(ge=0.0, le=1.0)


class OrderItemRequest(BaseModel):
    product_id: str
    partner_product_id: str | None = None
    title: str | None = None
    sku: str | None = None
    quantity: int = Field(ge=1)
    unit_price: float = Field(ge=0.0)


class PlaceOrderRequest(BaseModel):
    customer_id: str
    partner_id: str | None = None
    currency: str = DEFAULT_CURRENCY
    items: list[OrderItemRequest] = Field(min_length=1)

    @field_validator("currency")
    @classmethod
    def currency_is_supported(cls, value: str) -> str:
        if not is_valid_currency(value):
            raise ValueError(f"Unsupported currency {value}")
        return value


class AssignOrderRequest(BaseModel):
    partner_id: str


class PayWithWalletRequest(BaseModel):
    partner_id: str


class ShipOrderRequest(BaseModel):
    tracking_number: str | None = None
    carrier: str | None = None


class CancelOrderRequest(BaseModel):
    reason: str
    partner_id: str | None = None


class FundsRequest(BaseModel):
    amount: float = Field(gt=0.0)
    payment_method: str | None = None
    description: str | None = None


class AdjustBalanceRequest(BaseModel):
    amount: float = Field(gt=0.0)
    direction: Literal["add", "subtract"]
    reason: str = Field(min_length=1)
    admin_id: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class PartnerIdResponse(BaseModel):
    user_id: str


class OrderIdResponse(BaseModel):
    order_id: str


class StatusResponse(BaseModel):
    status: str


class BalanceResponse(BaseModel):
    user_id: str
    balance: float


class PayoutResponse(BaseModel):
    order_id: str
    earnings: float


class RefundResponse(BaseModel):
    order_id: str
    status: str
    refund_amount: float


class OrderItemResponse(BaseModel):
    id: str
    product_id: str
    partner_product_id: str | None = None
    title: str | None = None
    sku: str | None = None
    quantity: int
    unit_price: float
    subtotal: float | None = None


class OrderResponse(BaseModel):
    id: str
    order_number: str
    partner_id: str | None = None
    customer_id: str
    total_amount: float
    currency: str
    status: str
    payment_status: str
    paid_out: bool
    payout_amount: float | None = None
    payout_date: datetime | None = None
    tracking_number: str | None = None
    carrier: str | None = None
    cancellation_reason: str | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemResponse] = []


class PartnerStatsResponse(BaseModel):
    total_orders: int
    pending_orders: int
    processing_orders: int
    shipped_orders: int
    delivered_orders: int
    completed_orders: int
    cancelled_orders: int
    paid_orders: int
    total_revenue: float
    available_balance: float


class MonthlyEarningsResponse(BaseModel):
    month: str
    revenue: float
    earnings: float
    order_count: int


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    order_id: str | None = None
    type: str
    amount: float
    status: str
    description: str | None = None
    payment_method: str | None = None
    metadata: dict = {}
    created_at: datetime


class WalletStatsResponse(BaseModel):
    total_earnings: float
    total_deposits: float
    total_withdrawals: float
    available_balance: float
    transaction_count: int
    last_transaction: TransactionResponse | None = None
