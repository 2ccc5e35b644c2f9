"""FastAPI routes for the Ledger domain: partners, orders and wallets."""

from fastapi import APIRouter, Query

from ledger import engine, queries
from ledger.api.schemas import (
    AdjustBalanceRequest,
    AssignOrderRequest,
    BalanceResponse,
    CancelOrderRequest,
    FundsRequest,
    MonthlyEarningsResponse,
    OrderIdResponse,
    OrderResponse,
    PartnerIdResponse,
    PartnerStatsResponse,
    PayoutResponse,
    PayWithWalletRequest,
    PlaceOrderRequest,
    RefundResponse,
    RegisterPartnerRequest,
    ShipOrderRequest,
    StatusResponse,
    TransactionResponse,
    UpdateCommissionRateRequest,
    WalletStatsResponse,
)
from shared.errors import NotFound

# ---------------------------------------------------------------------------
# Partner Router
# ---------------------------------------------------------------------------
partner_router = APIRouter(prefix="/partners", tags=["partners"])


@partner_router.post("", status_code=201, response_model=PartnerIdResponse)
async def register_partner(body: RegisterPartnerRequest) -> PartnerIdResponse:
    user_id = engine.register_partner(
        user_id=body.user_id,
        store_name=body.store_name,
        store_slug=body.store_slug,
        contact_email=body.contact_email,
        contact_phone=body.contact_phone,
        commission_rate=body.commission_rate,
    )
    return PartnerIdResponse(user_id=user_id)


@partner_router.put("/{user_id}/commission-rate", response_model=StatusResponse)
async def update_commission_rate(user_id: str, body: UpdateCommissionRateRequest) -> StatusResponse:
    engine.update_commission_rate(user_id, body.commission_rate)
    return StatusResponse(status="commission_rate_updated")


@partner_router.get("/{user_id}/stats", response_model=PartnerStatsResponse)
async def partner_stats(user_id: str) -> PartnerStatsResponse:
    return PartnerStatsResponse(**queries.get_partner_stats(user_id))


@partner_router.get("/{user_id}/earnings/monthly", response_model=list[MonthlyEarningsResponse])
async def monthly_earnings(user_id: str) -> list[MonthlyEarningsResponse]:
    return [MonthlyEarningsResponse(**month) for month in queries.get_monthly_earnings(user_id)]


@partner_router.get("/{user_id}/orders", response_model=list[OrderResponse])
async def partner_orders(
    user_id: str,
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> list[OrderResponse]:
    return [OrderResponse(**order) for order in queries.get_partner_orders(user_id, limit=limit, offset=offset)]


@partner_router.get("/{user_id}/customers/{customer_id}/orders", response_model=list[OrderResponse])
async def customer_order_history(user_id: str, customer_id: str) -> list[OrderResponse]:
    return [OrderResponse(**order) for order in queries.get_customer_order_history(customer_id, user_id)]


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest) -> OrderIdResponse:
    order_id = engine.place_order(
        customer_id=body.customer_id,
        partner_id=body.partner_id,
        items=[item.model_dump() for item in body.items],
        currency=body.currency,
    )
    return OrderIdResponse(order_id=order_id)


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str) -> OrderResponse:
    order = queries.get_order(order_id)
    if order is None:
        raise NotFound("Order", order_id)
    return OrderResponse(**order)


@order_router.post("/{order_id}/assign", response_model=StatusResponse)
async def assign_order(order_id: str, body: AssignOrderRequest) -> StatusResponse:
    engine.assign_order(order_id, body.partner_id)
    return StatusResponse(status="assigned")


@order_router.post("/{order_id}/pay-with-wallet", response_model=BalanceResponse)
async def pay_with_wallet(order_id: str, body: PayWithWalletRequest) -> BalanceResponse:
    balance = engine.charge_wallet(order_id, body.partner_id)
    return BalanceResponse(user_id=body.partner_id, balance=balance)


@order_router.post("/{order_id}/ship", response_model=StatusResponse)
async def ship_order(order_id: str, body: ShipOrderRequest) -> StatusResponse:
    engine.mark_shipped(order_id, tracking_number=body.tracking_number, carrier=body.carrier)
    return StatusResponse(status="shipped")


@order_router.post("/{order_id}/deliver", response_model=StatusResponse)
async def deliver_order(order_id: str) -> StatusResponse:
    engine.mark_delivered(order_id)
    return StatusResponse(status="delivered")


@order_router.post("/{order_id}/complete", response_model=StatusResponse)
async def complete_order(order_id: str) -> StatusResponse:
    engine.complete_order(order_id)
    return StatusResponse(status="completed")


@order_router.post("/{order_id}/cancel", response_model=RefundResponse)
async def cancel_order(order_id: str, body: CancelOrderRequest) -> RefundResponse:
    refund_amount = engine.refund_order(order_id, reason=body.reason, partner_id=body.partner_id)
    return RefundResponse(order_id=order_id, status="cancelled", refund_amount=refund_amount)


@order_router.post("/{order_id}/payout", response_model=PayoutResponse)
async def process_payout(order_id: str) -> PayoutResponse:
    earnings = engine.process_payout(order_id)
    return PayoutResponse(order_id=order_id, earnings=earnings)


# ---------------------------------------------------------------------------
# Wallet Router
# ---------------------------------------------------------------------------
wallet_router = APIRouter(prefix="/wallets", tags=["wallets"])


@wallet_router.get("/{user_id}", response_model=WalletStatsResponse)
async def wallet_stats(user_id: str) -> WalletStatsResponse:
    return WalletStatsResponse(**queries.get_wallet_stats(user_id))


@wallet_router.get("/{user_id}/transactions", response_model=list[TransactionResponse])
async def wallet_transactions(
    user_id: str,
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
) -> list[TransactionResponse]:
    transactions = queries.get_wallet_transactions(user_id, limit=limit, offset=offset)
    return [TransactionResponse(**txn) for txn in transactions]


@wallet_router.post("/{user_id}/deposits", status_code=201, response_model=BalanceResponse)
async def deposit(user_id: str, body: FundsRequest) -> BalanceResponse:
    balance = engine.deposit_funds(user_id, body.amount, body.payment_method, body.description)
    return BalanceResponse(user_id=user_id, balance=balance)


@wallet_router.post("/{user_id}/withdrawals", status_code=201, response_model=BalanceResponse)
async def withdraw(user_id: str, body: FundsRequest) -> BalanceResponse:
    balance = engine.withdraw_funds(user_id, body.amount, body.payment_method, body.description)
    return BalanceResponse(user_id=user_id, balance=balance)


@wallet_router.post("/{user_id}/adjustments", status_code=201, response_model=BalanceResponse)
async def adjust_balance(user_id: str, body: AdjustBalanceRequest) -> BalanceResponse:
    balance = engine.adjust_wallet_balance(
        user_id,
        body.amount,
        direction=body.direction,
        reason=body.reason,
        admin_id=body.admin_id,
    )
    return BalanceResponse(user_id=user_id, balance=balance)
