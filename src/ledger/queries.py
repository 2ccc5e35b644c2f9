"""Query Facade for partner dashboards: read-only views over orders and wallets.

Every function degrades to an empty or zero result when the store fails,
logging the failure. The only write any of them may trigger is the lazy
creation of a zero-balance wallet for ``get_partner_stats``.
"""

import json
from collections import Counter
from datetime import UTC, datetime

import structlog
from protean.utils.globals import current_domain

from ledger import engine
from ledger.order.order import Order, OrderStatus, PaymentStatus
from ledger.partner.partner import PartnerProfile
from ledger.wallet.wallet import EARNING_TYPES, TransactionType, Wallet
from shared.errors import StorageError
from shared.money import to_money
from shared.persistence import degrade_on_storage_error

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------
def order_view(order: Order) -> dict:
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "partner_id": str(order.partner_id) if order.partner_id else None,
        "customer_id": str(order.customer_id),
        "total_amount": order.total_amount,
        "currency": order.currency,
        "status": order.status,
        "payment_status": order.payment_status,
        "paid_out": order.paid_out,
        "payout_amount": order.payout_amount,
        "payout_date": order.payout_date,
        "tracking_number": order.tracking_number,
        "carrier": order.carrier,
        "cancellation_reason": order.cancellation_reason,
        "cancelled_at": order.cancelled_at,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "items": [
            {
                "id": str(item.id),
                "product_id": str(item.product_id),
                "partner_product_id": str(item.partner_product_id) if item.partner_product_id else None,
                "title": item.title,
                "sku": item.sku,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "subtotal": item.subtotal,
            }
            for item in order.items
        ],
    }


def transaction_view(txn) -> dict:
    return {
        "id": str(txn.id),
        "user_id": str(txn.user_id),
        "order_id": str(txn.order_id) if txn.order_id else None,
        "type": txn.transaction_type,
        "amount": txn.amount,
        "status": txn.status,
        "description": txn.description,
        "payment_method": txn.payment_method,
        "metadata": json.loads(txn.details) if txn.details else {},
        "created_at": txn.created_at,
    }


def _empty_partner_stats() -> dict:
    return {
        "total_orders": 0,
        "pending_orders": 0,
        "processing_orders": 0,
        "shipped_orders": 0,
        "delivered_orders": 0,
        "completed_orders": 0,
        "cancelled_orders": 0,
        "paid_orders": 0,
        "total_revenue": 0.0,
        "available_balance": 0.0,
    }


def _empty_wallet_stats() -> dict:
    return {
        "total_earnings": 0.0,
        "total_deposits": 0.0,
        "total_withdrawals": 0.0,
        "available_balance": 0.0,
        "transaction_count": 0,
        "last_transaction": None,
    }


# ---------------------------------------------------------------------------
# Partner dashboard
# ---------------------------------------------------------------------------
def _available_balance(partner_id: str) -> float:
    try:
        wallet = current_domain.repository_for(Wallet).find(partner_id)
        if wallet is not None:
            return wallet.balance
        return engine.ensure_wallet(partner_id)
    except StorageError as exc:
        logger.error("Wallet balance unavailable", partner_id=str(partner_id), **exc.context)
        return 0.0


@degrade_on_storage_error(_empty_partner_stats)
def get_partner_stats(partner_id: str) -> dict:
    """Order counts, revenue and wallet balance for a partner.

    ``total_revenue`` sums every order's total regardless of payment status
    and before commission.
    """
    orders = current_domain.repository_for(Order).for_partner(partner_id)
    by_status = Counter(order.status for order in orders)

    stats = _empty_partner_stats()
    stats.update(
        {
            "total_orders": len(orders),
            "pending_orders": by_status[OrderStatus.PENDING.value],
            "processing_orders": by_status[OrderStatus.PROCESSING.value],
            "shipped_orders": by_status[OrderStatus.SHIPPED.value],
            "delivered_orders": by_status[OrderStatus.DELIVERED.value],
            "completed_orders": by_status[OrderStatus.COMPLETED.value],
            "cancelled_orders": by_status[OrderStatus.CANCELLED.value],
            "paid_orders": sum(1 for order in orders if order.payment_status == PaymentStatus.PAID.value),
            "total_revenue": to_money(sum(order.total_amount for order in orders)),
            "available_balance": _available_balance(partner_id),
        }
    )
    return stats


@degrade_on_storage_error(list)
def get_partner_orders(partner_id: str, limit: int = 20, offset: int = 0) -> list[dict]:
    """A page of the partner's orders, newest first."""
    orders = current_domain.repository_for(Order).page_for_partner(partner_id, limit=limit, offset=offset)
    return [order_view(order) for order in orders]


@degrade_on_storage_error(list)
def get_monthly_earnings(partner_id: str, now: datetime | None = None) -> list[dict]:
    """Paid orders of the last twelve calendar months grouped by month, oldest first.

    Earnings apply the partner's configured commission rate to each month's
    revenue; a partner without a profile earns nothing.
    """
    since = _first_day_of_window(now or datetime.now(UTC))
    orders = current_domain.repository_for(Order).paid_since(partner_id, since)
    profile = current_domain.repository_for(PartnerProfile).find(partner_id)

    months: dict[str, dict] = {}
    for order in orders:
        key = order.created_at.strftime("%Y-%m")
        month = months.setdefault(key, {"month": key, "revenue": 0.0, "earnings": 0.0, "order_count": 0})
        month["revenue"] += order.total_amount
        month["order_count"] += 1

    for month in months.values():
        month["revenue"] = to_money(month["revenue"])
        month["earnings"] = profile.commission_for(month["revenue"]) if profile else 0.0
    return [months[key] for key in sorted(months)]


def _first_day_of_window(now: datetime) -> datetime:
    year, month = now.year, now.month - 11
    if month <= 0:
        month += 12
        year -= 1
    return datetime(year, month, 1, tzinfo=UTC)


@degrade_on_storage_error(lambda: None)
def get_order(order_id: str) -> dict | None:
    order = current_domain.repository_for(Order).find(order_id)
    return order_view(order) if order else None


@degrade_on_storage_error(list)
def get_customer_order_history(customer_id: str, partner_id: str) -> list[dict]:
    orders = current_domain.repository_for(Order).for_customer_and_partner(customer_id, partner_id)
    return [order_view(order) for order in orders]


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------
@degrade_on_storage_error(list)
def get_wallet_transactions(user_id: str, limit: int = 50, offset: int = 0) -> list[dict]:
    """The wallet's audit trail, newest first."""
    wallet = current_domain.repository_for(Wallet).find(user_id)
    if wallet is None:
        return []
    transactions = sorted(wallet.transactions, key=lambda txn: txn.created_at, reverse=True)
    return [transaction_view(txn) for txn in transactions[offset : offset + limit]]


@degrade_on_storage_error(_empty_wallet_stats)
def get_wallet_stats(user_id: str) -> dict:
    wallet = current_domain.repository_for(Wallet).find(user_id)
    if wallet is None:
        return _empty_wallet_stats()

    completed = wallet.completed_transactions()
    by_type: dict[str, float] = {}
    for txn in completed:
        by_type[txn.transaction_type] = by_type.get(txn.transaction_type, 0.0) + txn.amount

    latest = max(wallet.transactions, key=lambda txn: txn.created_at, default=None)
    return {
        "total_earnings": to_money(sum(by_type.get(kind, 0.0) for kind in EARNING_TYPES)),
        "total_deposits": to_money(by_type.get(TransactionType.DEPOSIT.value, 0.0)),
        "total_withdrawals": to_money(abs(by_type.get(TransactionType.WITHDRAWAL.value, 0.0))),
        "available_balance": wallet.balance,
        "transaction_count": len(wallet.transactions),
        "last_transaction": transaction_view(latest) if latest else None,
    }
