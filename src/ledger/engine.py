"""Serialized entry points for every Ledger write operation.

Each function takes the per-key locks for the order and wallet it touches,
then dispatches its command synchronously. The command handler re-reads the
aggregates inside the lock, so the check-then-write sequences (paid_out,
payment_status, balance) cannot interleave with another writer in this
process. Across processes, aggregate versioning in the database provider
rejects a stale write, surfacing as InvalidState; any other persistence
failure surfaces as StorageError.
"""

import json
from collections.abc import Iterator
from contextlib import contextmanager

from protean.utils.globals import current_domain

from ledger.order.assignment import AssignOrderToPartner
from ledger.order.cancellation import CancelOrder
from ledger.order.fulfillment import CompleteOrder, MarkOrderDelivered, MarkOrderShipped
from ledger.order.order import Order
from ledger.order.payment import PayOrderWithWallet
from ledger.order.placement import PlaceOrder
from ledger.partner.registration import RegisterPartner, UpdateCommissionRate
from ledger.wallet.funds import AdjustWalletBalance, DepositFunds, EnsureWallet, WithdrawFunds
from ledger.wallet.payout import ProcessPayout
from shared.errors import NotFound
from shared.locking import KeyedLocks, order_key, wallet_key
from shared.money import DEFAULT_CURRENCY
from shared.persistence import storage_guard

locks = KeyedLocks()


def _owner_of(order_id) -> str | None:
    order = current_domain.repository_for(Order).find(order_id)
    if order is None:
        raise NotFound("Order", order_id)
    return order.partner_id


@contextmanager
def _order_and_owner_wallet(order_id) -> Iterator[None]:
    # The owner is read under the order lock, since assignment can set it.
    # "order:" sorts before "wallet:", so nesting keeps the global acquisition order.
    with locks.hold(order_key(order_id)):
        owner_id = _owner_of(order_id)
        with locks.hold(wallet_key(owner_id) if owner_id else None):
            yield


def _process(command):
    with storage_guard(type(command).__name__):
        return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Ledger Engine
# ---------------------------------------------------------------------------
def process_payout(order_id: str) -> float:
    """Credit the partner's commission for a completed or delivered order."""
    with _order_and_owner_wallet(order_id):
        return _process(ProcessPayout(order_id=order_id))


def charge_wallet(order_id: str, partner_id: str) -> float:
    """Pay an order from the partner's wallet. Returns the remaining balance."""
    with locks.hold(order_key(order_id), wallet_key(partner_id)):
        return _process(PayOrderWithWallet(order_id=order_id, partner_id=partner_id))


def refund_order(order_id: str, reason: str, partner_id: str | None = None) -> float:
    """Cancel an order, returning its total to the wallet when it was paid."""
    with _order_and_owner_wallet(order_id):
        return _process(CancelOrder(order_id=order_id, partner_id=partner_id, reason=reason))


def deposit_funds(
    user_id: str,
    amount: float,
    payment_method: str | None = None,
    description: str | None = None,
) -> float:
    with locks.hold(wallet_key(user_id)):
        return _process(
            DepositFunds(
                user_id=user_id,
                amount=amount,
                payment_method=payment_method,
                description=description,
            )
        )


def withdraw_funds(
    user_id: str,
    amount: float,
    payment_method: str | None = None,
    description: str | None = None,
) -> float:
    with locks.hold(wallet_key(user_id)):
        return _process(
            WithdrawFunds(
                user_id=user_id,
                amount=amount,
                payment_method=payment_method,
                description=description,
            )
        )


def adjust_wallet_balance(
    user_id: str,
    amount: float,
    direction: str,
    reason: str,
    admin_id: str | None = None,
) -> float:
    """Administrative correction; a subtraction never takes the balance below zero."""
    with locks.hold(wallet_key(user_id)):
        return _process(
            AdjustWalletBalance(
                user_id=user_id,
                amount=amount,
                direction=direction,
                reason=reason,
                admin_id=admin_id,
            )
        )


def ensure_wallet(user_id: str) -> float:
    with locks.hold(wallet_key(user_id)):
        return _process(EnsureWallet(user_id=user_id))


# ---------------------------------------------------------------------------
# Order Lifecycle Manager
# ---------------------------------------------------------------------------
def place_order(
    customer_id: str,
    items: list[dict],
    partner_id: str | None = None,
    currency: str = DEFAULT_CURRENCY,
) -> str:
    return _process(
        PlaceOrder(
            customer_id=customer_id,
            partner_id=partner_id,
            items=json.dumps(items),
            currency=currency,
        )
    )


def assign_order(order_id: str, partner_id: str) -> None:
    with locks.hold(order_key(order_id)):
        _process(AssignOrderToPartner(order_id=order_id, partner_id=partner_id))


def mark_shipped(order_id: str, tracking_number: str | None = None, carrier: str | None = None) -> None:
    with locks.hold(order_key(order_id)):
        _process(MarkOrderShipped(order_id=order_id, tracking_number=tracking_number, carrier=carrier))


def mark_delivered(order_id: str) -> None:
    with locks.hold(order_key(order_id)):
        _process(MarkOrderDelivered(order_id=order_id))


def complete_order(order_id: str) -> None:
    with locks.hold(order_key(order_id)):
        _process(CompleteOrder(order_id=order_id))


# ---------------------------------------------------------------------------
# Partner configuration
# ---------------------------------------------------------------------------
def register_partner(
    user_id: str,
    store_name: str,
    contact_email: str,
    commission_rate: float,
    store_slug: str | None = None,
    contact_phone: str | None = None,
) -> str:
    with locks.hold(f"partner:{user_id}"):
        return _process(
            RegisterPartner(
                user_id=user_id,
                store_name=store_name,
                store_slug=store_slug,
                contact_email=contact_email,
                contact_phone=contact_phone,
                commission_rate=commission_rate,
            )
        )


def update_commission_rate(user_id: str, commission_rate: float) -> None:
    with locks.hold(f"partner:{user_id}"):
        _process(UpdateCommissionRate(user_id=user_id, commission_rate=commission_rate))
