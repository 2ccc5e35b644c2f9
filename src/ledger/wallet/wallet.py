"""Wallet aggregate (CQRS): a partner's balance and its audit trail.

The balance and the transactions that justify it live in one aggregate, so
every balance movement is a single ``_post`` that appends exactly one
completed WalletTransaction and applies its signed amount. Post-invariants
check after every change that:

    balance == sum(amount of completed transactions)
    balance >= 0

Credits are positive amounts, debits negative. Transactions are never
edited or removed once posted.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, String, Text

from ledger.domain import ledger
from ledger.wallet.events import (
    CommissionCredited,
    FundsDeposited,
    FundsWithdrawn,
    RefundCredited,
    WalletAdjusted,
    WalletCharged,
    WalletOpened,
)
from shared.errors import InsufficientFunds, InvalidState
from shared.money import DEFAULT_CURRENCY, to_money

# Half a cent: float sums are compared at cent precision
_BALANCE_TOLERANCE = 0.005


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class TransactionType(Enum):
    COMMISSION = "commission"
    ORDER_PAYMENT = "order_payment"
    ORDER_REFUND = "order_refund"
    WITHDRAWAL = "withdrawal"
    DEPOSIT = "deposit"
    BONUS = "bonus"
    ADJUSTMENT = "adjustment"


class AdjustmentDirection(Enum):
    ADD = "add"
    SUBTRACT = "subtract"


class TransactionStatus(Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


EARNING_TYPES = frozenset({TransactionType.COMMISSION.value, TransactionType.BONUS.value})


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ledger.entity(part_of="Wallet")
class WalletTransaction:
    """Immutable audit entry for one balance movement."""

    user_id = Identifier(required=True)
    order_id = Identifier()
    transaction_type = String(max_length=20, choices=TransactionType, required=True)
    amount = Float(required=True)  # signed: credit > 0, debit < 0
    status = String(
        max_length=20,
        choices=TransactionStatus,
        default=TransactionStatus.COMPLETED.value,
    )
    description = String(max_length=500)
    details = Text()  # JSON metadata
    payment_method = String(max_length=50)
    created_at = DateTime(required=True)

    @property
    def is_completed(self) -> bool:
        return self.status == TransactionStatus.COMPLETED.value

    @property
    def metadata(self) -> dict:
        return json.loads(self.details) if self.details else {}


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ledger.aggregate
class Wallet:
    user_id = Identifier(identifier=True, required=True)
    balance = Float(default=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    transactions = HasMany(WalletTransaction)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def balance_is_never_negative(self):
        if self.balance is not None and self.balance < 0:
            raise ValidationError({"balance": ["Wallet balance cannot be negative"]})

    @invariant.post
    def balance_matches_completed_transactions(self):
        if abs((self.balance or 0.0) - self.ledger_total()) > _BALANCE_TOLERANCE:
            raise ValidationError({"balance": ["Wallet balance does not match its completed transactions"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def open(cls, user_id: str, currency: str = DEFAULT_CURRENCY):
        """A zero-balance wallet for ``user_id``."""
        now = datetime.now(UTC)
        wallet = cls(
            user_id=user_id,
            balance=0.0,
            currency=currency,
            created_at=now,
            updated_at=now,
        )
        wallet.raise_(WalletOpened(user_id=str(user_id), currency=currency, opened_at=now))
        return wallet

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def completed_transactions(self) -> list:
        return [txn for txn in self.transactions if txn.is_completed]

    def ledger_total(self) -> float:
        return to_money(sum(txn.amount for txn in self.completed_transactions()))

    def has_commission_for(self, order_id) -> bool:
        return any(
            txn.transaction_type == TransactionType.COMMISSION.value and str(txn.order_id) == str(order_id)
            for txn in self.transactions
        )

    def can_cover(self, amount: float) -> bool:
        return to_money(self.balance) >= to_money(amount)

    # -------------------------------------------------------------------
    # Posting helper
    # -------------------------------------------------------------------
    def _post(
        self,
        transaction_type: TransactionType,
        amount: float,
        description: str,
        order_id: str | None = None,
        payment_method: str | None = None,
        details: dict | None = None,
    ) -> WalletTransaction:
        now = datetime.now(UTC)
        txn = WalletTransaction(
            user_id=self.user_id,
            order_id=order_id,
            transaction_type=transaction_type.value,
            amount=to_money(amount),
            status=TransactionStatus.COMPLETED.value,
            description=description,
            payment_method=payment_method,
            details=json.dumps(details) if details else None,
            created_at=now,
        )
        with atomic_change(self):
            self.add_transactions(txn)
            self.balance = to_money((self.balance or 0.0) + txn.amount)
            self.updated_at = now
        return txn

    def _assert_positive(self, amount: float) -> None:
        if amount is None or to_money(amount) <= 0:
            raise ValidationError({"amount": ["Amount must be greater than zero"]})

    def _assert_covers(self, amount: float) -> None:
        if not self.can_cover(amount):
            raise InsufficientFunds(self.user_id, to_money(self.balance), to_money(amount))

    def _assert_currency(self, currency: str | None, order_id: str) -> None:
        if currency and currency != self.currency:
            raise InvalidState(
                f"Order currency {currency} does not match wallet currency {self.currency}",
                field="currency",
                order_id=str(order_id),
                user_id=str(self.user_id),
            )

    # -------------------------------------------------------------------
    # Credits
    # -------------------------------------------------------------------
    def credit_commission(
        self,
        order_id: str,
        order_total: float,
        commission_rate: float,
        amount: float,
        order_number: str | None = None,
        currency: str | None = None,
    ) -> WalletTransaction:
        """Credit the commission earned on ``order_id``. At most once per order."""
        self._assert_currency(currency, order_id)
        if self.has_commission_for(order_id):
            raise InvalidState(
                "Commission already credited for this order",
                field="order_id",
                order_id=str(order_id),
                user_id=str(self.user_id),
            )
        txn = self._post(
            TransactionType.COMMISSION,
            amount,
            description=f"Commission for order {order_number or order_id}",
            order_id=order_id,
            details={
                "order_total": to_money(order_total),
                "commission_rate": commission_rate,
            },
        )
        self.raise_(
            CommissionCredited(
                user_id=str(self.user_id),
                transaction_id=str(txn.id),
                order_id=str(order_id),
                order_number=order_number,
                order_total=to_money(order_total),
                commission_rate=commission_rate,
                amount=txn.amount,
                balance=self.balance,
                credited_at=txn.created_at,
            )
        )
        return txn

    def credit_refund(
        self,
        order_id: str,
        amount: float,
        reason: str,
        order_number: str | None = None,
        currency: str | None = None,
    ) -> WalletTransaction:
        self._assert_positive(amount)
        self._assert_currency(currency, order_id)
        txn = self._post(
            TransactionType.ORDER_REFUND,
            amount,
            description=f"Refund for cancelled order {order_number or order_id}: {reason}",
            order_id=order_id,
            details={"reason": reason},
        )
        self.raise_(
            RefundCredited(
                user_id=str(self.user_id),
                transaction_id=str(txn.id),
                order_id=str(order_id),
                order_number=order_number,
                amount=txn.amount,
                reason=reason,
                balance=self.balance,
                refunded_at=txn.created_at,
            )
        )
        return txn

    def deposit(
        self,
        amount: float,
        payment_method: str | None = None,
        description: str | None = None,
    ) -> WalletTransaction:
        self._assert_positive(amount)
        txn = self._post(
            TransactionType.DEPOSIT,
            amount,
            description=description or "Wallet deposit",
            payment_method=payment_method,
        )
        self.raise_(
            FundsDeposited(
                user_id=str(self.user_id),
                transaction_id=str(txn.id),
                amount=txn.amount,
                payment_method=payment_method,
                balance=self.balance,
                deposited_at=txn.created_at,
            )
        )
        return txn

    # -------------------------------------------------------------------
    # Debits
    # -------------------------------------------------------------------
    def debit_order_payment(
        self,
        order_id: str,
        amount: float,
        order_number: str | None = None,
        currency: str | None = None,
    ) -> WalletTransaction:
        """Pay an order from the balance; fails without side effects when short."""
        self._assert_positive(amount)
        self._assert_currency(currency, order_id)
        self._assert_covers(amount)
        txn = self._post(
            TransactionType.ORDER_PAYMENT,
            -to_money(amount),
            description=f"Payment for order {order_number or order_id}",
            order_id=order_id,
        )
        self.raise_(
            WalletCharged(
                user_id=str(self.user_id),
                transaction_id=str(txn.id),
                order_id=str(order_id),
                order_number=order_number,
                amount=abs(txn.amount),
                balance=self.balance,
                charged_at=txn.created_at,
            )
        )
        return txn

    def withdraw(
        self,
        amount: float,
        payment_method: str | None = None,
        description: str | None = None,
    ) -> WalletTransaction:
        self._assert_positive(amount)
        self._assert_covers(amount)
        txn = self._post(
            TransactionType.WITHDRAWAL,
            -to_money(amount),
            description=description or "Wallet withdrawal",
            payment_method=payment_method,
        )
        self.raise_(
            FundsWithdrawn(
                user_id=str(self.user_id),
                transaction_id=str(txn.id),
                amount=abs(txn.amount),
                payment_method=payment_method,
                balance=self.balance,
                withdrawn_at=txn.created_at,
            )
        )
        return txn

    # -------------------------------------------------------------------
    # Administrative adjustment
    # -------------------------------------------------------------------
    def adjust(
        self,
        amount: float,
        direction: AdjustmentDirection,
        reason: str,
        admin_id: str | None = None,
    ) -> WalletTransaction:
        """Manual correction by an administrator, audited like any other posting."""
        self._assert_positive(amount)
        if not reason:
            raise ValidationError({"reason": ["An adjustment needs a reason"]})
        if direction == AdjustmentDirection.SUBTRACT:
            self._assert_covers(amount)
        signed = to_money(amount) if direction == AdjustmentDirection.ADD else -to_money(amount)

        txn = self._post(
            TransactionType.ADJUSTMENT,
            signed,
            description=f"Balance adjustment: {reason}",
            details={"direction": direction.value, "reason": reason, "admin_id": admin_id},
        )
        self.raise_(
            WalletAdjusted(
                user_id=str(self.user_id),
                transaction_id=str(txn.id),
                amount=txn.amount,
                reason=reason,
                admin_id=admin_id,
                balance=self.balance,
                adjusted_at=txn.created_at,
            )
        )
        return txn
