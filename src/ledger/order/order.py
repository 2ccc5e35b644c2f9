"""Order aggregate (CQRS): the order status and payment state machine.

The Order owns its status transitions and payout flags, but never touches a
balance: every monetary effect (wallet charge, refund, commission payout) is
applied by the Wallet aggregate in the same Unit of Work.

State Machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED → COMPLETED
    PROCESSING → {DELIVERED, COMPLETED}, SHIPPED → COMPLETED
    {PENDING, PROCESSING, SHIPPED, DELIVERED} → CANCELLED

Payment status is orthogonal: PENDING → PAID.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
)

from ledger.domain import ledger
from ledger.order.events import (
    OrderAssigned,
    OrderCancelled,
    OrderCompleted,
    OrderDelivered,
    OrderPaid,
    OrderPaidOut,
    OrderPlaced,
    OrderShipped,
)
from shared.errors import InvalidState
from shared.money import DEFAULT_CURRENCY, is_valid_currency, to_money


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {
        OrderStatus.SHIPPED,
        OrderStatus.DELIVERED,
        OrderStatus.COMPLETED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),  # terminal
    OrderStatus.CANCELLED: set(),  # terminal
}

PAYOUT_ELIGIBLE_STATUSES = frozenset({OrderStatus.COMPLETED, OrderStatus.DELIVERED})


def generate_order_number(now: datetime | None = None) -> str:
    now = now or datetime.now(UTC)
    return f"ORD-{int(now.timestamp() * 1000)}-{uuid4().hex[:9].upper()}"


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@ledger.entity(part_of="Order")
class OrderItem:
    """A line item with the product snapshot taken when the order was placed."""

    product_id = Identifier(required=True)
    partner_product_id = Identifier()
    title = String(max_length=255)
    sku = String(max_length=100)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    subtotal = Float(min_value=0.0)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@ledger.aggregate
class Order:
    order_number = String(required=True, max_length=50)
    partner_id = Identifier()
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    currency = String(max_length=3, default=DEFAULT_CURRENCY)
    status = String(
        max_length=20,
        choices=OrderStatus,
        default=OrderStatus.PENDING.value,
    )
    payment_status = String(
        max_length=20,
        choices=PaymentStatus,
        default=PaymentStatus.PENDING.value,
    )
    paid_out = Boolean(default=False)
    payout_amount = Float()
    payout_date = DateTime()
    tracking_number = String(max_length=255)  # cache, written from tracking events only
    carrier = String(max_length=100)
    cancellation_reason = String(max_length=500)
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def payout_amount_is_set_only_when_paid_out(self):
        if self.paid_out and self.payout_amount is None:
            raise ValidationError({"payout_amount": ["A paid-out order must record its payout amount"]})
        if not self.paid_out and self.payout_amount is not None:
            raise ValidationError({"payout_amount": ["Payout amount can only be set when the order is paid out"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        customer_id: str,
        items_data: list[dict],
        partner_id: str | None = None,
        currency: str = DEFAULT_CURRENCY,
    ):
        """Place a new pending order; the total is derived from the items."""
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})
        currency = currency or DEFAULT_CURRENCY
        if not is_valid_currency(currency):
            raise ValidationError({"currency": [f"Unsupported currency {currency}"]})

        now = datetime.now(UTC)
        total = to_money(sum(item["unit_price"] * item["quantity"] for item in items_data))
        order = cls(
            order_number=generate_order_number(now),
            customer_id=customer_id,
            partner_id=partner_id,
            total_amount=total,
            currency=currency,
            created_at=now,
            updated_at=now,
        )
        for item_data in items_data:
            order.add_items(
                OrderItem(**{**item_data, "subtotal": to_money(item_data["unit_price"] * item_data["quantity"])})
            )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                customer_id=customer_id,
                partner_id=partner_id,
                total_amount=total,
                currency=order.currency,
                item_count=len(items_data),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    def belongs_to(self, partner_id: str) -> bool:
        return self.partner_id is not None and str(self.partner_id) == str(partner_id)

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise InvalidState(
                f"Cannot transition order from {current.value} to {target_status.value}",
                order_id=str(self.id),
                current=current.value,
                target=target_status.value,
            )

    # -------------------------------------------------------------------
    # Assignment
    # -------------------------------------------------------------------
    def assign_to(self, partner_id: str) -> None:
        """Hand an unassigned pending order to a partner. Ownership never changes afterwards."""
        if self.partner_id:
            raise InvalidState(
                "Order is already assigned to a partner",
                field="partner_id",
                order_id=str(self.id),
                partner_id=str(self.partner_id),
            )
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise InvalidState(
                f"Order in {self.status} status cannot be assigned",
                order_id=str(self.id),
                current=self.status,
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            self.partner_id = partner_id
            self.updated_at = now
        self.raise_(
            OrderAssigned(
                order_id=str(self.id),
                order_number=self.order_number,
                partner_id=str(partner_id),
                assigned_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def assert_payable(self) -> None:
        if self.is_paid:
            raise InvalidState("Order is already paid", field="payment_status", order_id=str(self.id))
        if OrderStatus(self.status) not in (OrderStatus.PENDING, OrderStatus.PROCESSING):
            raise InvalidState(
                f"Order in {self.status} status cannot be paid",
                order_id=str(self.id),
                current=self.status,
            )

    def record_wallet_payment(self) -> None:
        """Mark the order paid from the partner's wallet and start processing it."""
        self.assert_payable()
        now = datetime.now(UTC)
        with atomic_change(self):
            if OrderStatus(self.status) == OrderStatus.PENDING:
                self.status = OrderStatus.PROCESSING.value
            self.payment_status = PaymentStatus.PAID.value
            self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                order_number=self.order_number,
                partner_id=str(self.partner_id),
                amount=self.total_amount,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Fulfillment
    # -------------------------------------------------------------------
    def mark_shipped(self, tracking_number: str | None = None, carrier: str | None = None) -> None:
        if not self.is_paid:
            raise InvalidState("Order must be paid before it ships", order_id=str(self.id))
        self._assert_can_transition(OrderStatus.SHIPPED)

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.SHIPPED.value
            self.tracking_number = tracking_number
            self.carrier = carrier
            self.updated_at = now
        self.raise_(
            OrderShipped(
                order_id=str(self.id),
                tracking_number=tracking_number,
                carrier=carrier,
                shipped_at=now,
            )
        )

    def mark_delivered(self) -> None:
        self._assert_can_transition(OrderStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.updated_at = now
        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    def complete(self) -> None:
        self._assert_can_transition(OrderStatus.COMPLETED)
        now = datetime.now(UTC)
        self.status = OrderStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(
            OrderCompleted(
                order_id=str(self.id),
                partner_id=self.partner_id,
                completed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Cancellation
    # -------------------------------------------------------------------
    def cancel(self, reason: str) -> float:
        """Cancel the order. Returns the amount to refund (0.0 when unpaid)."""
        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            raise InvalidState("Order is already cancelled", order_id=str(self.id))
        if current == OrderStatus.COMPLETED:
            raise InvalidState("Cannot cancel completed order", order_id=str(self.id))
        if self.paid_out:
            raise InvalidState("Cannot cancel an order that has been paid out", order_id=str(self.id))
        self._assert_can_transition(OrderStatus.CANCELLED)

        refund_amount = self.total_amount if self.is_paid else 0.0
        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = OrderStatus.CANCELLED.value
            self.cancellation_reason = reason
            self.cancelled_at = now
            self.updated_at = now
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                order_number=self.order_number,
                partner_id=self.partner_id,
                reason=reason,
                was_paid=self.is_paid,
                refund_amount=refund_amount,
                cancelled_at=now,
            )
        )
        return refund_amount

    # -------------------------------------------------------------------
    # Payout
    # -------------------------------------------------------------------
    def assert_payout_eligible(self) -> None:
        if not self.partner_id:
            raise InvalidState("Order not assigned to a partner", field="partner_id", order_id=str(self.id))
        if self.paid_out:
            raise InvalidState("Order has already been paid out", field="paid_out", order_id=str(self.id))
        if OrderStatus(self.status) not in PAYOUT_ELIGIBLE_STATUSES:
            raise InvalidState(
                "Order must be completed or delivered before payout",
                order_id=str(self.id),
                current=self.status,
            )

    def record_payout(self, amount: float) -> None:
        """Flag the order as paid out. The payout amount is written exactly once."""
        self.assert_payout_eligible()
        now = datetime.now(UTC)
        with atomic_change(self):
            self.paid_out = True
            self.payout_amount = to_money(amount)
            self.payout_date = now
            self.updated_at = now
        self.raise_(
            OrderPaidOut(
                order_id=str(self.id),
                order_number=self.order_number,
                partner_id=str(self.partner_id),
                payout_amount=self.payout_amount,
                paid_out_at=now,
            )
        )
