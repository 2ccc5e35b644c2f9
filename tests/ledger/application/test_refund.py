"""Application tests for order cancellation and wallet refunds."""

import pytest
from protean import current_domain

from ledger import engine
from ledger.order.order import Order, OrderStatus
from ledger.wallet.wallet import TransactionType, Wallet
from shared.errors import InvalidState, NotFound

PARTNER = "partner-001"


def _place(total=40.0):
    return engine.place_order(
        "cust-001",
        [{"product_id": "prod-1", "quantity": 2, "unit_price": total / 2}],
        partner_id=PARTNER,
    )


def _paid(total=40.0):
    engine.deposit_funds(PARTNER, total)
    order_id = _place(total)
    engine.charge_wallet(order_id, PARTNER)
    return order_id


def _wallet():
    return current_domain.repository_for(Wallet).get(PARTNER)


def _order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


class TestRefundOrder:
    def test_paid_order_is_refunded_to_wallet(self):
        order_id = _paid(40.0)
        assert _wallet().balance == 0.0

        refund_amount = engine.refund_order(order_id, "customer request")

        assert refund_amount == 40.0
        wallet = _wallet()
        assert wallet.balance == 40.0
        refunds = [t for t in wallet.transactions if t.transaction_type == TransactionType.ORDER_REFUND.value]
        assert len(refunds) == 1
        assert refunds[0].amount == 40.0
        assert refunds[0].order_id == order_id

        order = _order(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "customer request"

    def test_unpaid_order_is_cancelled_without_refund(self):
        order_id = _place(40.0)

        assert engine.refund_order(order_id, "customer request") == 0.0
        assert current_domain.repository_for(Wallet).find(PARTNER) is None
        assert _order(order_id).status == OrderStatus.CANCELLED.value

    def test_second_cancel_fails_without_second_refund(self):
        order_id = _paid(40.0)
        engine.refund_order(order_id, "customer request")

        with pytest.raises(InvalidState, match="already cancelled"):
            engine.refund_order(order_id, "again")

        wallet = _wallet()
        assert wallet.balance == 40.0
        assert sum(1 for t in wallet.transactions if t.transaction_type == TransactionType.ORDER_REFUND.value) == 1

    def test_completed_order_cannot_be_cancelled(self):
        order_id = _paid(40.0)
        engine.complete_order(order_id)

        with pytest.raises(InvalidState, match="Cannot cancel completed order"):
            engine.refund_order(order_id, "too late")
        assert _wallet().balance == 0.0

    def test_paid_out_order_cannot_be_cancelled(self):
        engine.register_partner(PARTNER, "Brake World", "owner@brakeworld.example", 0.15)
        order_id = _paid(40.0)
        engine.mark_shipped(order_id, "1Z1", "UPS")
        engine.mark_delivered(order_id)
        engine.process_payout(order_id)

        with pytest.raises(InvalidState, match="paid out"):
            engine.refund_order(order_id, "too late")
        assert _wallet().balance == 6.0

    def test_partner_can_only_cancel_own_orders(self):
        order_id = _paid(40.0)

        with pytest.raises(InvalidState, match="does not belong"):
            engine.refund_order(order_id, "not mine", partner_id="partner-002")
        assert _order(order_id).status == OrderStatus.PROCESSING.value

    def test_unknown_order(self):
        with pytest.raises(NotFound):
            engine.refund_order("missing-order", "customer request")

    def test_partner_is_notified_of_refund(self, fake_email):
        engine.register_partner(PARTNER, "Brake World", "owner@brakeworld.example", 0.15)
        order_id = _paid(40.0)

        engine.refund_order(order_id, "customer request")

        refunds = [m for m in fake_email.sent_to("owner@brakeworld.example") if "Refund" in m["subject"]]
        assert len(refunds) == 1
        assert "customer request" in refunds[0]["body"]
