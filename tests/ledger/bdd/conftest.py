"""Shared BDD fixtures and step definitions for the Ledger domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from ledger import engine
from ledger.order.order import Order
from ledger.wallet.wallet import TransactionType, Wallet
from shared.errors import InsufficientFunds, InvalidState


@pytest.fixture()
def error():
    """Container for captured domain errors."""
    return {"exc": None}


@pytest.fixture()
def outcome():
    return {}


def _place(partner_id, total):
    return engine.place_order(
        "cust-001",
        [{"product_id": "prod-1", "quantity": 1, "unit_price": total}],
        partner_id=partner_id,
    )


def _pay(partner_id, order_id, total):
    engine.deposit_funds(partner_id, total)
    engine.charge_wallet(order_id, partner_id)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a partner "{partner_id}" with a commission rate of {rate:f}'),
    target_fixture="partner_id",
)
def registered_partner(partner_id, rate):
    engine.register_partner(partner_id, "Brake World", f"{partner_id}@brakeworld.example", rate)
    return partner_id


@given(parsers.cfparse("the partner wallet holds {amount:f}"))
def wallet_holds(partner_id, amount):
    engine.deposit_funds(partner_id, amount)


@given(parsers.cfparse("a pending order of {total:f} for the partner"), target_fixture="order_id")
def pending_order(partner_id, total):
    return _place(partner_id, total)


@given(parsers.cfparse("a paid order of {total:f} for the partner"), target_fixture="order_id")
def paid_order(partner_id, total):
    order_id = _place(partner_id, total)
    _pay(partner_id, order_id, total)
    return order_id


@given(parsers.cfparse("a completed order of {total:f} for the partner"), target_fixture="order_id")
def completed_order(partner_id, total):
    order_id = _place(partner_id, total)
    _pay(partner_id, order_id, total)
    engine.mark_shipped(order_id, "1Z999AA10123456784", "UPS")
    engine.complete_order(order_id)
    return order_id


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the operation is rejected as "{kind}"'))
def operation_rejected(error, kind):
    assert error["exc"] is not None, "Expected the operation to fail"
    assert isinstance(error["exc"], (InvalidState, InsufficientFunds))
    assert error["exc"].kind.value == kind


@then(parsers.cfparse("the partner wallet balance is {amount:f}"))
def wallet_balance_is(partner_id, amount):
    wallet = current_domain.repository_for(Wallet).get(partner_id)
    assert wallet.balance == amount
    assert wallet.balance == wallet.ledger_total()


@then(parsers.cfparse("the partner wallet has {count:d} commission transaction"))
def commission_count(partner_id, count):
    wallet = current_domain.repository_for(Wallet).get(partner_id)
    commissions = [t for t in wallet.transactions if t.transaction_type == TransactionType.COMMISSION.value]
    assert len(commissions) == count


@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the order payment status is "{status}"'))
def order_payment_status_is(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).payment_status == status
