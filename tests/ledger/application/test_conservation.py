"""The wallet balance always equals the sum of its completed transactions."""

from protean import current_domain

from ledger import engine
from ledger.wallet.wallet import Wallet

PARTNER = "partner-001"


def _assert_conserved():
    wallet = current_domain.repository_for(Wallet).get(PARTNER)
    assert wallet.balance == wallet.ledger_total()
    assert wallet.balance >= 0


def test_balance_is_conserved_across_a_partner_lifecycle():
    engine.register_partner(PARTNER, "Brake World", "owner@brakeworld.example", 0.125)
    engine.deposit_funds(PARTNER, 200.0)
    _assert_conserved()

    orders = [
        engine.place_order(
            "cust-001",
            [{"product_id": "prod-1", "quantity": 3, "unit_price": unit_price}],
            partner_id=PARTNER,
        )
        for unit_price in (9.99, 19.95, 4.45)
    ]
    for order_id in orders:
        engine.charge_wallet(order_id, PARTNER)
        _assert_conserved()

    engine.refund_order(orders[0], "out of stock")
    _assert_conserved()

    engine.complete_order(orders[1])
    engine.process_payout(orders[1])
    _assert_conserved()

    engine.mark_shipped(orders[2], "1Z1", "UPS")
    engine.mark_delivered(orders[2])
    engine.process_payout(orders[2])
    _assert_conserved()

    engine.withdraw_funds(PARTNER, 12.34)
    _assert_conserved()
