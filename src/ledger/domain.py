"""Ledger bounded context: Partner Orders, Wallets and Payouts.

Owns the order status/payment state machine, partner commission
configuration, and the wallet ledger (balances plus their immutable audit
transactions). Every monetary effect of an order event flows through the
Wallet aggregate.
"""

import structlog
from protean.domain import Domain

ledger = Domain(name="ledger")

logger = structlog.get_logger(__name__)
