"""Domain events for the Wallet aggregate.

Every balance movement raises exactly one event carrying the resulting
balance, so subscribers never need to re-read the wallet.
"""

from protean.fields import DateTime, Float, Identifier, String

from ledger.domain import ledger


@ledger.event(part_of="Wallet")
class WalletOpened:
    __version__ = 1

    user_id = Identifier(required=True)
    currency = String(required=True)
    opened_at = DateTime(required=True)


@ledger.event(part_of="Wallet")
class CommissionCredited:
    """A partner's commission for a completed order was credited."""

    __version__ = 1

    user_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String()
    order_total = Float(required=True)
    commission_rate = Float(required=True)
    amount = Float(required=True)
    balance = Float(required=True)
    credited_at = DateTime(required=True)


@ledger.event(part_of="Wallet")
class WalletCharged:
    """An order was paid from the wallet balance."""

    __version__ = 1

    user_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String()
    amount = Float(required=True)
    balance = Float(required=True)
    charged_at = DateTime(required=True)


@ledger.event(part_of="Wallet")
class RefundCredited:
    """The total of a cancelled, paid order was returned to the wallet."""

    __version__ = 1

    user_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String()
    amount = Float(required=True)
    reason = String()
    balance = Float(required=True)
    refunded_at = DateTime(required=True)


@ledger.event(part_of="Wallet")
class FundsDeposited:
    __version__ = 1

    user_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    amount = Float(required=True)
    payment_method = String()
    balance = Float(required=True)
    deposited_at = DateTime(required=True)


@ledger.event(part_of="Wallet")
class FundsWithdrawn:
    __version__ = 1

    user_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    amount = Float(required=True)
    payment_method = String()
    balance = Float(required=True)
    withdrawn_at = DateTime(required=True)


@ledger.event(part_of="Wallet")
class WalletAdjusted:
    """An administrator corrected the balance; ``amount`` is signed."""

    __version__ = 1

    user_id = Identifier(required=True)
    transaction_id = Identifier(required=True)
    amount = Float(required=True)
    reason = String(required=True)
    admin_id = Identifier()
    balance = Float(required=True)
    adjusted_at = DateTime(required=True)
