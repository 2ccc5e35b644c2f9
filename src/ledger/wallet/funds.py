"""Wallet funding: deposits, withdrawals, admin adjustments and lazy wallet creation."""

import structlog
from protean import handle
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.wallet.wallet import AdjustmentDirection, Wallet

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Wallet")
class DepositFunds:
    user_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.01)
    payment_method = String(max_length=50)
    description = String(max_length=500)


@ledger.command(part_of="Wallet")
class WithdrawFunds:
    user_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.01)
    payment_method = String(max_length=50)
    description = String(max_length=500)


@ledger.command(part_of="Wallet")
class AdjustWalletBalance:
    user_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.01)
    direction = String(required=True, max_length=10, choices=AdjustmentDirection)
    reason = String(required=True, max_length=500)
    admin_id = Identifier()


@ledger.command(part_of="Wallet")
class EnsureWallet:
    user_id = Identifier(required=True)


@ledger.command_handler(part_of=Wallet)
class WalletFundsHandler:
    @handle(DepositFunds)
    def deposit_funds(self, command):
        repo = current_domain.repository_for(Wallet)
        wallet = repo.find_or_open(command.user_id)
        txn = wallet.deposit(
            command.amount,
            payment_method=command.payment_method,
            description=command.description,
        )
        repo.add(wallet)
        logger.info("Funds deposited", user_id=str(command.user_id), amount=txn.amount, balance=wallet.balance)
        return wallet.balance

    @handle(WithdrawFunds)
    def withdraw_funds(self, command):
        repo = current_domain.repository_for(Wallet)
        wallet = repo.find_or_open(command.user_id)
        txn = wallet.withdraw(
            command.amount,
            payment_method=command.payment_method,
            description=command.description,
        )
        repo.add(wallet)
        logger.info("Funds withdrawn", user_id=str(command.user_id), amount=txn.amount, balance=wallet.balance)
        return wallet.balance

    @handle(AdjustWalletBalance)
    def adjust_balance(self, command):
        repo = current_domain.repository_for(Wallet)
        wallet = repo.find_or_open(command.user_id)
        txn = wallet.adjust(
            command.amount,
            AdjustmentDirection(command.direction),
            reason=command.reason,
            admin_id=command.admin_id,
        )
        repo.add(wallet)
        logger.info(
            "Wallet balance adjusted",
            user_id=str(command.user_id),
            amount=txn.amount,
            reason=command.reason,
            admin_id=command.admin_id,
            balance=wallet.balance,
        )
        return wallet.balance

    @handle(EnsureWallet)
    def ensure_wallet(self, command):
        repo = current_domain.repository_for(Wallet)
        wallet = repo.find(command.user_id)
        if wallet is None:
            wallet = Wallet.open(command.user_id)
            repo.add(wallet)
            logger.info("Wallet opened", user_id=str(command.user_id))
        return wallet.balance
