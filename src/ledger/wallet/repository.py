"""Repository for the Wallet aggregate."""

from ledger.domain import ledger
from ledger.wallet.wallet import Wallet
from shared.money import DEFAULT_CURRENCY
from shared.persistence import find_or_none


@ledger.repository(part_of=Wallet)
class WalletRepository:
    def find(self, user_id: str) -> Wallet | None:
        return find_or_none(self, user_id)

    def find_or_open(self, user_id: str, currency: str = DEFAULT_CURRENCY) -> Wallet:
        """The user's wallet, or a new unsaved zero-balance wallet in ``currency`` when none exists."""
        return self.find(user_id) or Wallet.open(user_id, currency=currency)
