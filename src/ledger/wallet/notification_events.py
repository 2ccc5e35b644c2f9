"""Partner emails for wallet movements (payout receipt, refund, withdrawal).

Runs after the wallet change is committed. Delivery is best-effort:
``send_notification`` never raises.
"""

from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from ledger.domain import ledger
from ledger.partner.partner import PartnerProfile
from ledger.wallet.events import CommissionCredited, FundsWithdrawn, RefundCredited
from ledger.wallet.wallet import Wallet
from notifications.dispatch import send_notification
from notifications.types import NotificationType


def _recipient(user_id) -> str | None:
    return current_domain.repository_for(PartnerProfile).contact_email_for(str(user_id))


@ledger.event_handler(part_of=Wallet)
class WalletNotificationHandler:
    @handle(CommissionCredited)
    def on_commission_credited(self, event: CommissionCredited) -> None:
        send_notification(
            _recipient(event.user_id),
            NotificationType.PAYOUT_RECEIPT.value,
            {
                "order_id": str(event.order_id),
                "order_number": event.order_number,
                "amount": event.amount,
                "commission_rate": event.commission_rate,
                "balance": event.balance,
            },
        )

    @handle(RefundCredited)
    def on_refund_credited(self, event: RefundCredited) -> None:
        send_notification(
            _recipient(event.user_id),
            NotificationType.REFUND_NOTIFICATION.value,
            {
                "order_id": str(event.order_id),
                "order_number": event.order_number,
                "amount": event.amount,
                "reason": event.reason,
            },
        )

    @handle(FundsWithdrawn)
    def on_funds_withdrawn(self, event: FundsWithdrawn) -> None:
        send_notification(
            _recipient(event.user_id),
            NotificationType.WITHDRAWAL_CONFIRMATION.value,
            {
                "amount": event.amount,
                "payment_method": event.payment_method,
                "balance": event.balance,
            },
        )
