"""Withdrawal confirmation: sent when funds leave a partner's wallet."""

from notifications.types import NotificationChannel, NotificationType


class WithdrawalConfirmationTemplate:
    notification_type = NotificationType.WITHDRAWAL_CONFIRMATION.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        amount = context.get("amount", 0.0)
        currency = context.get("currency", "USD")
        method = context.get("payment_method") or "your payout method"
        balance = context.get("balance", 0.0)
        return {
            "subject": f"Withdrawal Confirmed - {currency} {amount:.2f}",
            "body": (
                f"We received your withdrawal of {currency} {amount:.2f} to {method}.\n\n"
                f"Remaining wallet balance: {currency} {balance:.2f}\n\n"
                "Funds usually arrive within 3-5 business days."
            ),
        }
