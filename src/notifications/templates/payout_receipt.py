"""Payout receipt: sent when a partner's commission is credited."""

from notifications.types import NotificationChannel, NotificationType


class PayoutReceiptTemplate:
    notification_type = NotificationType.PAYOUT_RECEIPT.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number") or context.get("order_id", "N/A")
        amount = context.get("amount", 0.0)
        currency = context.get("currency", "USD")
        rate = context.get("commission_rate", 0.0)
        balance = context.get("balance", 0.0)
        return {
            "subject": f"Payout Received - {currency} {amount:.2f}",
            "body": (
                f"Your earnings for order #{order_number} have been credited to your wallet.\n\n"
                f"Commission: {currency} {amount:.2f} ({rate:.0%} of the order total)\n"
                f"Wallet balance: {currency} {balance:.2f}\n\n"
                "Thank you for selling on AutoTradeHub."
            ),
        }
