"""Refund notification: sent when a cancelled order's payment is returned."""

from notifications.types import NotificationChannel, NotificationType


class RefundNotificationTemplate:
    notification_type = NotificationType.REFUND_NOTIFICATION.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_number = context.get("order_number") or context.get("order_id", "N/A")
        amount = context.get("amount", 0.0)
        currency = context.get("currency", "USD")
        reason = context.get("reason") or "as requested"
        return {
            "subject": f"Refund Processed - {currency} {amount:.2f}",
            "body": (
                f"Order #{order_number} was cancelled and {currency} {amount:.2f} "
                "has been returned to your wallet.\n\n"
                f"Reason: {reason}"
            ),
        }
