"""Delivery confirmation: sent when the carrier reports delivery."""

from notifications.types import NotificationChannel, NotificationType


class DeliveryConfirmationTemplate:
    notification_type = NotificationType.DELIVERY_CONFIRMATION.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        tracking_number = context.get("tracking_number", "N/A")
        delivered_at = context.get("delivered_at", "today")
        return {
            "subject": "Order Delivered",
            "body": (
                f"Order #{order_id} (tracking {tracking_number}) was delivered on {delivered_at}.\n\n"
                "The order is now eligible for payout."
            ),
        }
