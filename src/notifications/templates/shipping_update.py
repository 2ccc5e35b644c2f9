"""Shipping update: sent whenever a shipment changes status."""

from notifications.types import NotificationChannel, NotificationType


class ShippingUpdateTemplate:
    notification_type = NotificationType.SHIPPING_UPDATE.value
    default_channels = [NotificationChannel.EMAIL.value]

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        status = context.get("status_label") or context.get("status", "updated")
        tracking_number = context.get("tracking_number", "N/A")
        location = context.get("location")
        lines = [
            f"Order #{order_id} is now: {status}.",
            "",
            f"Tracking Number: {tracking_number}",
        ]
        if location:
            lines.append(f"Location: {location}")
        return {"subject": f"Shipment Update - {status}", "body": "\n".join(lines)}
