"""Notification types and delivery channels."""

from enum import Enum


class NotificationType(Enum):
    PAYOUT_RECEIPT = "payout_receipt"
    REFUND_NOTIFICATION = "refund_notification"
    WITHDRAWAL_CONFIRMATION = "withdrawal_confirmation"
    SHIPPING_UPDATE = "shipping_update"
    DELIVERY_CONFIRMATION = "delivery_confirmation"


class NotificationChannel(Enum):
    EMAIL = "Email"
