"""Template registry mapping NotificationType to template classes.

Each template knows its default channels and how to render content
from event context data.
"""

from notifications.templates.delivery_confirmation import DeliveryConfirmationTemplate
from notifications.templates.payout_receipt import PayoutReceiptTemplate
from notifications.templates.refund_notification import RefundNotificationTemplate
from notifications.templates.shipping_update import ShippingUpdateTemplate
from notifications.templates.withdrawal_confirmation import WithdrawalConfirmationTemplate
from notifications.types import NotificationType

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.PAYOUT_RECEIPT.value: PayoutReceiptTemplate,
    NotificationType.REFUND_NOTIFICATION.value: RefundNotificationTemplate,
    NotificationType.WITHDRAWAL_CONFIRMATION.value: WithdrawalConfirmationTemplate,
    NotificationType.SHIPPING_UPDATE.value: ShippingUpdateTemplate,
    NotificationType.DELIVERY_CONFIRMATION.value: DeliveryConfirmationTemplate,
}


def get_template(notification_type: str):
    """Look up a template class by notification type string."""
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
