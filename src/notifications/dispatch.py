"""Best-effort notification dispatch.

``send_notification`` is called by event handlers after the ledger or
tracking change has been committed. It never raises: any failure is
wrapped in ``NotificationError``, logged, and reported as ``False`` so the
committed mutation is never affected.
"""

import structlog

from notifications.channel import get_channel
from notifications.templates import get_template
from shared.errors import ErrorKind

logger = structlog.get_logger(__name__)


class NotificationError(Exception):
    kind = ErrorKind.NOTIFICATION_ERROR

    def __init__(self, recipient: str, notification_type: str, reason: str):
        self.recipient = recipient
        self.notification_type = notification_type
        self.reason = reason
        super().__init__(f"Failed to send {notification_type} to {recipient}: {reason}")

    @property
    def context(self) -> dict:
        return {
            "recipient": self.recipient,
            "notification_type": self.notification_type,
            "reason": self.reason,
        }


def _deliver(recipient: str, notification_type: str, context: dict) -> list[str]:
    template_cls = get_template(notification_type)
    rendered = template_cls.render(context)

    message_ids = []
    for channel in template_cls.default_channels:
        result = get_channel(channel).send(to=recipient, subject=rendered["subject"], body=rendered["body"])
        if result.get("status") != "sent":
            raise NotificationError(recipient, notification_type, result.get("error", "Unknown dispatch error"))
        message_ids.append(result["message_id"])
    return message_ids


def send_notification(recipient: str | None, notification_type: str, context: dict) -> bool:
    """Render and send a notification. Returns True when every channel accepted it."""
    if not recipient:
        logger.warning("Notification skipped, no recipient", notification_type=notification_type)
        return False

    try:
        message_ids = _deliver(recipient, notification_type, context)
    except NotificationError as exc:
        logger.error("Notification delivery failed", **exc.context)
        return False
    except Exception as exc:
        error = NotificationError(recipient, notification_type, str(exc))
        logger.error("Notification delivery failed", **error.context)
        return False

    logger.info(
        "Notification sent",
        recipient=recipient,
        notification_type=notification_type,
        message_ids=message_ids,
    )
    return True
