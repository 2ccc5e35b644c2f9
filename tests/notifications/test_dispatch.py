"""Tests for best-effort notification dispatch and templates."""

import pytest

from notifications.dispatch import NotificationError, send_notification
from notifications.templates import TEMPLATE_REGISTRY, get_template
from notifications.types import NotificationType


class TestSendNotification:
    def test_email_is_sent(self, fake_email):
        sent = send_notification(
            "owner@brakeworld.example",
            NotificationType.PAYOUT_RECEIPT.value,
            {"order_number": "ORD-1", "amount": 15.0, "commission_rate": 0.15, "balance": 15.0},
        )

        assert sent is True
        (email,) = fake_email.sent_emails
        assert email["to"] == "owner@brakeworld.example"
        assert email["subject"] == "Payout Received - USD 15.00"
        assert "15%" in email["body"]

    def test_missing_recipient_is_skipped(self, fake_email):
        assert send_notification(None, NotificationType.PAYOUT_RECEIPT.value, {}) is False
        assert fake_email.sent_emails == []

    def test_channel_failure_returns_false(self, fake_email):
        fake_email.configure(should_succeed=False, failure_reason="Mailbox full")
        assert send_notification("a@b.example", NotificationType.SHIPPING_UPDATE.value, {"status": "shipped"}) is False

    def test_channel_exception_is_swallowed(self, fake_email):
        fake_email.configure(raise_error=ConnectionError("SMTP down"))
        assert send_notification("a@b.example", NotificationType.DELIVERY_CONFIRMATION.value, {}) is False

    def test_unknown_type_is_not_raised(self, fake_email):
        assert send_notification("a@b.example", "carrier_pigeon", {}) is False


class TestTemplates:
    @pytest.mark.parametrize("notification_type", [t.value for t in NotificationType])
    def test_every_type_renders_with_empty_context(self, notification_type):
        rendered = get_template(notification_type).render({})
        assert rendered["subject"]
        assert rendered["body"]

    def test_registry_covers_every_type(self):
        assert set(TEMPLATE_REGISTRY) == {t.value for t in NotificationType}

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            get_template("carrier_pigeon")

    def test_shipping_update_includes_location(self):
        rendered = get_template(NotificationType.SHIPPING_UPDATE.value).render(
            {"order_id": "ord-1", "status_label": "In Transit", "tracking_number": "1Z1", "location": "Reno, NV"}
        )
        assert rendered["subject"] == "Shipment Update - In Transit"
        assert "Location: Reno, NV" in rendered["body"]


def test_notification_error_context():
    error = NotificationError("a@b.example", "payout_receipt", "bounced")
    assert error.context == {"recipient": "a@b.example", "notification_type": "payout_receipt", "reason": "bounced"}
