"""In-memory email adapter for development and tests."""

from uuid import uuid4

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Keeps every delivered message in ``sent_emails``.

    ``configure(should_succeed=False)`` makes sends report failure;
    ``configure(raise_error=...)`` makes them raise, like a provider outage.
    """

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.raise_error: Exception | None = None

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        raise_error: Exception | None = None,
    ):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.raise_error = raise_error

    def send(self, to: str, subject: str, body: str) -> dict:
        if self.raise_error is not None:
            raise self.raise_error
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append({"message_id": message_id, "to": to, "subject": subject, "body": body})
        return {"message_id": message_id, "status": "sent"}

    def sent_to(self, recipient: str) -> list[dict]:
        return [email for email in self.sent_emails if email["to"] == recipient]

    def reset(self):
        self.sent_emails.clear()
        self.configure()
