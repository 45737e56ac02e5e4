"""Fake email adapter: records sent emails for testing."""

from uuid import uuid4

from notifications.channel.email_port import DEFAULT_FROM_ADDRESS, EmailPort


class FakeEmailAdapter(EmailPort):
    """Email adapter that records messages in memory for test assertions."""

    def __init__(self, from_address: str = DEFAULT_FROM_ADDRESS):
        self.from_address = from_address
        self.sent_emails: list[dict] = []
        self.attempts = 0
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
        self.failure_type = "provider_error"

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Email delivery failed",
        failure_type: str = "provider_error",
    ):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.failure_type = failure_type

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        self.attempts += 1
        if not self.should_succeed:
            return {
                "message_id": None,
                "status": "failed",
                "error": self.failure_reason,
                "error_type": self.failure_type,
            }

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "from": self.from_address,
                "to": to,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def reset(self):
        """Clear sent emails (useful between tests)."""
        self.sent_emails.clear()
        self.attempts = 0
        self.configure()
