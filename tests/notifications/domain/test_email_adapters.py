"""Tests for the email adapters and channel selection."""

from unittest.mock import MagicMock

import requests
from notifications.channel import get_email_channel, reset_channels
from notifications.channel.email_port import DEFAULT_FROM_ADDRESS
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.resend_email import RESEND_API_URL, ResendEmailAdapter


def _response(status_code=200, json_body=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.json.return_value = json_body or {}
    return response


def _send(adapter):
    return adapter.send(to="fan@example.com", subject="Hello", body="Text", html_body="<p>Html</p>")


class TestFakeEmailAdapter:
    def test_records_sent_email(self):
        adapter = FakeEmailAdapter()
        result = _send(adapter)

        assert result["status"] == "sent"
        assert adapter.sent_emails[0]["to"] == "fan@example.com"
        assert adapter.sent_emails[0]["from"] == DEFAULT_FROM_ADDRESS

    def test_configured_failure(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False, failure_reason="Mailbox full", failure_type="provider_error")
        result = _send(adapter)

        assert result == {
            "message_id": None,
            "status": "failed",
            "error": "Mailbox full",
            "error_type": "provider_error",
        }
        assert adapter.sent_emails == []

    def test_reset(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False)
        _send(adapter)
        adapter.reset()
        assert adapter.attempts == 0
        assert adapter.should_succeed is True


class TestResendEmailAdapter:
    def test_posts_message(self):
        session = MagicMock()
        session.post.return_value = _response(json_body={"id": "re_123"})
        adapter = ResendEmailAdapter(api_key="re_key", from_address="RosterFrame <orders@rosterframe.com>", session=session)

        result = _send(adapter)

        assert result == {"message_id": "re_123", "status": "sent"}
        args, kwargs = session.post.call_args
        assert args == (RESEND_API_URL,)
        assert kwargs["json"] == {
            "from": "RosterFrame <orders@rosterframe.com>",
            "to": ["fan@example.com"],
            "subject": "Hello",
            "text": "Text",
            "html": "<p>Html</p>",
        }
        assert kwargs["headers"] == {"Authorization": "Bearer re_key"}
        assert kwargs["timeout"] == 10

    def test_timeout(self):
        session = MagicMock()
        session.post.side_effect = requests.Timeout("read timed out")
        result = _send(ResendEmailAdapter(api_key="re_key", session=session))

        assert result["status"] == "failed"
        assert result["error_type"] == "timeout"

    def test_connection_error(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("connection refused")
        result = _send(ResendEmailAdapter(api_key="re_key", session=session))

        assert result["error_type"] == "connection_error"

    def test_provider_rejection(self):
        session = MagicMock()
        session.post.return_value = _response(422, {"message": "Invalid `to` field"}, reason="Unprocessable Entity")
        result = _send(ResendEmailAdapter(api_key="re_key", session=session))

        assert result["status"] == "failed"
        assert result["error_type"] == "provider_error"
        assert result["error"] == "Invalid `to` field"


class TestChannelSelection:
    def test_fake_by_default(self):
        assert isinstance(get_email_channel(), FakeEmailAdapter)

    def test_resend_with_api_key(self, monkeypatch):
        monkeypatch.setenv("RESEND_API_KEY", "re_key")
        monkeypatch.setenv("RESEND_FROM_EMAIL", "orders@rosterframe.com")
        reset_channels()

        channel = get_email_channel()
        assert isinstance(channel, ResendEmailAdapter)
        assert channel.from_address == "RosterFrame <orders@rosterframe.com>"

    def test_from_address_with_display_name_is_kept(self, monkeypatch):
        monkeypatch.setenv("RESEND_FROM_EMAIL", "Orders <orders@rosterframe.com>")
        reset_channels()
        assert get_email_channel().from_address == "Orders <orders@rosterframe.com>"
