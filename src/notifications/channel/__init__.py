"""Email channel registry.

Provides singleton access to the email adapter. Uses the fake adapter by
default; the Resend adapter is selected when RESEND_API_KEY is set.
"""

import os

from notifications.channel.email_port import DEFAULT_FROM_ADDRESS, EmailPort

_email_channel: EmailPort | None = None


def _channel_from_environment() -> EmailPort:
    from_address = os.environ.get("RESEND_FROM_EMAIL") or DEFAULT_FROM_ADDRESS
    if "<" not in from_address:
        from_address = f"RosterFrame <{from_address}>"

    api_key = os.environ.get("RESEND_API_KEY")
    if api_key:
        from notifications.channel.resend_email import ResendEmailAdapter

        return ResendEmailAdapter(api_key=api_key, from_address=from_address)

    from notifications.channel.fake_email import FakeEmailAdapter

    return FakeEmailAdapter(from_address=from_address)


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        _email_channel = _channel_from_environment()
    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    """Override the active email adapter (useful for tests)."""
    global _email_channel
    _email_channel = channel


def reset_channels() -> None:
    """Reset the channel singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
