"""Email channel port: abstract interface for email dispatch."""

from abc import ABC, abstractmethod

DEFAULT_FROM_ADDRESS = "RosterFrame <onboarding@resend.dev>"


class EmailPort(ABC):
    """Abstract interface for email dispatch adapters.

    Adapters never raise for delivery problems; failures come back as data
    so callers can decide how to report them.
    """

    @abstractmethod
    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        """Send an email message.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"),
            error and error_type (on failure; error_type is one of
            "provider_error", "timeout", "connection_error")
        """
        ...
