"""Resend email adapter: sends through the Resend HTTP API.

Every request is bounded by a timeout; timeouts, connection problems and
non-2xx responses are returned as failed results rather than raised.
"""

import requests
import structlog

from notifications.channel.email_port import DEFAULT_FROM_ADDRESS, EmailPort

logger = structlog.get_logger(__name__)

RESEND_API_URL = "https://api.resend.com/emails"
REQUEST_TIMEOUT_SECONDS = 10


class ResendEmailAdapter(EmailPort):
    def __init__(
        self,
        api_key: str,
        from_address: str = DEFAULT_FROM_ADDRESS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.from_address = from_address
        self.timeout = timeout
        self._session = session or requests.Session()

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        payload = {
            "from": self.from_address,
            "to": [to],
            "subject": subject,
            "text": body,
        }
        if html_body:
            payload["html"] = html_body

        try:
            response = self._session.post(
                RESEND_API_URL,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
                timeout=self.timeout,
            )
        except requests.Timeout:
            logger.warning("Resend request timed out", timeout=self.timeout)
            return self._failed("Email provider timed out", "timeout")
        except requests.RequestException as exc:
            logger.warning("Resend request failed", error=str(exc))
            return self._failed(str(exc), "connection_error")

        if not response.ok:
            try:
                message = response.json().get("message") or response.reason
            except ValueError:
                message = response.reason
            logger.warning("Resend rejected email", status_code=response.status_code, error=message)
            return self._failed(message or f"HTTP {response.status_code}", "provider_error")

        return {"message_id": response.json().get("id"), "status": "sent"}

    @staticmethod
    def _failed(error: str, error_type: str) -> dict:
        return {"message_id": None, "status": "failed", "error": error, "error_type": error_type}
