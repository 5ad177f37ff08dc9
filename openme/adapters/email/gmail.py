"""Gmail API transport (users.messages.send with an OAuth access token)."""

from __future__ import annotations

import base64
import logging

import httpx

from openme.adapters.email.base import (
    AbstractEmailTransport,
    DeliveryResult,
    EmailMessageInput,
    build_mime_message,
)

logger = logging.getLogger(__name__)

GMAIL_SEND_URL = "https://gmail.googleapis.com/gmail/v1/users/me/messages/send"


def to_base64url(raw: bytes) -> str:
    """Base64url-encode without padding, as the Gmail API expects for ``raw``."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


class GmailApiTransport(AbstractEmailTransport):
    """Send mail through the Gmail REST API using httpx."""

    provider = "gmail-api"

    def __init__(
        self,
        *,
        access_token: str,
        sender: str,
        timeout_seconds: float = 10.0,
        http_transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            access_token: OAuth access token with the gmail.send scope.
            sender: From address; must belong to the token's account.
            timeout_seconds: Timeout for the API call.
            http_transport: Optional httpx transport (used by tests).
        """
        self._access_token = access_token
        self._sender = sender
        self._timeout = timeout_seconds
        self._http_transport = http_transport

    async def send(self, message: EmailMessageInput) -> DeliveryResult:
        raw = to_base64url(build_mime_message(message, sender=self._sender).as_bytes())

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._http_transport,
            ) as client:
                response = await client.post(
                    GMAIL_SEND_URL,
                    headers={"Authorization": f"Bearer {self._access_token}"},
                    json={"raw": raw},
                )
        except httpx.HTTPError as exc:
            logger.error(
                "email.gmail.request_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            return DeliveryResult(
                provider=self.provider,
                delivered=False,
                details=f"Gmail API send failed: {type(exc).__name__}: {exc}",
            )

        if response.is_success:
            logger.info("email.gmail.delivered", extra={"status_code": response.status_code})
            return DeliveryResult(
                provider=self.provider,
                delivered=True,
                details="Delivered via Gmail API",
            )

        logger.warning(
            "email.gmail.rejected",
            extra={"status_code": response.status_code},
        )
        return DeliveryResult(
            provider=self.provider,
            delivered=False,
            details=f"Gmail API send failed ({response.status_code}): {response.text}",
        )
