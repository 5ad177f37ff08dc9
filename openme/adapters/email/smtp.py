"""SMTP fallback transport (aiosmtplib)."""

from __future__ import annotations

import logging

import aiosmtplib

from openme.adapters.email.base import (
    AbstractEmailTransport,
    DeliveryResult,
    EmailMessageInput,
    build_mime_message,
)

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SmtpTransport(AbstractEmailTransport):
    """Authenticated SMTP delivery.

    Port 465 (or ``secure=True``) uses implicit TLS; other ports let aiosmtplib
    upgrade with STARTTLS when the server offers it.
    """

    provider = "smtp-fallback"

    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        from_email: str,
        secure: bool = False,
        timeout_seconds: float = 10.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        self.from_email = from_email
        self.use_tls = secure or port == IMPLICIT_TLS_PORT
        self.timeout_seconds = timeout_seconds

    async def send(self, message: EmailMessageInput) -> DeliveryResult:
        mime = build_mime_message(message, sender=self.from_email)

        try:
            await aiosmtplib.send(
                mime,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self._password,
                use_tls=self.use_tls,
                timeout=self.timeout_seconds,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error(
                "email.smtp.failed",
                extra={
                    "smtp_host": self.host,
                    "smtp_port": self.port,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return DeliveryResult(
                provider=self.provider,
                delivered=False,
                details=f"SMTP fallback send failed: {exc}",
            )

        logger.info("email.smtp.delivered", extra={"smtp_host": self.host})
        return DeliveryResult(
            provider=self.provider,
            delivered=True,
            details="Delivered via SMTP fallback",
        )
