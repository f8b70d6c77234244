"""
badddy.email.service

Transactional email use cases.

Responsibilities:
- Render the right template per use case and hand it to the provider client.
- Derive a plain-text part when the caller only supplies HTML.
- Refuse to exist without an API key (startup-fatal).
"""

from __future__ import annotations

import re

import httpx
import structlog

from badddy.email import templates
from badddy.email.client import OutgoingEmail, UseSendClient
from badddy.errors import ConfigurationError
from badddy.settings import Settings

log = structlog.get_logger(__name__)

_TAG = re.compile(r"<[^>]*>")
_SPACES = re.compile(r"\s+")


def strip_html(html: str) -> str:
    return _SPACES.sub(" ", _TAG.sub("", html)).strip()


class EmailService:
    def __init__(self, *, client: UseSendClient, sender: str) -> None:
        self._client = client
        self._sender = sender

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> EmailService:
        if not settings.usesend_api_key:
            log.error("email.missing_api_key")
            raise ConfigurationError("BADDDY_USESEND_API_KEY is required")
        client = UseSendClient(
            settings.usesend_api_key,
            base_url=settings.usesend_base_url,
            timeout=settings.email_timeout_seconds,
            transport=transport,
        )
        return cls(client=client, sender=settings.email_from)

    async def send_email(
        self, to: str, subject: str, html: str, text: str | None = None
    ) -> None:
        log.info("email.sending", to=to, subject=subject)
        try:
            await self._client.send(
                OutgoingEmail(
                    to=to,
                    sender=self._sender,
                    subject=subject,
                    html=html,
                    text=text or strip_html(html),
                )
            )
        except Exception:
            log.error("email.send_failed", to=to, subject=subject)
            raise
        log.info("email.sent", to=to)

    async def send_verification_email(self, to: str, user_name: str, verification_url: str) -> None:
        await self.send_email(
            to, "Verify your Badddy account", templates.verification(user_name, verification_url)
        )

    async def send_reset_password_email(self, to: str, user_name: str, reset_url: str) -> None:
        await self.send_email(
            to, "Reset your password", templates.reset_password(user_name, reset_url)
        )

    async def send_welcome_email(self, to: str, user_name: str) -> None:
        await self.send_email(to, "Welcome to Badddy!", templates.welcome(user_name))

