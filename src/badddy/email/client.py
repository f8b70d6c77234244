"""
badddy.email.client

HTTP client boundary for the useSend transactional email API.

Responsibilities:
- Authenticate with the API key and submit one message per call.
- Translate transport and provider failures into `UpstreamError`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from badddy.errors import UpstreamError


@dataclass(frozen=True, slots=True)
class OutgoingEmail:
    to: str
    sender: str
    subject: str
    html: str
    text: str


class UseSendClient:
    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://app.usesend.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def send(self, email: OutgoingEmail) -> dict[str, Any]:
        payload = {
            "to": email.to,
            "from": email.sender,
            "subject": email.subject,
            "html": email.html,
            "text": email.text,
        }
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url, timeout=self._timeout, transport=self._transport
            ) as http:
                r = await http.post(
                    "/api/v1/emails",
                    json=payload,
                    headers={"Authorization": f"Bearer {self._api_key}"},
                )
                r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                "usesend", f"HTTP {e.response.status_code}: {e.response.text[:500]}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError("usesend", str(e) or type(e).__name__) from e

        body = r.json() if r.content else {}
        return body if isinstance(body, dict) else {}


# --- Module Notes -----------------------------------------------------------
# Provider error bodies are kept in `UpstreamError.detail` (logs only).
