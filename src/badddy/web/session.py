"""
badddy.web.session

HTTP client for the identity service's session endpoints.

Responsibilities:
- Resolve the caller's session from their cookies (`/api/auth/get-session`).
- Mint a short-lived JWT for that session (`/api/auth/token`).

Transport errors propagate as `httpx.HTTPError` and undecodable bodies as
`ValueError`; callers decide how to degrade.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass(frozen=True, slots=True)
class Session:
    user_id: str
    email: str
    name: str
    expires_at: str | None = None


class IdentitySessionClient:
    def __init__(self, *, base_url: str, http: httpx.AsyncClient) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http

    async def get_session(self, cookie: str | None) -> Session | None:
        # No cookie, no session: skip the round-trip.
        if not cookie:
            return None
        data = await self._get("/api/auth/get-session", cookie)
        if not isinstance(data, dict):
            return None
        user = data.get("user")
        if not isinstance(user, dict):
            return None
        user_id = user.get("id")
        if not isinstance(user_id, str) or not user_id:
            return None
        session = data.get("session") if isinstance(data.get("session"), dict) else {}
        return Session(
            user_id=user_id,
            email=str(user.get("email") or ""),
            name=str(user.get("name") or ""),
            expires_at=session.get("expiresAt"),
        )

    async def get_token(self, cookie: str | None) -> str | None:
        if not cookie:
            return None
        data = await self._get("/api/auth/token", cookie)
        token = data.get("token") if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    async def _get(self, path: str, cookie: str) -> Any:
        r = await self._http.get(f"{self._base_url}{path}", headers={"cookie": cookie})
        if r.status_code == 401:
            return None
        r.raise_for_status()
        # The identity service answers `null` when the cookie maps to no session.
        return r.json() if r.content else None


# --- Module Notes -----------------------------------------------------------
# Only the cookie header is relayed to the identity service; nothing else from the
# inbound request leaves this process on that hop.
