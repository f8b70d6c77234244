"""
badddy.auth.jwks

Remote JSON Web Key Set cache.

Responsibilities:
- Fetch the identity provider's public signing keys from its JWKS URL.
- Cache them for the process lifetime; concurrent first use performs one fetch.
- Re-fetch on key rotation signals (unknown `kid`, signature mismatch), rate-limited.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx
import jwt
import structlog
from jwt.exceptions import PyJWKError, PyJWKSetError

log = structlog.get_logger(__name__)


class KeySetError(Exception):
    """The key set could not be fetched, parsed, or has no matching key."""


class RemoteKeySet:
    """
    Lazily-populated cache of one JWKS endpoint.

    All fetches run under a single `asyncio.Lock`:
    - `get()` is double-checked, so N concurrent first callers cause one fetch.
    - `refresh()` tracks a generation counter, so callers that queued behind an
      in-flight refresh reuse its result instead of fetching again.
    - A refresh within `min_refresh_interval` of the previous fetch is a no-op.
    """

    def __init__(
        self,
        jwks_url: str,
        *,
        timeout: float = 5.0,
        min_refresh_interval: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.jwks_url = jwks_url
        self._timeout = timeout
        self._min_refresh_interval = min_refresh_interval
        self._transport = transport

        self._keys: jwt.PyJWKSet | None = None
        self._generation = 0
        self._fetched_at = 0.0
        self._lock = asyncio.Lock()

    @property
    def fetch_count(self) -> int:
        return self._generation

    async def get(self) -> jwt.PyJWKSet:
        keys = self._keys
        if keys is not None:
            return keys
        async with self._lock:
            if self._keys is None:
                self._keys = await self._fetch()
            return self._keys

    async def refresh(self) -> jwt.PyJWKSet:
        seen = self._generation
        async with self._lock:
            if self._keys is not None:
                if self._generation != seen:
                    return self._keys
                if time.monotonic() - self._fetched_at < self._min_refresh_interval:
                    return self._keys
            self._keys = await self._fetch()
            return self._keys

    async def get_signing_key(self, kid: str | None) -> jwt.PyJWK:
        key = _select(await self.get(), kid)
        if key is None:
            key = _select(await self.refresh(), kid)
        if key is None:
            raise KeySetError(f"No signing key found for kid {kid!r}")
        return key

    async def _fetch(self) -> jwt.PyJWKSet:
        log.info("jwks.fetch", jwks_url=self.jwks_url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self.jwks_url, headers={"accept": "application/json"})
                response.raise_for_status()
                payload: Any = response.json()
        except (httpx.HTTPError, ValueError) as e:
            log.warning("jwks.fetch_failed", jwks_url=self.jwks_url, error=str(e))
            raise KeySetError(f"Unable to fetch JWKS: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("keys"), list):
            raise KeySetError("JWKS response missing 'keys' array")
        try:
            keys = jwt.PyJWKSet.from_dict(payload)
        except (PyJWKSetError, PyJWKError) as e:
            raise KeySetError(f"JWKS contains no usable keys: {e}") from e

        self._generation += 1
        self._fetched_at = time.monotonic()
        log.info("jwks.fetched", jwks_url=self.jwks_url, keys=len(keys.keys))
        return keys


def _select(keys: jwt.PyJWKSet, kid: str | None) -> jwt.PyJWK | None:
    if kid is None:
        # Tokens without a kid are only acceptable against a single-key set.
        return keys.keys[0] if len(keys.keys) == 1 else None
    for key in keys.keys:
        if key.key_id == kid:
            return key
    return None


_registry: dict[str, RemoteKeySet] = {}


def remote_key_set(jwks_url: str, **options: Any) -> RemoteKeySet:
    """
    Process-wide shared cache per JWKS URL.

    Options only apply when the URL is seen for the first time.
    """

    key_set = _registry.get(jwks_url)
    if key_set is None:
        key_set = _registry[jwks_url] = RemoteKeySet(jwks_url, **options)
    return key_set


# --- Module Notes -----------------------------------------------------------
# Failed fetches leave the cache empty; the next request simply tries again.
