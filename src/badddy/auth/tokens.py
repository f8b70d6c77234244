"""
badddy.auth.tokens

Bearer token verification.

Responsibilities:
- Validate a compact JWT against the remote key set (signature, issuer, expiry).
- Normalize validated claims into a `Principal` using a strict allow-list.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import jwt

from badddy.auth.jwks import KeySetError, RemoteKeySet
from badddy.auth.models import Principal


class InvalidTokenError(Exception):
    """
    Token rejected. `description` explains why and never contains the token.
    """

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class TokenVerifier:
    def __init__(
        self,
        key_set: RemoteKeySet,
        *,
        issuer: str,
        audience: str | None = None,
        leeway: int = 0,
    ) -> None:
        self._key_set = key_set
        self._issuer = issuer
        self._audience = audience
        self._leeway = leeway

    async def verify(self, token: str) -> Principal:
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e)) from e

        kid = header.get("kid")
        if kid is not None and not isinstance(kid, str):
            raise InvalidTokenError("Invalid key id in token header")

        try:
            key = await self._key_set.get_signing_key(kid)
            try:
                claims = self._decode(token, key)
            except jwt.InvalidSignatureError:
                # Same kid, new key material: re-fetch once before giving up.
                await self._key_set.refresh()
                claims = self._decode(token, await self._key_set.get_signing_key(kid))
        except KeySetError as e:
            raise InvalidTokenError(str(e)) from e
        except jwt.PyJWTError as e:
            raise InvalidTokenError(str(e)) from e

        return principal_from_claims(claims)

    def _decode(self, token: str, key: jwt.PyJWK) -> dict[str, Any]:
        # Algorithms are pinned to the JWK's own algorithm (no "none", no HMAC confusion).
        return jwt.decode(
            token,
            key.key,
            algorithms=[key.algorithm_name],
            issuer=self._issuer,
            audience=self._audience,
            leeway=self._leeway,
            options={
                "require": ["exp", "iss", "sub"],
                "verify_aud": self._audience is not None,
            },
        )


def principal_from_claims(claims: Mapping[str, Any]) -> Principal:
    subject = claims.get("sub")
    if not isinstance(subject, str) or not subject:
        raise InvalidTokenError("Token subject claim is missing or invalid")
    email = claims.get("email")
    if not isinstance(email, str) or not email:
        raise InvalidTokenError("Token email claim is missing or invalid")
    name = claims.get("name")
    return Principal(id=subject, email=email, name=name if isinstance(name, str) else "")


# --- Module Notes -----------------------------------------------------------
# `sub` and `email` are identity-critical and never defaulted; `name` is cosmetic.
