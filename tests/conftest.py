"""
tests.conftest

Shared fixtures: RSA signing keys, an in-memory JWKS endpoint, settings and token factories.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from badddy.auth.jwks import RemoteKeySet
from badddy.settings import Settings

IDENTITY_URL = "http://identity.test"
JWKS_URL = f"{IDENTITY_URL}/api/auth/jwks"


@dataclass
class SigningKey:
    kid: str
    private_key: rsa.RSAPrivateKey

    def jwk(self) -> dict[str, Any]:
        jwk = json.loads(RSAAlgorithm.to_jwk(self.private_key.public_key()))
        jwk.update(kid=self.kid, alg="RS256", use="sig")
        return jwk

    def sign(self, *, headers: dict[str, Any] | None = None, **overrides: Any) -> str:
        now = int(time.time())
        claims: dict[str, Any] = {
            "sub": "user-1",
            "email": "ada@example.com",
            "name": "Ada Lovelace",
            "iss": IDENTITY_URL,
            "iat": now,
            "exp": now + 900,
        }
        claims.update(overrides)
        # `None` removes a claim entirely.
        claims = {k: v for k, v in claims.items() if v is not None}
        return jwt.encode(
            claims, self.private_key, algorithm="RS256", headers={"kid": self.kid, **(headers or {})}
        )


def make_signing_key(kid: str) -> SigningKey:
    return SigningKey(kid=kid, private_key=rsa.generate_private_key(public_exponent=65537, key_size=2048))


@dataclass
class FakeJwks:
    """In-memory JWKS endpoint; `keys` can be swapped to simulate rotation."""

    keys: list[SigningKey]
    requests: int = 0
    fail: bool = False

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        if self.fail:
            return httpx.Response(503, json={"error": "unavailable"})
        return httpx.Response(200, json={"keys": [k.jwk() for k in self.keys]})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@dataclass
class FakeUseSend:
    """Records submitted emails; answers with `status`."""

    status: int = 200
    sent: list[dict[str, Any]] = field(default_factory=list)
    auth: list[str | None] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.auth.append(request.headers.get("authorization"))
        self.sent.append(json.loads(request.content))
        if self.status >= 400:
            return httpx.Response(self.status, json={"error": "rejected"})
        return httpx.Response(self.status, json={"emailId": f"em_{len(self.sent)}"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture(scope="session")
def signing_key() -> SigningKey:
    return make_signing_key("key-1")


@pytest.fixture
def jwks(signing_key: SigningKey) -> FakeJwks:
    return FakeJwks(keys=[signing_key])


@pytest.fixture
def key_set(jwks: FakeJwks) -> RemoteKeySet:
    return RemoteKeySet(JWKS_URL, min_refresh_interval=0, transport=jwks.transport)


@pytest.fixture
def token_for(signing_key: SigningKey) -> Callable[..., str]:
    return signing_key.sign


@pytest.fixture
def usesend() -> FakeUseSend:
    return FakeUseSend()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        env="test",
        identity_base_url=IDENTITY_URL,
        backend_internal_url="http://backend.test",
        usesend_api_key="us_test_key",
        usesend_base_url="http://usesend.test",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'badddy.db'}",
        rate_limit_per_minute=1000,
    )
