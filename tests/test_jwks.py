"""
tests.test_jwks

Remote key set cache: single-flight fetch, rotation refresh, failure handling.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from badddy.auth.jwks import KeySetError, RemoteKeySet, remote_key_set
from tests.conftest import JWKS_URL, FakeJwks, SigningKey, make_signing_key


@pytest.mark.asyncio
async def test_concurrent_first_use_fetches_once(jwks: FakeJwks, signing_key: SigningKey) -> None:
    key_set = RemoteKeySet(JWKS_URL, transport=jwks.transport)

    keys = await asyncio.gather(*(key_set.get_signing_key(signing_key.kid) for _ in range(20)))

    assert jwks.requests == 1
    assert key_set.fetch_count == 1
    assert {k.key_id for k in keys} == {signing_key.kid}


@pytest.mark.asyncio
async def test_cached_keys_are_reused(key_set: RemoteKeySet, jwks: FakeJwks, signing_key: SigningKey) -> None:
    await key_set.get_signing_key(signing_key.kid)
    await key_set.get_signing_key(signing_key.kid)
    await key_set.get()

    assert jwks.requests == 1


@pytest.mark.asyncio
async def test_refresh_within_cooldown_is_a_noop(jwks: FakeJwks) -> None:
    key_set = RemoteKeySet(JWKS_URL, min_refresh_interval=60, transport=jwks.transport)

    await key_set.get()
    await key_set.refresh()
    await key_set.refresh()

    assert jwks.requests == 1


@pytest.mark.asyncio
async def test_unknown_kid_triggers_one_refetch(key_set: RemoteKeySet, jwks: FakeJwks) -> None:
    await key_set.get()
    rotated = make_signing_key("key-2")
    jwks.keys.append(rotated)

    key = await key_set.get_signing_key("key-2")

    assert key.key_id == "key-2"
    assert jwks.requests == 2


@pytest.mark.asyncio
async def test_kid_absent_after_refetch_raises(key_set: RemoteKeySet, jwks: FakeJwks) -> None:
    with pytest.raises(KeySetError, match="No signing key"):
        await key_set.get_signing_key("nope")

    assert jwks.requests == 2


@pytest.mark.asyncio
async def test_missing_kid_accepted_only_for_single_key_sets(
    key_set: RemoteKeySet, jwks: FakeJwks, signing_key: SigningKey
) -> None:
    assert (await key_set.get_signing_key(None)).key_id == signing_key.kid

    jwks.keys.append(make_signing_key("key-2"))
    await key_set.refresh()
    with pytest.raises(KeySetError):
        await key_set.get_signing_key(None)


@pytest.mark.asyncio
async def test_fetch_failure_leaves_cache_empty(key_set: RemoteKeySet, jwks: FakeJwks, signing_key: SigningKey) -> None:
    jwks.fail = True
    with pytest.raises(KeySetError, match="Unable to fetch JWKS"):
        await key_set.get()
    assert key_set.fetch_count == 0

    jwks.fail = False
    assert (await key_set.get_signing_key(signing_key.kid)).key_id == signing_key.kid


@pytest.mark.asyncio
async def test_malformed_payload_raises() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"nokeys": []}))
    key_set = RemoteKeySet(JWKS_URL, transport=transport)

    with pytest.raises(KeySetError, match="missing 'keys'"):
        await key_set.get()


@pytest.mark.asyncio
async def test_connection_error_raises() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    key_set = RemoteKeySet(JWKS_URL, transport=httpx.MockTransport(refuse))

    with pytest.raises(KeySetError):
        await key_set.get()


def test_registry_shares_one_cache_per_url() -> None:
    first = remote_key_set("http://registry.test/api/auth/jwks", timeout=1.0)
    second = remote_key_set("http://registry.test/api/auth/jwks")
    other = remote_key_set("http://other.test/api/auth/jwks")

    assert first is second
    assert first is not other
