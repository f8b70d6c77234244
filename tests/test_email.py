"""
tests.test_email

Transactional email: provider client, service use cases and HTTP endpoints.
"""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from badddy.api.app import create_app
from badddy.auth.jwks import RemoteKeySet
from badddy.email import templates
from badddy.email.client import OutgoingEmail, UseSendClient
from badddy.email.service import EmailService, strip_html
from badddy.errors import ConfigurationError, UpstreamError
from badddy.settings import Settings
from tests.conftest import FakeUseSend


def _service(settings: Settings, usesend: FakeUseSend) -> EmailService:
    return EmailService.from_settings(settings, transport=usesend.transport)


def test_strip_html() -> None:
    assert strip_html("<h1>Hi</h1>\n  <p>there <b>you</b></p>") == "Hi there you"


def test_templates_escape_user_values() -> None:
    html = templates.verification("<script>alert(1)</script>", "https://x.test/v?a=1&b=2")

    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert 'href="https://x.test/v?a=1&amp;b=2"' in html


def test_service_requires_api_key(settings: Settings) -> None:
    with pytest.raises(ConfigurationError):
        EmailService.from_settings(settings.model_copy(update={"usesend_api_key": ""}))


@pytest.mark.asyncio
async def test_send_email_derives_text_part(settings: Settings, usesend: FakeUseSend) -> None:
    await _service(settings, usesend).send_email("a@b.com", "Hello", "<p>Hello <b>Ada</b></p>")

    assert usesend.auth == ["Bearer us_test_key"]
    assert usesend.sent == [
        {
            "to": "a@b.com",
            "from": settings.email_from,
            "subject": "Hello",
            "html": "<p>Hello <b>Ada</b></p>",
            "text": "Hello Ada",
        }
    ]


@pytest.mark.asyncio
async def test_explicit_text_part_is_kept(settings: Settings, usesend: FakeUseSend) -> None:
    await _service(settings, usesend).send_email("a@b.com", "Hello", "<p>Hi</p>", "Plain hi")

    assert usesend.sent[0]["text"] == "Plain hi"


@pytest.mark.asyncio
async def test_use_case_subjects(settings: Settings, usesend: FakeUseSend) -> None:
    service = _service(settings, usesend)

    await service.send_verification_email("a@b.com", "Ada", "https://x.test/verify")
    await service.send_reset_password_email("a@b.com", "Ada", "https://x.test/reset")
    await service.send_welcome_email("a@b.com", "Ada")

    assert [m["subject"] for m in usesend.sent] == [
        "Verify your Badddy account",
        "Reset your password",
        "Welcome to Badddy!",
    ]
    assert "https://x.test/verify" in usesend.sent[0]["html"]
    assert "https://x.test/reset" in usesend.sent[1]["html"]


@pytest.mark.asyncio
async def test_provider_rejection_is_upstream_error(usesend: FakeUseSend) -> None:
    usesend.status = 422
    client = UseSendClient("us_test_key", base_url="http://usesend.test", transport=usesend.transport)

    with pytest.raises(UpstreamError) as info:
        await client.send(OutgoingEmail(to="a@b.com", sender="x@y.com", subject="s", html="h", text="t"))

    assert info.value.status_code == 500
    assert info.value.message == "Internal server error"
    assert "HTTP 422" in (info.value.detail or "")


@pytest.mark.asyncio
async def test_provider_unreachable_is_upstream_error() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    client = UseSendClient("k", base_url="http://usesend.test", transport=httpx.MockTransport(refuse))

    with pytest.raises(UpstreamError):
        await client.send(OutgoingEmail(to="a@b.com", sender="x@y.com", subject="s", html="h", text="t"))


@pytest.mark.asyncio
async def test_public_email_endpoints(settings: Settings, key_set: RemoteKeySet, usesend: FakeUseSend) -> None:
    app = create_app(settings=settings, key_set=key_set, email_transport=usesend.transport)

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        verification = await client.post(
            "/api/v1/email/verification",
            json={"to": "a@b.com", "userName": "Ada", "verificationUrl": "https://x.test/verify?t=1"},
        )
        reset = await client.post(
            "/api/v1/email/reset-password",
            json={"to": "a@b.com", "userName": "Ada", "resetUrl": "https://x.test/reset?t=2"},
        )

    assert verification.status_code == 200
    assert verification.json() == {"message": "Verification email sent successfully"}
    assert reset.status_code == 200
    assert reset.json() == {"message": "Reset password email sent successfully"}
    assert len(usesend.sent) == 2


@pytest.mark.asyncio
async def test_protected_email_endpoints(
    settings: Settings, key_set: RemoteKeySet, usesend: FakeUseSend, token_for: Callable[..., str]
) -> None:
    app = create_app(settings=settings, key_set=key_set, email_transport=usesend.transport)
    auth = {"authorization": f"Bearer {token_for()}"}
    send_body = {"to": "a@b.com", "subject": "Hi", "html": "<p>Hi</p>"}

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        anonymous = await client.post("/api/v1/email/send", json=send_body)
        sent = await client.post("/api/v1/email/send", json=send_body, headers=auth)
        welcome = await client.post(
            "/api/v1/email/welcome", json={"to": "a@b.com", "userName": "Ada"}, headers=auth
        )

    assert anonymous.status_code == 401
    assert sent.status_code == 200
    assert sent.json() == {"message": "Email sent successfully"}
    assert welcome.json() == {"message": "Welcome email sent successfully"}
    assert [m["subject"] for m in usesend.sent] == ["Hi", "Welcome to Badddy!"]


@pytest.mark.asyncio
async def test_provider_failure_is_generic_500(
    settings: Settings, key_set: RemoteKeySet, usesend: FakeUseSend
) -> None:
    usesend.status = 503
    app = create_app(settings=settings, key_set=key_set, email_transport=usesend.transport)

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as client:
        r = await client.post(
            "/api/v1/email/reset-password",
            json={"to": "a@b.com", "userName": "Ada", "resetUrl": "https://x.test/reset"},
        )

    assert r.status_code == 500
    assert r.json()["message"] == "Internal server error"
    assert "rejected" not in r.text
