"""
badddy.api.app

FastAPI app factory for the backend API.

Responsibilities:
- Fail fast on missing startup configuration (email API key, production CORS origin).
- Build the auth chain (key set -> verifier -> guard) and install it app-wide.
- Register routers, middleware and the global exception normalizer.
"""

from __future__ import annotations

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from badddy import __version__
from badddy.api.errors import UnhandledErrorMiddleware, register_exception_handlers
from badddy.api.ratelimit import FixedWindowRateLimiter, enforce_rate_limit
from badddy.api.routers import email, health, users
from badddy.auth.deps import guard_request
from badddy.auth.guard import RouteGuard, route_visibility
from badddy.auth.jwks import RemoteKeySet, remote_key_set
from badddy.auth.tokens import TokenVerifier
from badddy.email.service import EmailService
from badddy.errors import ConfigurationError
from badddy.observability.logging import configure_logging, get_logger
from badddy.observability.middleware import RequestContextMiddleware
from badddy.settings import Settings

API_PREFIX = "/api/v1"

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    key_set: RemoteKeySet | None = None,
    email_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    configure_logging(
        service_name=f"{settings.service_name}-api",
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    if settings.env == "prod" and not settings.frontend_url:
        raise ConfigurationError("BADDDY_FRONTEND_URL must be set in production")
    emails = EmailService.from_settings(settings, transport=email_transport)

    if key_set is None:
        key_set = remote_key_set(
            settings.jwks_url,
            timeout=settings.jwks_timeout_seconds,
            min_refresh_interval=settings.jwks_min_refresh_interval_seconds,
        )
    verifier = TokenVerifier(
        key_set,
        issuer=settings.expected_issuer,
        audience=settings.jwt_audience,
        leeway=settings.jwt_leeway_seconds,
    )

    app = FastAPI(
        title="Badddy API",
        version=__version__,
        docs_url=f"{API_PREFIX}/docs",
        openapi_url=f"{API_PREFIX}/openapi.json",
        # Order matters: throttle before spending a signature check.
        dependencies=[Depends(enforce_rate_limit), Depends(guard_request)],
    )
    app.state.settings = settings
    app.state.email_service = emails
    app.state.rate_limiter = FixedWindowRateLimiter(limit=settings.rate_limit_per_minute)
    app.state.route_guard = RouteGuard(visibility=route_visibility, verifier=verifier)

    # Last added runs outermost: request context, then CORS, then the 500 renderer.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(email.router, prefix=API_PREFIX)

    log.info(
        "startup",
        env=settings.env,
        jwks_url=key_set.jwks_url,
        issuer=settings.expected_issuer,
        rate_limit_per_minute=settings.rate_limit_per_minute,
    )
    return app


# --- Module Notes -----------------------------------------------------------
# The key set is shared process-wide (see `auth.jwks.remote_key_set`); tests inject
# their own instance backed by an in-memory transport.
