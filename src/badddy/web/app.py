"""
badddy.web.app

FastAPI app factory for the web (frontend) service.

Responsibilities:
- Own the shared outbound HTTP client (identity service + backend).
- Build the session client and reverse proxy, and stash them on app.state.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from badddy import __version__
from badddy.db.session import create_engine, create_sessionmaker, init_db
from badddy.observability.logging import configure_logging, get_logger
from badddy.observability.middleware import RequestContextMiddleware
from badddy.settings import Settings
from badddy.web.proxy import ReverseProxy
from badddy.web.routers.pages import router as pages_router
from badddy.web.routers.proxy import router as proxy_router
from badddy.web.session import IdentitySessionClient

log = get_logger(__name__)


def create_web_app(
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    configure_logging(
        service_name=f"{settings.service_name}-web",
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    # One pooled client for both hops; redirects from the backend are relayed, not followed.
    http = httpx.AsyncClient(
        timeout=settings.proxy_timeout_seconds,
        follow_redirects=False,
        transport=transport,
    )
    engine = create_engine(settings)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info(
            "startup",
            env=settings.env,
            backend=settings.backend_internal_url,
            identity=settings.identity_base_url,
        )
        if settings.env in ("dev", "test"):
            await init_db(engine)
        try:
            yield
        finally:
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Badddy Web",
        version=__version__,
        docs_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.http = http
    app.state.engine = engine
    app.state.sessionmaker = create_sessionmaker(engine)
    app.state.proxy = ReverseProxy(
        backend_url=settings.backend_internal_url,
        sessions=IdentitySessionClient(base_url=settings.identity_base_url, http=http),
        http=http,
    )

    app.add_middleware(RequestContextMiddleware)
    app.include_router(pages_router)
    app.include_router(proxy_router)

    return app
