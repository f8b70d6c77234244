"""
badddy.web.deps

FastAPI dependency wiring for the web service.

Responsibilities:
- Provide request-scoped DB sessions.
- Encapsulate app.state access patterns (sessionmaker, reverse proxy).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from badddy.web.proxy import ReverseProxy


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # Created in `badddy.web.app.create_web_app`.
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Read-only use: no commit/rollback on this side.
    async with session_factory() as session:
        yield session


def reverse_proxy(request: Request) -> ReverseProxy:
    return request.app.state.proxy  # type: ignore[attr-defined]
