"""
badddy.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Run the app's `RouteGuard` before every route handler.
- Hand the verified `Principal` to handlers that need it.
"""

from __future__ import annotations

from fastapi import Request

from badddy.auth.guard import RouteGuard, principal_of
from badddy.auth.models import Principal


async def guard_request(request: Request) -> None:
    # The guard is built once in `api.app.create_app` and stored on app.state.
    guard: RouteGuard = request.app.state.route_guard
    await guard.can_activate(request)


def current_principal(request: Request) -> Principal:
    return principal_of(request)


# --- Module Notes -----------------------------------------------------------
# `guard_request` is installed as an application-level dependency, so every route
# is protected unless marked with `badddy.auth.guard.public`.
