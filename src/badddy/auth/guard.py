"""
badddy.auth.guard

Per-request authentication gate.

Responsibilities:
- Record which endpoints are public at route-registration time (`RouteVisibility`).
- Allow public endpoints untouched; require a valid bearer token everywhere else.
- Attach the verified `Principal` to the request state.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from fastapi import APIRouter
from starlette.requests import Request

from badddy.auth.models import Principal
from badddy.auth.tokens import InvalidTokenError, TokenVerifier
from badddy.errors import AuthenticationError

Endpoint = TypeVar("Endpoint", bound=Callable[..., Any])

BEARER_PREFIX = "Bearer "


class RouteVisibility:
    """
    Side table of "is this route public" flags.

    Handler flags override group (router) flags; unmarked endpoints are protected.
    """

    def __init__(self) -> None:
        self._handlers: dict[Callable[..., Any], bool] = {}
        self._groups: list[tuple[APIRouter, bool]] = []

    def mark(self, endpoint: Endpoint, *, public: bool = True) -> Endpoint:
        self._handlers[endpoint] = public
        return endpoint

    def mark_group(self, router: APIRouter, *, public: bool) -> APIRouter:
        self._groups.append((router, public))
        return router

    def is_public(self, endpoint: Callable[..., Any] | None) -> bool:
        if endpoint is None:
            return False
        flag = self._handlers.get(endpoint)
        if flag is not None:
            return flag
        for router, group_flag in self._groups:
            if any(getattr(route, "endpoint", None) is endpoint for route in router.routes):
                return group_flag
        return False


route_visibility = RouteVisibility()


def public(endpoint: Endpoint) -> Endpoint:
    """Mark a route handler as reachable without authentication."""
    return route_visibility.mark(endpoint, public=True)


def protected(endpoint: Endpoint) -> Endpoint:
    """Require authentication on a handler inside a public group."""
    return route_visibility.mark(endpoint, public=False)


class RouteGuard:
    def __init__(self, *, visibility: RouteVisibility, verifier: TokenVerifier) -> None:
        self._visibility = visibility
        self._verifier = verifier

    async def can_activate(self, request: Request) -> bool:
        if self._visibility.is_public(request.scope.get("endpoint")):
            return True

        header = request.headers.get("authorization")
        if not header or not header.startswith(BEARER_PREFIX):
            raise AuthenticationError("Missing or invalid authorization header")

        try:
            principal = await self._verifier.verify(header[len(BEARER_PREFIX) :])
        except InvalidTokenError as e:
            raise AuthenticationError(f"Invalid or expired token: {e.description}") from e

        request.state.principal = principal
        return True


def principal_of(request: Request) -> Principal:
    principal = getattr(request.state, "principal", None)
    if not isinstance(principal, Principal):
        # Public handlers have no principal; asking for one is a 401, not a crash.
        raise AuthenticationError("Authentication required")
    return principal


# --- Module Notes -----------------------------------------------------------
# FastAPI wiring (app-wide dependency, `current_principal`) lives in `auth.deps`.
