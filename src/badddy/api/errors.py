"""
badddy.api.errors

Global exception normalizer for the backend API.

Responsibilities:
- Convert every failure raised while handling a request into exactly one
  error envelope: {statusCode, timestamp, path, method, message}.
- Log each failure once; request bodies are logged for validation failures only.
- Never leak internal exception detail to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from badddy.errors import (
    AppError,
    AuthenticationError,
    ErrorKind,
    HttpError,
    UnclassifiedError,
    ValidationError,
)

log = structlog.get_logger(__name__)


def error_envelope(request: Request, status_code: int, message: str | dict[str, Any]) -> dict[str, Any]:
    return {
        "statusCode": status_code,
        "timestamp": datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        "path": request.url.path,
        "method": request.method,
        "message": message,
    }


def render_error(request: Request, error: AppError, exc: BaseException | None = None) -> JSONResponse:
    status = error.status_code
    cause = exc or error

    match error.kind:
        case ErrorKind.validation:
            log.warning(
                "request.validation_failed",
                status_code=status,
                detail=error.message,
                body=getattr(error, "body", None),
            )
        case ErrorKind.upstream | ErrorKind.unclassified:
            log.error(
                "request.failed",
                status_code=status,
                kind=error.kind.value,
                detail=error.detail,
                exc_info=cause,
            )
        case _:
            log.warning(
                "request.rejected",
                status_code=status,
                kind=error.kind.value,
                message=error.message,
                exc_info=cause,
            )

    headers = error.headers if isinstance(error, HttpError) else None
    return JSONResponse(
        status_code=status,
        content=error_envelope(request, status, error.message),
        headers=headers,
    )


def field_errors(errors: Sequence[Any]) -> dict[str, Any]:
    """Group pydantic error entries by dotted field path (request section dropped)."""

    fields: dict[str, list[str]] = {}
    for err in errors:
        loc = list(err.get("loc", ()))
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header", "cookie"):
            # Undecodable JSON reports a character offset, not a field.
            loc = loc[1:] if isinstance(loc[1], str) else [loc[0]]
        loc = [str(part) for part in loc]
        fields.setdefault(".".join(loc) or "body", []).append(str(err.get("msg", "Invalid value")))
    return {"error": "Bad Request", "fields": fields}


async def _handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    return render_error(request, exc)


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return render_error(request, HttpError(exc.status_code, exc.detail, headers=exc.headers), exc)


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A malformed body fails before any dependency runs; authenticate first so
    # protected routes still answer 401 and unauthenticated bodies are never logged.
    if getattr(request.state, "principal", None) is None:
        try:
            await request.app.state.route_guard.can_activate(request)
        except AuthenticationError as e:
            return render_error(request, e)
    return render_error(request, ValidationError(field_errors(exc.errors()), body=exc.body), exc)


class UnhandledErrorMiddleware:
    """
    Render unexpected exceptions as 500 envelopes inside the CORS layer.

    Installed innermost among user middleware so the response still passes through
    CORS and request logging, and the exception is not re-raised to the server.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, send_tracking)
        except Exception as exc:
            if response_started:
                raise
            response = render_error(Request(scope), UnclassifiedError(detail=repr(exc)), exc)
            await response(scope, receive, send)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle_app_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)


# --- Module Notes -----------------------------------------------------------
# Handlers never format responses themselves; they map the failure onto an AppError
# and defer to `render_error`, the single place envelopes are produced.
