"""
badddy.errors

Application error taxonomy.

Responsibilities:
- Model every failure that can leave the backend as a tagged variant
  (kind + HTTP status + message payload), constructed where it is detected.
- Separate what the caller may see (`message`) from what only logs may see (`detail`).
- Mark fatal startup problems (`ConfigurationError`).
"""

from __future__ import annotations

import enum
from typing import Any


class ErrorKind(enum.StrEnum):
    authentication = "AUTHENTICATION"
    validation = "VALIDATION"
    rate_limit = "RATE_LIMIT"
    upstream = "UPSTREAM"
    http = "HTTP"
    unclassified = "UNCLASSIFIED"


INTERNAL_ERROR_MESSAGE = "Internal server error"


class AppError(Exception):
    """
    Base failure carried to the global exception normalizer.

    `message` is either a string or a structured object (validation details)
    and is returned to the caller as-is. `detail` is for server logs only.
    """

    kind: ErrorKind = ErrorKind.unclassified
    status_code: int = 500

    def __init__(
        self,
        message: str | dict[str, Any] = INTERNAL_ERROR_MESSAGE,
        *,
        detail: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message if isinstance(message, str) else self.kind.value)
        self.message = message
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class AuthenticationError(AppError):
    kind = ErrorKind.authentication
    status_code = 401

    def __init__(self, message: str = "Unauthorized", *, detail: str | None = None) -> None:
        super().__init__(message, detail=detail)


class ValidationError(AppError):
    kind = ErrorKind.validation
    status_code = 400

    def __init__(
        self,
        message: str | dict[str, Any] = "Bad Request",
        *,
        body: Any = None,
        detail: str | None = None,
    ) -> None:
        super().__init__(message, detail=detail)
        # Offending request body; logged for diagnosis, never returned.
        self.body = body


class RateLimitError(AppError):
    kind = ErrorKind.rate_limit
    status_code = 429

    def __init__(self, message: str = "Too Many Requests") -> None:
        super().__init__(message)


class UpstreamError(AppError):
    """A dependency (identity provider, email provider, backend) failed."""

    kind = ErrorKind.upstream
    status_code = 500

    def __init__(self, service: str, detail: str) -> None:
        super().__init__(INTERNAL_ERROR_MESSAGE, detail=f"{service}: {detail}")
        self.service = service


class HttpError(AppError):
    """Framework-level HTTP failure (unknown route, method not allowed, ...)."""

    kind = ErrorKind.http

    def __init__(
        self, status_code: int, message: str | dict[str, Any], *, headers: dict[str, str] | None = None
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.headers = headers


class UnclassifiedError(AppError):
    kind = ErrorKind.unclassified
    status_code = 500

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(INTERNAL_ERROR_MESSAGE, detail=detail)


class ConfigurationError(RuntimeError):
    """Required configuration is missing; the process must not start."""


# --- Module Notes -----------------------------------------------------------
# Errors are rendered in exactly one place: `badddy.api.errors`.
