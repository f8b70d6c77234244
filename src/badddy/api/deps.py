"""
badddy.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for shared services.
- Encapsulate app.state access patterns.
"""

from __future__ import annotations

from fastapi import Request

from badddy.email.service import EmailService


def email_service(request: Request) -> EmailService:
    # Built (and API key checked) once in `badddy.api.app.create_app`.
    return request.app.state.email_service


# --- Module Notes -----------------------------------------------------------
# Auth dependencies live in `badddy.auth.deps`; rate limiting in `badddy.api.ratelimit`.
