"""
badddy.web.routers.pages

Server-side page endpoints and health checks for the web service.

Responsibilities:
- Liveness (`/healthz`) and readiness with DB check (`/readyz`).
- Email-verification landing state (`/verify-email`).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from badddy.db.repositories.users import UserRepo
from badddy.web.deps import db_session

router = APIRouter(tags=["pages"])


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> dict[str, str]:
    # Readiness: the user table's database is reachable.
    await session.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get("/verify-email", response_model=None)
async def verify_email(
    email: str | None = None,
    session: AsyncSession = Depends(db_session),
) -> dict[str, str] | RedirectResponse:
    """
    Landing state after sign-up.

    Verified addresses are sent on to login; anything else (including unknown
    addresses) stays on the "check your inbox" state.
    """
    if not email:
        return {"status": "missing_email"}
    if await UserRepo(session).is_email_verified(email):
        return RedirectResponse("/login")
    return {"status": "pending", "email": email}


# --- Module Notes -----------------------------------------------------------
# Kubernetes typically uses /healthz for liveness and /readyz for readiness gating.
