"""
badddy.api.routers.health

Public health check (`GET /api/v1`).
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from badddy.auth.guard import public

router = APIRouter(tags=["health"])


@router.get("", response_class=PlainTextResponse)
@public
async def hello() -> str:
    return "Hello World!"
