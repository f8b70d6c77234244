"""
badddy.api.routers.users

Endpoints about the authenticated caller.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from badddy.auth.deps import current_principal
from badddy.auth.models import Principal

router = APIRouter(prefix="/users", tags=["users"])


class UserOut(BaseModel):
    id: str
    email: str
    name: str


class UserProfileResponse(BaseModel):
    message: str
    user: UserOut


@router.get("/me", response_model=UserProfileResponse)
async def get_profile(principal: Principal = Depends(current_principal)) -> UserProfileResponse:
    # Authentication is a read-only step; the same token always yields the same profile.
    return UserProfileResponse(
        message="Authenticated user profile",
        user=UserOut(**principal.as_dict()),
    )
