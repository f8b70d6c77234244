"""
badddy.db.repositories.users

Read-only repository for identity-provider users.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from badddy.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_email_verified(self, email: str) -> bool:
        stmt = select(User.email_verified).where(User.email == email)
        verified = (await self._session.execute(stmt)).scalar_one_or_none()
        # Unknown addresses read as unverified.
        return bool(verified)
