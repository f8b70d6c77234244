"""
badddy.db.models

ORM view of the identity provider's `user` table.

Responsibilities:
- Map the columns this repo reads (identity and email verification state).

The identity service owns and migrates this schema; column names follow its
camelCase convention.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from badddy.db.base import Base


def _utcnow() -> datetime:
    # Naive UTC, matching how the identity service stores timestamps.
    return datetime.now(UTC).replace(tzinfo=None)


class User(Base):
    __tablename__ = "user"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True, index=True)
    email_verified: Mapped[bool] = mapped_column(
        "emailVerified", Boolean, nullable=False, default=False
    )
    image: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column("createdAt", nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt", nullable=False, default=_utcnow, onupdate=_utcnow
    )


# --- Module Notes -----------------------------------------------------------
# Sessions, accounts, organizations and subscriptions live in the same database but
# are only ever touched by the identity service.
