"""
badddy.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) attached to requests.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated caller identity.

    Built only by `TokenVerifier` from validated claims; lives for one request.
    """

    id: str
    email: str
    name: str = ""

    def as_dict(self) -> dict[str, str]:
        return asdict(self)


# --- Module Notes -----------------------------------------------------------
# Exactly three fields are copied from token claims; other claims never reach handlers.
