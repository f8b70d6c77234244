"""
badddy.db

Persistence package.

Responsibilities:
- Async SQLAlchemy engine/session helpers.
- ORM mapping of the identity provider's user table (read-only from this repo).
"""

# Package marker.
