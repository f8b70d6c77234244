"""
badddy.db.repositories

Repository layer (SQLAlchemy async).
"""

# Package marker.
