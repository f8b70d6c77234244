"""
badddy.api.routers

Route modules of the backend API, mounted under `/api/v1`.
"""

# Package marker.
