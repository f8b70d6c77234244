"""
badddy.api

Backend REST service.

Responsibilities:
- FastAPI app factory and router modules.
- Global exception normalizer and rate limiting.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer should remain thin: request validation + auth + delegation to services.
