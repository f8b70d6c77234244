"""
badddy.auth

Authentication package.

Responsibilities:
- Remote JWKS cache and JWT verification.
- Route guard, public-route marker and FastAPI auth dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here talks to the identity provider except `auth.jwks` (public keys only).
