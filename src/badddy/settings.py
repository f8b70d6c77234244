"""
badddy.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the backend API and the web gateway.
- Hide secrets from repr/logging (e.g., the transactional email API key).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    One settings object shared by both services; each service reads the
    fields it needs. All values come from `BADDDY_*` environment variables.
    """

    model_config = SettingsConfigDict(env_prefix="BADDDY_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "badddy"
    log_level: str = "INFO"

    # Backend API
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    frontend_url: str | None = None
    rate_limit_per_minute: int = Field(default=10, ge=1)

    # Web gateway
    web_host: str = "0.0.0.0"
    web_port: int = 3000
    backend_internal_url: str = "http://localhost:8080"
    proxy_timeout_seconds: float = Field(default=10.0, gt=0)

    # Identity provider (issues sessions and JWTs, publishes the JWKS)
    identity_base_url: str = "http://localhost:3000"
    jwt_issuer: str | None = None
    jwt_audience: str | None = None
    jwt_leeway_seconds: int = Field(default=0, ge=0)
    jwks_timeout_seconds: float = Field(default=5.0, gt=0)
    jwks_min_refresh_interval_seconds: float = Field(default=30.0, ge=0)

    # Transactional email (useSend)
    usesend_api_key: str | None = Field(default=None, repr=False)
    usesend_base_url: str = "https://app.usesend.com"
    email_from: str = "No Reply Badddy <noreply@cotizoo.com>"
    email_timeout_seconds: float = Field(default=10.0, gt=0)

    # Persistence (read-only view of the identity provider's user table)
    database_url: str = "sqlite+aiosqlite:///./badddy.db"

    @property
    def jwks_url(self) -> str:
        return f"{self.identity_base_url.rstrip('/')}/api/auth/jwks"

    @property
    def expected_issuer(self) -> str:
        # Tokens are issued by the identity service under its own base URL.
        return self.jwt_issuer or self.identity_base_url

    @property
    def cors_origin(self) -> str:
        return self.frontend_url or "http://localhost:3000"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Required-at-startup checks (email API key, production CORS origin) live in the
# app factories so that a bare `Settings()` stays constructible in tooling and tests.
