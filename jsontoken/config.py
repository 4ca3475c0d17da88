from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# One year.
MAX_LIFETIME_SECONDS = 60 * 60 * 24 * 365


class Settings(BaseSettings):
    """Centralised token settings, sourced from environment variables or .env."""

    app_name: str = Field(default="jsontoken", alias="APP_NAME")
    environment: str = Field(default="development", alias="ENVIRONMENT")
    secret_key: str = Field(
        default="change-me-to-a-safe-key",
        alias="JSONTOKEN_SECRET_KEY",
        description="Shared HMAC-SHA256 secret used to sign and verify tokens.",
        min_length=16,
    )
    key_id: Optional[str] = Field(
        default=None,
        alias="JSONTOKEN_KEY_ID",
        description="Optional key identifier written to the `kid` header.",
    )
    issuer: Optional[str] = Field(
        default=None,
        alias="JSONTOKEN_ISSUER",
        description="Issuer written to the `iss` claim of issued tokens.",
    )
    audience: Optional[str] = Field(
        default=None,
        alias="JSONTOKEN_AUDIENCE",
        description="Expected `aud` claim when verifying; also the default audience when issuing.",
    )
    lifetime_seconds: int = Field(
        default=120,
        alias="JSONTOKEN_LIFETIME_SECONDS",
        description="Lifetime of issued tokens (in seconds).",
        ge=1,
        le=MAX_LIFETIME_SECONDS,
    )
    clock_skew_seconds: int = Field(
        default=120,
        alias="JSONTOKEN_CLOCK_SKEW_SECONDS",
        description="Tolerance applied to `iat` and `exp` checks (in seconds).",
        ge=0,
        le=60 * 60 * 24,
    )

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached accessor so imports share a single settings instance."""
    return Settings()
