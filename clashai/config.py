"""Client configuration using pydantic-settings.

Environment variables (prefix CLASHAI_):

- CLASHAI_API_KEY (no default; required to build a client from settings)
- CLASHAI_MODEL (no default; required to build a client from settings)
- CLASHAI_BASE_URL (default: http://clashai.3utilities.com:25621)
- CLASHAI_REQUEST_TIMEOUT (seconds, default: 60)
- CLASHAI_SERIALIZE_PER_USER (default: true)
- CLASHAI_LOG_LEVEL (default: INFO)
- CLASHAI_LOG_JSON (default: false)
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "http://clashai.3utilities.com:25621"


class Settings(BaseSettings):
    """Typed client settings."""

    api_key: str = Field(default="")
    model: str = Field(default="")

    base_url: str = Field(default=DEFAULT_BASE_URL)
    request_timeout: float = Field(default=60.0, ge=1.0)

    # Run dispatches for one user id one at a time
    serialize_per_user: bool = Field(default=True)

    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="CLASHAI_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("base_url", mode="before")
    @classmethod
    def _norm_base_url(cls, v: object) -> str:
        if not v:
            return DEFAULT_BASE_URL
        return str(v).strip().rstrip("/")

    @field_validator("api_key", "model", mode="before")
    @classmethod
    def _strip(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip()
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
