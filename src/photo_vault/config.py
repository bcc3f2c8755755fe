"""Application configuration."""

import os
from pathlib import Path
from uuid import UUID

from pydantic_settings import BaseSettings, SettingsConfigDict

from photo_vault.domain.photos import (
    DISPLAY_URL_TTL_SECONDS,
    FREE_STORAGE_LIMIT_BYTES,
    UPLOAD_CACHE_TTL_SECONDS,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    s3_bucket: str = "aums-cloud"
    aws_region: str = "ap-south-1"
    aws_access_key_id: str | None = None
    aws_secret_access_key: str | None = None
    free_storage_limit_bytes: int = FREE_STORAGE_LIMIT_BYTES
    display_url_ttl_seconds: int = DISPLAY_URL_TTL_SECONDS
    upload_cache_ttl_seconds: int = UPLOAD_CACHE_TTL_SECONDS
    upload_cache_path: Path | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_user_id(raw: str | None) -> UUID | None:
    """Parse the authenticated user id forwarded by the auth layer."""
    if raw is None:
        return None
    cleaned = raw.strip()
    if not cleaned:
        return None
    try:
        return UUID(cleaned)
    except ValueError:
        return None
