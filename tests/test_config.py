"""Tests for configuration helpers."""

from uuid import uuid4

from photo_vault.config import Settings, parse_user_id


def test_parse_user_id() -> None:
    user_id = uuid4()

    assert parse_user_id(f" {user_id} ") == user_id
    assert parse_user_id(None) is None
    assert parse_user_id("  ") is None
    assert parse_user_id("42") is None


def test_settings_defaults(monkeypatch) -> None:
    for name in ("AWS_REGION", "UPLOAD_CACHE_PATH", "FREE_STORAGE_LIMIT_BYTES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "service-key")
    monkeypatch.setenv("S3_BUCKET", "photos")

    settings = Settings()

    assert settings.s3_bucket == "photos"
    assert settings.aws_region == "ap-south-1"
    assert settings.free_storage_limit_bytes == 5 * 1024**3
    assert settings.display_url_ttl_seconds == 3600
    assert settings.upload_cache_ttl_seconds == 24 * 60 * 60
    assert settings.upload_cache_path is None
