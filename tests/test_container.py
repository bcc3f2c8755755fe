"""Tests for container wiring."""

import asyncio

from photo_vault.adapters.s3_object_store import Boto3ObjectStore
from photo_vault.containers import build_container
from photo_vault.services.upload_cache import InMemoryUploadCacheStore


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)

    assert container.upload_service is not None
    assert container.deletion_service.signed_urls is container.signed_urls
    assert isinstance(container.object_store, Boto3ObjectStore)
    assert isinstance(container.upload_cache.store, InMemoryUploadCacheStore)
    asyncio.run(container.close_resources())


def test_build_container_uses_file_cache_when_configured(settings, tmp_path) -> None:
    settings.upload_cache_path = tmp_path / "uploads.json"

    container = build_container(settings)

    assert container.upload_cache.store.path == tmp_path / "uploads.json"
    asyncio.run(container.close_resources())


def test_wired_services_share_configured_limits(container, settings) -> None:
    assert container.quota_service.free_limit_bytes == settings.free_storage_limit_bytes
    assert container.signed_urls.ttl_seconds == 3600
    assert container.upload_cache.ttl_seconds == 86400
