"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from photo_vault.adapters.json_upload_cache_store import JsonFileUploadCacheStore
from photo_vault.adapters.s3_object_store import Boto3ObjectStore, ObjectStore
from photo_vault.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_vault.adapters.supabase_quota_ledger import SupabaseQuotaLedger
from photo_vault.config import Settings
from photo_vault.services.cache import InMemoryCache
from photo_vault.services.deletion import DeletionService
from photo_vault.services.gallery import GalleryService
from photo_vault.services.photos import PhotoRepository
from photo_vault.services.quota import QuotaLedger, QuotaService
from photo_vault.services.signed_urls import SignedUrlCache
from photo_vault.services.upload_cache import (
    InMemoryUploadCacheStore,
    UploadCache,
    UploadCacheStore,
)
from photo_vault.services.uploads import UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    object_store: ObjectStore
    quota_service: QuotaService
    signed_urls: SignedUrlCache
    upload_cache: UploadCache
    upload_service: UploadService
    deletion_service: DeletionService
    gallery_service: GalleryService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    quota_ledger = SupabaseQuotaLedger(supabase_client)
    object_store = Boto3ObjectStore.create(
        bucket=resolved_settings.s3_bucket,
        region=resolved_settings.aws_region,
        access_key_id=resolved_settings.aws_access_key_id,
        secret_access_key=resolved_settings.aws_secret_access_key,
    )
    cache_store: UploadCacheStore = (
        JsonFileUploadCacheStore(resolved_settings.upload_cache_path)
        if resolved_settings.upload_cache_path
        else InMemoryUploadCacheStore()
    )
    return wire_container(
        settings=resolved_settings,
        object_store=object_store,
        photo_repository=photo_repository,
        quota_ledger=quota_ledger,
        upload_cache_store=cache_store,
        close_resources=object_store.close,
    )


def wire_container(
    *,
    settings: Settings,
    object_store: ObjectStore,
    photo_repository: PhotoRepository,
    quota_ledger: QuotaLedger,
    upload_cache_store: UploadCacheStore,
    close_resources: Callable[[], Awaitable[None]] | None = None,
) -> AppContainer:
    """Build services on top of already-constructed adapters."""
    quota_service = QuotaService(
        ledger=quota_ledger,
        free_limit_bytes=settings.free_storage_limit_bytes,
    )
    signed_urls = SignedUrlCache(
        object_store=object_store,
        cache=InMemoryCache(),
        ttl_seconds=settings.display_url_ttl_seconds,
    )
    upload_cache = UploadCache(
        store=upload_cache_store,
        ttl_seconds=settings.upload_cache_ttl_seconds,
    )
    upload_service = UploadService(
        object_store=object_store,
        photo_repository=photo_repository,
        quota_service=quota_service,
        upload_cache=upload_cache,
    )
    deletion_service = DeletionService(
        object_store=object_store,
        photo_repository=photo_repository,
        quota_service=quota_service,
        signed_urls=signed_urls,
    )
    gallery_service = GalleryService(
        photo_repository=photo_repository,
        signed_urls=signed_urls,
    )

    async def _noop_close() -> None:
        return None

    return AppContainer(
        settings=settings,
        object_store=object_store,
        quota_service=quota_service,
        signed_urls=signed_urls,
        upload_cache=upload_cache,
        upload_service=upload_service,
        deletion_service=deletion_service,
        gallery_service=gallery_service,
        close_resources=close_resources or _noop_close,
    )
