"""Coordinated photo deletion across object storage and metadata."""

import asyncio
import logging
from dataclasses import dataclass

from photo_vault.adapters.s3_object_store import ObjectStore
from photo_vault.domain.errors import (
    DanglingRecordError,
    ObjectStoreError,
    QuotaReadError,
)
from photo_vault.domain.photos import DeletionResult, PhotoRecord
from photo_vault.services.photos import PhotoRepository
from photo_vault.services.quota import QuotaService
from photo_vault.services.signed_urls import SignedUrlCache

_logger = logging.getLogger(__name__)


@dataclass
class DeletionService:
    """Deletes the stored object first, then its record.

    If the record delete fails after the object is gone, the record is left
    dangling and DanglingRecordError is raised. Nothing is retried.
    """

    object_store: ObjectStore
    photo_repository: PhotoRepository
    quota_service: QuotaService
    signed_urls: SignedUrlCache

    async def delete_photo(
        self, photo: PhotoRecord, photos: list[PhotoRecord] | None = None
    ) -> DeletionResult:
        """Delete a photo and drop it from the caller's list on success."""
        try:
            await self.object_store.delete(photo.storage_key)
        except Exception as exc:
            _logger.warning("Object delete failed for %s: %s", photo.storage_key, exc)
            raise ObjectStoreError(
                f"Failed to delete {photo.filename}: {exc}"
            ) from exc

        self.signed_urls.forget(photo.storage_key)

        try:
            await asyncio.to_thread(self.photo_repository.delete_photo, photo.id)
        except Exception as exc:
            _logger.error(
                "Object %s deleted but record %s remains: %s",
                photo.storage_key,
                photo.id,
                exc,
            )
            raise DanglingRecordError(photo.id, photo.storage_key, str(exc)) from exc

        quota = None
        try:
            quota = await self.quota_service.get_quota(photo.owner_id)
        except QuotaReadError:
            _logger.exception("Could not refresh storage quota for %s", photo.owner_id)

        if photos is not None:
            photos[:] = [existing for existing in photos if existing.id != photo.id]
        _logger.info("Deleted photo %s (%s)", photo.id, photo.storage_key)
        return DeletionResult(photo=photo, quota=quota)
