"""Gallery listing with signed display URLs."""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from photo_vault.domain.errors import MetadataError, ObjectStoreError
from photo_vault.domain.photos import GalleryPhoto, PhotoGroup, PhotoRecord
from photo_vault.services.photos import PhotoRepository
from photo_vault.services.signed_urls import SignedUrlCache

_logger = logging.getLogger(__name__)


@dataclass
class GalleryService:
    """Lists a user's photos and resolves their display URLs."""

    photo_repository: PhotoRepository
    signed_urls: SignedUrlCache

    async def list_records(self, owner_id: UUID) -> list[PhotoRecord]:
        """Return a user's photo records, newest first."""
        try:
            return await asyncio.to_thread(
                self.photo_repository.list_by_owner, owner_id
            )
        except Exception as exc:
            raise MetadataError(f"Could not list photos: {exc}") from exc

    async def list_photos(self, owner_id: UUID) -> list[GalleryPhoto]:
        """Return a user's photos with signed URLs.

        A photo whose URL cannot be signed is kept with url=None so one bad
        record does not hide the rest of the gallery.
        """
        records = await self.list_records(owner_id)
        resolved = await asyncio.gather(*(self._resolve(record) for record in records))
        return list(resolved)

    async def get_photo(self, owner_id: UUID, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo only if it belongs to the user."""
        try:
            record = await asyncio.to_thread(
                self.photo_repository.get_photo, photo_id
            )
        except Exception as exc:
            raise MetadataError(f"Could not load photo {photo_id}: {exc}") from exc
        if record is None or record.owner_id != owner_id:
            return None
        return record

    async def _resolve(self, record: PhotoRecord) -> GalleryPhoto:
        # Presigning is local and never checks the object exists, so a dangling
        # record still gets a URL; only signer errors end up with url=None.
        try:
            url = await self.signed_urls.resolve(record.storage_key)
        except ObjectStoreError as exc:
            _logger.warning("No display URL for photo %s: %s", record.id, exc)
            return GalleryPhoto(record=record, url=None, error=str(exc))
        return GalleryPhoto(record=record, url=url)


def group_by_day(photos: Iterable[GalleryPhoto]) -> list[PhotoGroup]:
    """Group photos by calendar day of creation, keeping their order."""
    groups: dict[str, list[GalleryPhoto]] = {}
    for photo in photos:
        created = photo.record.created_at
        label = f"{created:%B} {created.day}, {created.year}"
        groups.setdefault(label, []).append(photo)
    return [PhotoGroup(label=label, photos=items) for label, items in groups.items()]
