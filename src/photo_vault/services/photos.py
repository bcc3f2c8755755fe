"""Photo metadata persistence interface."""

from typing import Protocol
from uuid import UUID

from photo_vault.domain.photos import PhotoRecord


class PhotoRepository(Protocol):
    """Persistence interface for photo metadata."""

    def insert_photo(  # noqa: PLR0913
        self,
        owner_id: UUID,
        storage_key: str,
        filename: str,
        size_bytes: int,
        mime_type: str,
        metadata: dict[str, object],
    ) -> PhotoRecord:
        """Create a photo record and return it with its assigned id."""

    def list_by_owner(self, owner_id: UUID) -> list[PhotoRecord]:
        """Return a user's photos ordered by created_at descending."""

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        """Return a photo by id, if present."""

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo record."""
