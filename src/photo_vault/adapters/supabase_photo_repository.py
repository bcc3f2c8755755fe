"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from photo_vault.domain.photos import PhotoRecord
from photo_vault.services.photos import PhotoRepository

_COLUMNS = "id, user_id, s3_key, filename, size, mime_type, created_at, metadata"


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photo metadata persistence."""

    client: Client

    def insert_photo(  # noqa: PLR0913
        self,
        owner_id: UUID,
        storage_key: str,
        filename: str,
        size_bytes: int,
        mime_type: str,
        metadata: dict[str, object],
    ) -> PhotoRecord:
        """Create a photo row and return it."""
        response = (
            self.client.table("photos")
            .insert(
                {
                    "user_id": str(owner_id),
                    "s3_key": storage_key,
                    "filename": filename,
                    "size": size_bytes,
                    "mime_type": mime_type,
                    "metadata": metadata,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create photo metadata")
        return _parse_row(response.data[0])

    def list_by_owner(self, owner_id: UUID) -> list[PhotoRecord]:
        """Return a user's photos, newest first."""
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("user_id", str(owner_id))
            .order("created_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_photo(self, photo_id: UUID) -> PhotoRecord | None:
        response = (
            self.client.table("photos")
            .select(_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_row(response.data[0])
        return None

    def delete_photo(self, photo_id: UUID) -> None:
        """Delete a photo row."""
        self.client.table("photos").delete().eq("id", str(photo_id)).execute()


def _parse_row(row: dict[str, object]) -> PhotoRecord:
    created_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_raw)
        if isinstance(created_raw, str) and created_raw
        else datetime.now(tz=UTC)
    )
    metadata = row.get("metadata")
    return PhotoRecord(
        id=UUID(str(row["id"])),
        owner_id=UUID(str(row["user_id"])),
        storage_key=str(row["s3_key"]),
        filename=str(row.get("filename", "")),
        size_bytes=int(row.get("size") or 0),
        mime_type=str(row.get("mime_type") or "application/octet-stream"),
        created_at=created_at,
        metadata=metadata if isinstance(metadata, dict) else {},
    )
