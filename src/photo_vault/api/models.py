"""Pydantic response models for the photo API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from photo_vault.domain.photos import (
    GalleryPhoto,
    PhotoGroup,
    QuotaState,
    StorageSummary,
    UploadTask,
)
from photo_vault.services.quota import summarize


class PhotoOut(BaseModel):
    """A photo with its display URL."""

    id: UUID
    filename: str
    storage_key: str
    size_bytes: int
    mime_type: str
    created_at: datetime
    metadata: dict[str, object]
    url: str | None
    error: str | None = None

    @classmethod
    def from_gallery(cls, photo: GalleryPhoto) -> "PhotoOut":
        record = photo.record
        return cls(
            id=record.id,
            filename=record.filename,
            storage_key=record.storage_key,
            size_bytes=record.size_bytes,
            mime_type=record.mime_type,
            created_at=record.created_at,
            metadata=record.metadata,
            url=photo.url,
            error=photo.error,
        )


class PhotoGroupOut(BaseModel):
    label: str
    photos: list[PhotoOut]

    @classmethod
    def from_group(cls, group: PhotoGroup) -> "PhotoGroupOut":
        return cls(
            label=group.label,
            photos=[PhotoOut.from_gallery(photo) for photo in group.photos],
        )


class GalleryOut(BaseModel):
    groups: list[PhotoGroupOut]


class StorageOut(BaseModel):
    """Storage usage for the settings view."""

    storage_used_bytes: int
    storage_used: str
    limit: str
    plan: str
    percent_used: float | None

    @classmethod
    def from_summary(cls, summary: StorageSummary) -> "StorageOut":
        return cls(
            storage_used_bytes=summary.storage_used_bytes,
            storage_used=summary.storage_used,
            limit=summary.limit,
            plan=summary.plan,
            percent_used=summary.percent_used,
        )

    @classmethod
    def from_quota(cls, quota: QuotaState) -> "StorageOut":
        return cls.from_summary(summarize(quota))


class UploadTaskOut(BaseModel):
    """Outcome of one uploaded file."""

    filename: str
    status: str
    progress: int
    storage_key: str | None
    photo_id: UUID | None
    error: str | None
    warning: str | None

    @classmethod
    def from_task(cls, task: UploadTask) -> "UploadTaskOut":
        return cls(
            filename=task.file.filename,
            status=task.status.value,
            progress=task.progress,
            storage_key=task.storage_key,
            photo_id=task.record.id if task.record else None,
            error=task.error,
            warning=task.warning,
        )


class UploadBatchOut(BaseModel):
    tasks: list[UploadTaskOut]


class DeletionOut(BaseModel):
    deleted: UUID
    storage: StorageOut | None
