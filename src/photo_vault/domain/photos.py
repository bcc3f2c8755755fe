"""Domain models for stored photos and storage quotas."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID

from photo_vault.domain.errors import PhotoStorageError

FREE_STORAGE_LIMIT_BYTES = 5 * 1024 * 1024 * 1024
DISPLAY_URL_TTL_SECONDS = 3600
UPLOAD_CACHE_TTL_SECONDS = 24 * 60 * 60
IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


@dataclass(frozen=True)
class PhotoRecord:
    """Metadata row for one stored photo."""

    id: UUID
    owner_id: UUID
    storage_key: str
    filename: str
    size_bytes: int
    mime_type: str
    created_at: datetime
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class QuotaState:
    """Storage usage and plan for a user."""

    storage_used_bytes: int
    is_premium: bool
    free_limit_bytes: int = FREE_STORAGE_LIMIT_BYTES

    @property
    def limit_bytes(self) -> int | None:
        """Return the enforced ceiling, or None for premium users."""
        return None if self.is_premium else self.free_limit_bytes

    def would_exceed(self, additional_bytes: int) -> bool:
        """Return True if adding the bytes would go over the free ceiling."""
        if self.is_premium:
            return False
        return self.storage_used_bytes + additional_bytes > self.free_limit_bytes


@dataclass(frozen=True)
class CachedUrl:
    """A URL for an object key that is valid until expires_at."""

    key: str
    url: str
    expires_at: datetime

    def is_live(self, now: datetime) -> bool:
        return now < self.expires_at


@dataclass(frozen=True)
class PhotoUpload:
    """A local file submitted for upload."""

    content: bytes
    filename: str
    mime_type: str

    @property
    def size(self) -> int:
        return len(self.content)


class UploadStatus(str, Enum):
    """Terminal and pending states of an upload task."""

    PENDING = "pending"
    CACHED_SKIP = "cached_skip"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class UploadTask:
    """Progress and outcome of a single file within a batch."""

    file: PhotoUpload
    progress: int = 0
    status: UploadStatus = UploadStatus.PENDING
    storage_key: str | None = None
    record: PhotoRecord | None = None
    error: str | None = None
    warning: str | None = None
    failure: PhotoStorageError | None = None

    @property
    def is_done(self) -> bool:
        return self.status is not UploadStatus.PENDING


@dataclass(frozen=True)
class UploadBatch:
    """Result of a submitted batch, one task per file."""

    owner_id: UUID
    tasks: list[UploadTask]

    @property
    def succeeded(self) -> list[UploadTask]:
        return [task for task in self.tasks if task.status is UploadStatus.SUCCESS]

    @property
    def failed(self) -> list[UploadTask]:
        return [task for task in self.tasks if task.status is UploadStatus.FAILED]

    @property
    def skipped(self) -> list[UploadTask]:
        return [
            task for task in self.tasks if task.status is UploadStatus.CACHED_SKIP
        ]

    @property
    def warnings(self) -> list[str]:
        return [task.warning for task in self.tasks if task.warning]


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of a completed deletion."""

    photo: PhotoRecord
    quota: QuotaState | None


@dataclass(frozen=True)
class GalleryPhoto:
    """A photo record paired with its display URL."""

    record: PhotoRecord
    url: str | None
    error: str | None = None


@dataclass(frozen=True)
class PhotoGroup:
    """Photos taken on the same calendar day."""

    label: str
    photos: list[GalleryPhoto]


@dataclass(frozen=True)
class StorageSummary:
    """Human-facing storage usage summary."""

    storage_used_bytes: int
    storage_used: str
    limit: str
    plan: str
    percent_used: float | None
