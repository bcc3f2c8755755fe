"""Upload orchestration: quota gate, object write, record insert, ledger update."""

import asyncio
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import PurePosixPath
from uuid import UUID

from photo_vault.adapters.s3_object_store import ObjectStore
from photo_vault.domain.errors import (
    MetadataError,
    ObjectStoreError,
    PhotoStorageError,
    QuotaUpdateError,
)
from photo_vault.domain.photos import (
    PhotoUpload,
    UploadBatch,
    UploadStatus,
    UploadTask,
)
from photo_vault.services.cache import utc_now
from photo_vault.services.photos import PhotoRepository
from photo_vault.services.quota import QuotaService
from photo_vault.services.upload_cache import UploadCache

_logger = logging.getLogger(__name__)

_KEY_DERIVED = 10
_OBJECT_WRITTEN = 60
_RECORD_INSERTED = 85
_DONE = 100

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

ProgressCallback = Callable[[UploadTask], None]


@dataclass
class UploadService:
    """Uploads batches of files for a user.

    Each admitted file runs the sequence object write, record insert, quota
    increment. Steps are never rolled back: a failed insert leaves an orphan
    object in storage, and a failed increment leaves the ledger under-counted
    while the photo itself is kept.
    """

    object_store: ObjectStore
    photo_repository: PhotoRepository
    quota_service: QuotaService
    upload_cache: UploadCache
    clock: Callable[[], datetime] = utc_now
    _in_flight: dict[str, PhotoUpload] = field(
        default_factory=dict, init=False, repr=False
    )

    async def submit_batch(
        self,
        owner_id: UUID,
        files: Iterable[PhotoUpload],
        on_progress: ProgressCallback | None = None,
    ) -> UploadBatch:
        """Upload a batch after checking the whole of it against the quota.

        Raises QuotaExceededError or QuotaReadError before any write. Per-file
        failures are reported on the returned tasks instead of raised.
        """
        pending = list(files)
        total_bytes = sum(upload.size for upload in pending)
        await self.quota_service.check_batch(owner_id, total_bytes)

        tasks = [UploadTask(file=upload) for upload in pending]
        await asyncio.gather(
            *(self._upload(owner_id, task, on_progress) for task in tasks)
        )
        batch = UploadBatch(owner_id=owner_id, tasks=tasks)
        _logger.info(
            "Upload batch for %s: %s succeeded, %s skipped, %s failed",
            owner_id,
            len(batch.succeeded),
            len(batch.skipped),
            len(batch.failed),
        )
        return batch

    async def _upload(
        self, owner_id: UUID, task: UploadTask, on_progress: ProgressCallback | None
    ) -> None:
        key, repeated = self._reserve_key(owner_id, task.file)
        task.storage_key = key
        _advance(task, _KEY_DERIVED, on_progress)

        if repeated:
            task.status = UploadStatus.CACHED_SKIP
            _advance(task, _DONE, on_progress)
            return

        self._in_flight[key] = task.file
        try:
            await self._commit(owner_id, key, task, on_progress)
        finally:
            self._in_flight.pop(key, None)

    def _reserve_key(self, owner_id: UUID, upload: PhotoUpload) -> tuple[str, bool]:
        """Return the storage key for an upload and whether it repeats one.

        The same file already in progress under the derived key, or recorded in
        the upload cache, is a repeat. A different file that derives a key
        already in progress moves to the next free millisecond instead.
        """
        uploaded_at = self.clock()
        while True:
            key = build_storage_key(owner_id, uploaded_at, upload.filename)
            in_progress = self._in_flight.get(key)
            if in_progress is None:
                return key, self.upload_cache.get(key) is not None
            if in_progress == upload:
                return key, True
            uploaded_at += _ONE_MS

    async def _commit(
        self,
        owner_id: UUID,
        key: str,
        task: UploadTask,
        on_progress: ProgressCallback | None,
    ) -> None:
        upload = task.file
        try:
            await self.object_store.put(key, upload.content, upload.mime_type)
        except Exception as exc:
            _logger.warning("Object write failed for %s: %s", key, exc)
            _fail(task, ObjectStoreError(_reason(exc)), exc, on_progress)
            return
        _advance(task, _OBJECT_WRITTEN, on_progress)
        self._remember(key)

        try:
            record = await asyncio.to_thread(
                self.photo_repository.insert_photo,
                owner_id=owner_id,
                storage_key=key,
                filename=upload.filename,
                size_bytes=upload.size,
                mime_type=upload.mime_type,
                metadata={},
            )
        except Exception as exc:
            _logger.warning(
                "Record insert failed, object %s left without metadata: %s", key, exc
            )
            _fail(task, MetadataError(_reason(exc)), exc, on_progress)
            return
        task.record = record
        _advance(task, _RECORD_INSERTED, on_progress)

        try:
            await self.quota_service.record_upload(owner_id, upload.size)
        except QuotaUpdateError as exc:
            _logger.warning(
                "Storage total for %s under-counts %s: %s", owner_id, key, exc
            )
            task.warning = str(exc)

        task.status = UploadStatus.SUCCESS
        _advance(task, _DONE, on_progress)

    def _remember(self, key: str) -> None:
        try:
            self.upload_cache.record(key, self.object_store.object_url(key))
        except OSError:
            _logger.exception("Could not persist upload cache entry for %s", key)


def build_storage_key(owner_id: UUID, uploaded_at: datetime, filename: str) -> str:
    """Return '{owner}/{epoch_ms}-{filename}' for a new upload."""
    timestamp_ms = (uploaded_at - _EPOCH) // _ONE_MS
    name = PurePosixPath(filename.replace("\\", "/")).name or "upload"
    return f"{owner_id}/{timestamp_ms}-{name}"


def _advance(
    task: UploadTask, progress: int, on_progress: ProgressCallback | None
) -> None:
    task.progress = progress
    _notify(task, on_progress)


def _fail(
    task: UploadTask,
    error: PhotoStorageError,
    cause: Exception,
    on_progress: ProgressCallback | None,
) -> None:
    error.__cause__ = cause
    task.status = UploadStatus.FAILED
    task.failure = error
    task.error = str(error)
    _notify(task, on_progress)


def _notify(task: UploadTask, on_progress: ProgressCallback | None) -> None:
    if on_progress is None:
        return
    try:
        on_progress(task)
    except Exception:
        _logger.exception("Progress callback failed for %s", task.storage_key)


def _reason(exc: Exception) -> str:
    return str(exc) or "Upload failed"
