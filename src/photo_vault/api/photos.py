"""Photo endpoints: gallery, upload, delete and storage usage."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import (
    APIRouter,
    Depends,
    File,
    Header,
    HTTPException,
    Request,
    UploadFile,
    status,
)

from photo_vault.api.models import (
    DeletionOut,
    GalleryOut,
    PhotoGroupOut,
    StorageOut,
    UploadBatchOut,
    UploadTaskOut,
)
from photo_vault.config import parse_user_id
from photo_vault.domain.errors import (
    DanglingRecordError,
    MetadataError,
    ObjectStoreError,
    QuotaExceededError,
    QuotaReadError,
)
from photo_vault.domain.photos import PhotoUpload
from photo_vault.services.gallery import group_by_day

if TYPE_CHECKING:
    from photo_vault.containers import AppContainer

router = APIRouter(tags=["photos"])


async def require_user(x_user_id: str | None = Header(default=None)) -> UUID:
    """Return the user id forwarded by the authentication layer."""
    user_id = parse_user_id(x_user_id)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/photos")
async def list_photos(
    request: Request, user_id: UUID = Depends(require_user)
) -> GalleryOut:
    """Return the user's photos grouped by day, newest first."""
    container = _container(request)
    try:
        photos = await container.gallery_service.list_photos(user_id)
    except MetadataError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc)) from exc
    return GalleryOut(
        groups=[PhotoGroupOut.from_group(group) for group in group_by_day(photos)]
    )


@router.post("/photos")
async def upload_photos(
    request: Request,
    files: list[UploadFile] = File(...),
    user_id: UUID = Depends(require_user),
) -> UploadBatchOut:
    """Upload a batch of photos; per-file failures are reported in the body."""
    container = _container(request)
    uploads = [
        PhotoUpload(
            content=await upload.read(),
            filename=upload.filename or "upload",
            mime_type=upload.content_type or "application/octet-stream",
        )
        for upload in files
    ]
    try:
        batch = await container.upload_service.submit_batch(user_id, uploads)
    except QuotaExceededError as exc:
        raise HTTPException(
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, str(exc)
        ) from exc
    except QuotaReadError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc)) from exc
    return UploadBatchOut(tasks=[UploadTaskOut.from_task(task) for task in batch.tasks])


@router.delete("/photos/{photo_id}")
async def delete_photo(
    photo_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> DeletionOut:
    """Delete a photo from storage and from the gallery."""
    container = _container(request)
    try:
        photo = await container.gallery_service.get_photo(user_id, photo_id)
    except MetadataError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc)) from exc
    if photo is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    try:
        result = await container.deletion_service.delete_photo(photo)
    except ObjectStoreError as exc:
        raise HTTPException(status.HTTP_502_BAD_GATEWAY, str(exc)) from exc
    except DanglingRecordError as exc:
        raise HTTPException(
            status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc)
        ) from exc
    storage = StorageOut.from_quota(result.quota) if result.quota else None
    return DeletionOut(deleted=photo.id, storage=storage)


@router.get("/storage")
async def storage_usage(
    request: Request, user_id: UUID = Depends(require_user)
) -> StorageOut:
    """Return storage used against the user's plan limit."""
    container = _container(request)
    try:
        summary = await container.quota_service.storage_summary(user_id)
    except QuotaReadError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, str(exc)) from exc
    return StorageOut.from_summary(summary)
