"""Error taxonomy for the photo storage pipeline."""


class PhotoStorageError(RuntimeError):
    """Base error for upload, delete and URL resolution failures."""


class QuotaExceededError(PhotoStorageError):
    """Raised when a batch would push a free user over the storage ceiling."""

    def __init__(self, used_bytes: int, requested_bytes: int, limit_bytes: int) -> None:
        self.used_bytes = used_bytes
        self.requested_bytes = requested_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            "Storage limit exceeded. Please upgrade to premium to upload more files."
        )


class QuotaReadError(PhotoStorageError):
    """Raised when the storage quota cannot be read."""


class ObjectStoreError(PhotoStorageError):
    """Raised when an object store put, delete or sign call fails."""


class MetadataError(PhotoStorageError):
    """Raised when a photo record cannot be written or removed."""


class DanglingRecordError(MetadataError):
    """Raised when an object was deleted but its record remains."""

    def __init__(self, photo_id: object, storage_key: str, reason: str) -> None:
        self.photo_id = photo_id
        self.storage_key = storage_key
        super().__init__(
            f"Photo {photo_id} was removed from storage but its record "
            f"could not be deleted: {reason}"
        )


class QuotaUpdateError(PhotoStorageError):
    """Raised when a committed upload could not be added to the storage total."""
