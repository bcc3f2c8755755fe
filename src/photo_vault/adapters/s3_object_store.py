"""S3 object storage client."""

import asyncio
from dataclasses import dataclass
from typing import Any, Protocol

import boto3
from botocore.config import Config

from photo_vault.domain.photos import IMMUTABLE_CACHE_CONTROL


class ObjectStore(Protocol):
    """Interface for private photo object storage."""

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        """Write bytes under a key."""

    async def delete(self, key: str) -> None:
        """Delete the object stored under a key."""

    async def sign_url(self, key: str, ttl_seconds: int) -> str:
        """Return a time-limited read URL for a private object."""

    def object_url(self, key: str) -> str:
        """Return the unsigned address of an object."""


@dataclass
class Boto3ObjectStore(ObjectStore):
    """Object store backed by a boto3 S3 client.

    boto3 is blocking, so each call is pushed to a worker thread.
    """

    bucket: str
    region: str
    s3: Any

    @classmethod
    def create(
        cls,
        bucket: str,
        region: str,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
    ) -> "Boto3ObjectStore":
        """Create an object store with its own S3 client."""
        if not bucket.strip():
            raise RuntimeError("S3 bucket is required for the object store")
        config = Config(
            region_name=region,
            retries={"max_attempts": 3, "mode": "standard"},
            signature_version="s3v4",
        )
        client = boto3.client(
            "s3",
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=config,
        )
        return cls(bucket=bucket, region=region, s3=client)

    async def put(self, key: str, content: bytes, content_type: str) -> None:
        """Upload an immutable object."""
        await asyncio.to_thread(
            self.s3.put_object,
            Bucket=self.bucket,
            Key=key,
            Body=content,
            ContentType=content_type or "application/octet-stream",
            CacheControl=IMMUTABLE_CACHE_CONTROL,
        )

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self.s3.delete_object, Bucket=self.bucket, Key=key)

    async def sign_url(self, key: str, ttl_seconds: int) -> str:
        """Presign a GET request for the object."""
        return await asyncio.to_thread(
            self.s3.generate_presigned_url,
            ClientMethod="get_object",
            Params={"Bucket": self.bucket, "Key": key},
            ExpiresIn=max(1, ttl_seconds),
        )

    def object_url(self, key: str) -> str:
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    async def close(self) -> None:
        """Close the underlying S3 client."""
        await asyncio.to_thread(self.s3.close)
