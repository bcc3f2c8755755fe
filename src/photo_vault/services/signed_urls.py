"""Signed display URL resolution with a short-lived local cache."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from photo_vault.adapters.s3_object_store import ObjectStore
from photo_vault.domain.errors import ObjectStoreError
from photo_vault.domain.photos import DISPLAY_URL_TTL_SECONDS
from photo_vault.services.cache import UrlCache, utc_now

_logger = logging.getLogger(__name__)


@dataclass
class SignedUrlCache:
    """Resolves private object keys to signed read URLs.

    A resolved URL is reused until its own expiry, so renders of the same
    photo within the window do not trigger another signing call. The entry
    expires one TTL after signing started, never later than the URL itself.
    Entries are keyed by storage key, which is already namespaced by owner id.
    """

    object_store: ObjectStore
    cache: UrlCache
    ttl_seconds: int = DISPLAY_URL_TTL_SECONDS
    clock: Callable[[], datetime] = utc_now

    async def resolve(self, key: str) -> str:
        """Return a live signed URL for the key, signing a new one if needed."""
        cached = self.cache.get(key)
        if cached is not None:
            return cached.url

        issued_at = self.clock()
        try:
            url = await self.object_store.sign_url(key, ttl_seconds=self.ttl_seconds)
        except Exception as exc:
            raise ObjectStoreError(f"Failed to sign URL for {key}: {exc}") from exc
        self.cache.set(key, url, ttl_seconds=self.ttl_seconds, issued_at=issued_at)
        return url

    def invalidate_expired(self) -> int:
        """Drop expired entries; URLs already handed out remain usable."""
        removed = self.cache.purge_expired()
        if removed:
            _logger.info("Dropped %s expired signed URLs", removed)
        return removed

    def forget(self, key: str) -> None:
        """Drop the cached URL for a key."""
        self.cache.discard(key)
