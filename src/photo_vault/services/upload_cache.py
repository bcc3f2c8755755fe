"""Persisted cache of recently uploaded object keys."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Protocol

from photo_vault.domain.photos import UPLOAD_CACHE_TTL_SECONDS, CachedUrl
from photo_vault.services.cache import utc_now

_logger = logging.getLogger(__name__)


class UploadCacheStore(Protocol):
    """Persistence interface for upload cache entries."""

    def load(self) -> list[CachedUrl]:
        """Return all persisted entries."""

    def save(self, entries: Iterable[CachedUrl]) -> None:
        """Replace the persisted entries."""


@dataclass
class InMemoryUploadCacheStore(UploadCacheStore):
    """Upload cache store that lives only as long as the process."""

    entries: list[CachedUrl] = field(default_factory=list)

    def load(self) -> list[CachedUrl]:
        return list(self.entries)

    def save(self, entries: Iterable[CachedUrl]) -> None:
        self.entries = list(entries)


@dataclass
class UploadCache:
    """Remembers keys confirmed uploaded within the last TTL window."""

    store: UploadCacheStore
    ttl_seconds: int = UPLOAD_CACHE_TTL_SECONDS
    clock: Callable[[], datetime] = utc_now

    def get(self, key: str) -> str | None:
        """Return the recorded URL for a key if its entry is still live."""
        now = self.clock()
        for entry in self.store.load():
            if entry.key == key and entry.is_live(now):
                return entry.url
        return None

    def record(self, key: str, url: str) -> CachedUrl:
        """Record a confirmed upload."""
        entry = CachedUrl(
            key=key,
            url=url,
            expires_at=self.clock() + timedelta(seconds=self.ttl_seconds),
        )
        entries = [existing for existing in self.store.load() if existing.key != key]
        entries.append(entry)
        self.store.save(entries)
        return entry

    def prune_expired(self) -> int:
        """Drop expired entries from the store and return how many went."""
        now = self.clock()
        entries = self.store.load()
        live = [entry for entry in entries if entry.is_live(now)]
        removed = len(entries) - len(live)
        if removed:
            self.store.save(live)
            _logger.info("Pruned %s expired upload cache entries", removed)
        return removed
