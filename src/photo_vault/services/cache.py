"""Time-bounded key-value caches."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from photo_vault.domain.photos import CachedUrl


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class UrlCache(Protocol):
    """Cache interface mapping object keys to URLs with an expiry."""

    def get(self, key: str) -> CachedUrl | None:
        """Return a cached entry if present and not expired."""

    def set(
        self,
        key: str,
        url: str,
        ttl_seconds: int,
        issued_at: datetime | None = None,
    ) -> CachedUrl:
        """Store a URL valid for ttl_seconds from issued_at (default now)."""

    def discard(self, key: str) -> None:
        """Drop the entry for a key, if any."""

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""


@dataclass
class InMemoryCache(UrlCache):
    """Process-local URL cache."""

    clock: Callable[[], datetime] = utc_now
    _entries: dict[str, CachedUrl] = field(default_factory=dict)

    def get(self, key: str) -> CachedUrl | None:
        """Return a cached entry if it hasn't expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not entry.is_live(self.clock()):
            self._entries.pop(key, None)
            return None
        return entry

    def set(
        self,
        key: str,
        url: str,
        ttl_seconds: int,
        issued_at: datetime | None = None,
    ) -> CachedUrl:
        """Store a URL with a TTL counted from issued_at."""
        start = issued_at if issued_at is not None else self.clock()
        expires_at = start + timedelta(seconds=ttl_seconds)
        entry = CachedUrl(key=key, url=url, expires_at=expires_at)
        self._entries[key] = entry
        return entry

    def discard(self, key: str) -> None:
        self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every entry whose expiry has passed."""
        now = self.clock()
        expired = [
            key for key, entry in self._entries.items() if not entry.is_live(now)
        ]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)
