"""JSON file persistence for the upload cache."""

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from photo_vault.domain.photos import CachedUrl
from photo_vault.services.upload_cache import UploadCacheStore

NAMESPACE = "photo_vault.uploaded_files"

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileUploadCacheStore(UploadCacheStore):
    """Stores upload cache entries under one namespaced key of a JSON file."""

    path: Path

    def load(self) -> list[CachedUrl]:
        """Read entries, treating a missing or unreadable file as empty."""
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            _logger.warning("Ignoring unreadable upload cache at %s", self.path)
            return []
        rows = payload.get(NAMESPACE, []) if isinstance(payload, dict) else []
        entries: list[CachedUrl] = []
        for row in rows:
            entry = _parse_row(row)
            if entry is not None:
                entries.append(entry)
        return entries

    def save(self, entries: Iterable[CachedUrl]) -> None:
        """Write entries, keeping any other namespaces in the file."""
        payload: dict[str, object] = {}
        if self.path.exists():
            try:
                existing = json.loads(self.path.read_text(encoding="utf-8"))
            except (OSError, ValueError):
                existing = {}
            if isinstance(existing, dict):
                payload = existing
        payload[NAMESPACE] = [
            {
                "key": entry.key,
                "url": entry.url,
                "expires_at": entry.expires_at.isoformat(),
            }
            for entry in entries
        ]
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def _parse_row(row: object) -> CachedUrl | None:
    if not isinstance(row, dict):
        return None
    key = row.get("key")
    url = row.get("url")
    expires_raw = row.get("expires_at")
    if not isinstance(key, str) or not isinstance(url, str):
        return None
    if not isinstance(expires_raw, str):
        return None
    try:
        expires_at = datetime.fromisoformat(expires_raw)
    except ValueError:
        return None
    return CachedUrl(key=key, url=url, expires_at=expires_at)
