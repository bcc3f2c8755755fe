"""Storage quota checks and reporting."""

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from photo_vault.domain.errors import (
    QuotaExceededError,
    QuotaReadError,
    QuotaUpdateError,
)
from photo_vault.domain.photos import (
    FREE_STORAGE_LIMIT_BYTES,
    QuotaState,
    StorageSummary,
)

_logger = logging.getLogger(__name__)

_UNITS = ("B", "KB", "MB", "GB", "TB")


class QuotaLedger(Protocol):
    """Authoritative per-user storage usage."""

    def get_quota(self, owner_id: UUID) -> QuotaState:
        """Return the user's bytes used and premium flag."""

    def increment_quota(self, owner_id: UUID, delta: int) -> None:
        """Atomically add delta bytes to the user's total."""


@dataclass
class QuotaService:
    """Wraps the ledger with the free-tier policy."""

    ledger: QuotaLedger
    free_limit_bytes: int = FREE_STORAGE_LIMIT_BYTES

    async def get_quota(self, owner_id: UUID) -> QuotaState:
        """Read the current quota state."""
        try:
            state = await asyncio.to_thread(self.ledger.get_quota, owner_id)
        except Exception as exc:
            raise QuotaReadError(f"Could not read storage quota: {exc}") from exc
        return replace(state, free_limit_bytes=self.free_limit_bytes)

    async def check_batch(self, owner_id: UUID, total_bytes: int) -> QuotaState:
        """Admit or reject a whole batch against a single quota snapshot.

        The snapshot is not locked; concurrent sessions of the same user can
        each pass this check and jointly overshoot the free ceiling.
        """
        state = await self.get_quota(owner_id)
        if state.would_exceed(total_bytes):
            _logger.info(
                "Rejected batch for %s: used=%s requested=%s limit=%s",
                owner_id,
                state.storage_used_bytes,
                total_bytes,
                self.free_limit_bytes,
            )
            raise QuotaExceededError(
                used_bytes=state.storage_used_bytes,
                requested_bytes=total_bytes,
                limit_bytes=self.free_limit_bytes,
            )
        return state

    async def record_upload(self, owner_id: UUID, size_bytes: int) -> None:
        """Add a committed upload to the ledger."""
        try:
            await asyncio.to_thread(self.ledger.increment_quota, owner_id, size_bytes)
        except Exception as exc:
            raise QuotaUpdateError(
                f"Photo saved, but storage usage could not be updated: {exc}"
            ) from exc

    async def storage_summary(self, owner_id: UUID) -> StorageSummary:
        """Return a display-ready summary of the user's storage."""
        return summarize(await self.get_quota(owner_id))


def summarize(state: QuotaState) -> StorageSummary:
    limit_bytes = state.limit_bytes
    if limit_bytes is None:
        return StorageSummary(
            storage_used_bytes=state.storage_used_bytes,
            storage_used=format_storage_used(state.storage_used_bytes),
            limit="Unlimited",
            plan="Premium",
            percent_used=None,
        )
    percent = min(state.storage_used_bytes / limit_bytes * 100, 100.0)
    return StorageSummary(
        storage_used_bytes=state.storage_used_bytes,
        storage_used=format_storage_used(state.storage_used_bytes),
        limit=format_storage_used(limit_bytes),
        plan="Free",
        percent_used=round(percent, 2),
    )


def format_storage_used(size_bytes: int) -> str:
    """Format a byte count with binary units, e.g. 1536 -> '1.5 KB'."""
    value = float(max(size_bytes, 0))
    unit = _UNITS[0]
    for unit in _UNITS:
        if value < 1024 or unit == _UNITS[-1]:
            break
        value /= 1024
    if unit == "B":
        return f"{int(value)} B"
    formatted = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{formatted} {unit}"
