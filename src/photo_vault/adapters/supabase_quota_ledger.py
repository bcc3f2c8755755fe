"""Supabase-backed storage quota ledger."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from photo_vault.domain.photos import QuotaState
from photo_vault.services.quota import QuotaLedger


@dataclass
class SupabaseQuotaLedger(QuotaLedger):
    """Reads the user_storage table and increments it through an RPC."""

    client: Client

    def get_quota(self, owner_id: UUID) -> QuotaState:
        """Return storage usage for a user."""
        response = (
            self.client.table("user_storage")
            .select("storage_used, is_premium")
            .eq("user_id", str(owner_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            raise RuntimeError(f"No storage row for user {owner_id}")
        row = response.data[0]
        return QuotaState(
            storage_used_bytes=int(row.get("storage_used") or 0),
            is_premium=bool(row.get("is_premium", False)),
        )

    def increment_quota(self, owner_id: UUID, delta: int) -> None:
        """Atomically add delta bytes to the user's total."""
        self.client.rpc(
            "increment_storage_used",
            {"user_id": str(owner_id), "size_increment": delta},
        ).execute()
