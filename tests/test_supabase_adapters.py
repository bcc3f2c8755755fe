"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field
from uuid import UUID, uuid4

import pytest

from photo_vault.adapters.supabase_photo_repository import SupabasePhotoRepository
from photo_vault.adapters.supabase_quota_ledger import SupabaseQuotaLedger


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeRpc:
    calls: list[tuple[str, dict[str, object]]]
    name: str
    params: dict[str, object]

    def execute(self) -> FakeResponse:
        self.calls.append((self.name, self.params))
        return FakeResponse(data=[])


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)
    rpc_calls: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]

    def rpc(self, name: str, params: dict[str, object]) -> FakeRpc:
        return FakeRpc(calls=self.rpc_calls, name=name, params=params)


def _photo_row(photo_id: str, user_id: str) -> dict[str, object]:
    return {
        "id": photo_id,
        "user_id": user_id,
        "s3_key": f"{user_id}/1714564800000-beach.jpg",
        "filename": "beach.jpg",
        "size": 2048,
        "mime_type": "image/jpeg",
        "created_at": "2024-05-01T12:00:00+00:00",
        "metadata": {},
    }


def test_supabase_photo_repository_insert() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("photos")
    photo_id = str(uuid4())
    user_id = uuid4()
    photos_table.queue("insert", [_photo_row(photo_id, str(user_id))])

    repository = SupabasePhotoRepository(client)
    created = repository.insert_photo(
        owner_id=user_id,
        storage_key=f"{user_id}/1714564800000-beach.jpg",
        filename="beach.jpg",
        size_bytes=2048,
        mime_type="image/jpeg",
        metadata={},
    )

    assert created.id == UUID(photo_id)
    assert created.size_bytes == 2048
    assert created.created_at.year == 2024
    assert photos_table.last_payload == {
        "user_id": str(user_id),
        "s3_key": f"{user_id}/1714564800000-beach.jpg",
        "filename": "beach.jpg",
        "size": 2048,
        "mime_type": "image/jpeg",
        "metadata": {},
    }


def test_supabase_photo_repository_insert_without_row_raises() -> None:
    repository = SupabasePhotoRepository(FakeSupabaseClient())

    with pytest.raises(RuntimeError):
        repository.insert_photo(
            owner_id=uuid4(),
            storage_key="k",
            filename="a.jpg",
            size_bytes=1,
            mime_type="image/jpeg",
            metadata={},
        )


def test_supabase_photo_repository_list_and_get() -> None:
    client = FakeSupabaseClient()
    photos_table = client.table("photos")
    user_id = str(uuid4())
    photo_id = str(uuid4())
    photos_table.queue("select", [_photo_row(photo_id, user_id)])
    photos_table.queue("select", [_photo_row(photo_id, user_id)])
    photos_table.queue("select", [])

    repository = SupabasePhotoRepository(client)
    listed = repository.list_by_owner(UUID(user_id))
    fetched = repository.get_photo(UUID(photo_id))
    missing = repository.get_photo(uuid4())

    assert [photo.id for photo in listed] == [UUID(photo_id)]
    assert photos_table.last_order == ("created_at", True)
    assert fetched is not None
    assert fetched.storage_key.endswith("-beach.jpg")
    assert missing is None


def test_supabase_photo_repository_delete() -> None:
    client = FakeSupabaseClient()
    photo_id = uuid4()

    SupabasePhotoRepository(client).delete_photo(photo_id)

    assert client.tables["photos"].last_filters == [("id", str(photo_id))]


def test_supabase_quota_ledger_reads_storage_row() -> None:
    client = FakeSupabaseClient()
    client.table("user_storage").queue(
        "select", [{"storage_used": 4_900_000_000, "is_premium": False}]
    )

    state = SupabaseQuotaLedger(client).get_quota(uuid4())

    assert state.storage_used_bytes == 4_900_000_000
    assert state.is_premium is False


def test_supabase_quota_ledger_missing_row_raises() -> None:
    with pytest.raises(RuntimeError):
        SupabaseQuotaLedger(FakeSupabaseClient()).get_quota(uuid4())


def test_supabase_quota_ledger_increments_through_rpc() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()

    SupabaseQuotaLedger(client).increment_quota(user_id, 2048)

    assert client.rpc_calls == [
        ("increment_storage_used", {"user_id": str(user_id), "size_increment": 2048})
    ]
