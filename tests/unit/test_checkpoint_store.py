from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from checkpoint_hub.core.checkpoints.store import CheckpointStore
from checkpoint_hub.utils.exceptions import StoreException


@pytest.mark.asyncio
async def test_insert_assigns_id_and_equal_timestamps(db_session):
    store = CheckpointStore(db_session)

    row = await store.insert(owner_name="alice", payload="lvl3", owner_id="p-1")

    assert isinstance(row.id, int)
    assert row.created_at == row.last_edited_at
    assert row.owner_id == "p-1"


@pytest.mark.asyncio
async def test_owner_predicate_is_optional(db_session):
    store = CheckpointStore(db_session)
    mine = await store.insert(owner_name="alice", payload="a", owner_id="p-1")
    theirs = await store.insert(owner_name="bob", payload="b", owner_id="p-2")
    legacy = await store.insert(owner_name="old", payload="c", owner_id=None)

    assert [r.id for r in await store.list()] == [mine.id, theirs.id, legacy.id]
    assert [r.id for r in await store.list(owner_id="p-1")] == [mine.id]
    assert await store.list(owner_id="nobody") == []

    assert (await store.get(theirs.id)).owner_name == "bob"
    assert await store.get(theirs.id, owner_id="p-1") is None


@pytest.mark.asyncio
async def test_update_reports_rows_affected(db_session):
    store = CheckpointStore(db_session)
    row = await store.insert(owner_name="alice", payload="a", owner_id="p-1")

    assert await store.update(row.id, payload="b", owner_id="p-2") is False
    assert await store.update(row.id + 100, payload="b") is False
    assert await store.update(row.id, payload="b", owner_id="p-1") is True

    refreshed = await store.get(row.id)
    assert refreshed.payload == "b"
    assert refreshed.owner_name == "alice"
    assert refreshed.owner_id == "p-1"


@pytest.mark.asyncio
async def test_delete_reports_rows_affected(db_session):
    store = CheckpointStore(db_session)
    row = await store.insert(owner_name="alice", payload="a", owner_id="p-1")

    assert await store.delete(row.id, owner_id="p-2") is False
    assert await store.delete(row.id) is True
    assert await store.delete(row.id) is False
    assert await store.get(row.id) is None


@pytest.mark.asyncio
async def test_ids_are_not_reused_after_delete(db_session):
    store = CheckpointStore(db_session)
    first = await store.insert(owner_name="a", payload="x", owner_id=None)
    second = await store.insert(owner_name="b", payload="y", owner_id=None)
    await store.delete(second.id)

    third = await store.insert(owner_name="c", payload="z", owner_id=None)

    assert third.id > second.id > first.id


@pytest.mark.asyncio
async def test_backend_failure_is_wrapped_and_rolled_back():
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    store = CheckpointStore(session)

    with pytest.raises(StoreException) as excinfo:
        await store.get(1)

    assert excinfo.value.status_code == 500
    assert "connection refused" not in excinfo.value.message
    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_commit_failure_on_insert_is_wrapped():
    session = AsyncMock()
    session.add = lambda obj: None
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk I/O error"))
    store = CheckpointStore(session)

    with pytest.raises(StoreException):
        await store.insert(owner_name="a", payload="b", owner_id=None)

    session.rollback.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_failure_is_wrapped_and_rolled_back():
    session = AsyncMock()
    session.execute.side_effect = OperationalError("UPDATE", {}, Exception("database is locked"))
    store = CheckpointStore(session)

    with pytest.raises(StoreException) as excinfo:
        await store.update(1, payload="x", owner_id="p-1")

    assert excinfo.value.details == {"operation": "update"}
    assert "locked" not in excinfo.value.message
    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_commit_failure_is_wrapped_and_rolled_back():
    session = AsyncMock()
    session.commit.side_effect = OperationalError("DELETE", {}, Exception("disk I/O error"))
    store = CheckpointStore(session)

    with pytest.raises(StoreException) as excinfo:
        await store.delete(1)

    assert excinfo.value.details == {"operation": "delete"}
    session.rollback.assert_awaited_once()
