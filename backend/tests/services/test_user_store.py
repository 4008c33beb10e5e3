"""User Store: verifies fetch and upsert against SQLite and against injected faults.

Invariants:
    - Fetching an id never upserted raises UserNotFoundError
    - Upsert-then-fetch returns all four fields unchanged
    - Upsert replaces the stored document; unspecified stored keys do not survive
    - Any collection fault surfaces as StorageError chained to its cause
"""

import asyncio
import logging

import pytest
from sqlalchemy import select

from userkit.core.errors import ErrorKind, StorageError, UserNotFoundError
from userkit.models.document import Document
from userkit.schemas.user import UserRecord
from userkit.services.user_store import UserStore


def _record(**overrides) -> UserRecord:
    fields = {
        "id": "u1",
        "email": "ada@example.com",
        "firstname": "Ada",
        "lastname": "Lovelace",
    }
    fields.update(overrides)
    return UserRecord(**fields)


# ─── SQLite-backed ───────────────────────────────────────────────

async def test_fetch_missing_user_raises_not_found(sql_store):
    with pytest.raises(UserNotFoundError) as exc:
        await sql_store.fetch_user_by_id("nobody")
    assert exc.value.kind is ErrorKind.NOT_FOUND
    assert exc.value.context.user_id == "nobody"


async def test_upsert_then_fetch_round_trips_all_fields(sql_store):
    record = _record()
    await sql_store.upsert_user_by_id(record)

    fetched = await sql_store.fetch_user_by_id("u1")

    assert fetched == record


async def test_second_upsert_replaces_fields(sql_store):
    await sql_store.upsert_user_by_id(_record())
    await sql_store.upsert_user_by_id(_record(email="ada@new.example", lastname="King"))

    fetched = await sql_store.fetch_user_by_id("u1")

    assert fetched.email == "ada@new.example"
    assert fetched.lastname == "King"
    assert fetched.firstname == "Ada"


async def test_concurrent_first_upserts_of_same_id_all_succeed(sql_store, db_manager):
    records = [_record(email=f"u1-{i}@example.com") for i in range(8)]

    results = await asyncio.gather(
        *(sql_store.upsert_user_by_id(r) for r in records), return_exceptions=True,
    )

    assert [r for r in results if isinstance(r, Exception)] == []
    fetched = await sql_store.fetch_user_by_id("u1")
    assert fetched.email in {r.email for r in records}
    async with db_manager.session() as db:
        rows = (await db.execute(select(Document))).scalars().all()
    assert [r.doc_id for r in rows] == ["u1"]


async def test_session_storage_error_carries_record_address(sql_store, db_manager):
    async with db_manager.engine.begin() as conn:
        await conn.exec_driver_sql("DROP TABLE documents")

    with pytest.raises(StorageError) as exc:
        await sql_store.upsert_user_by_id(_record(id="u7"))

    context = exc.value.to_response()["error"]["context"]
    assert context["user_id"] == "u7"
    assert (context["domain"], context["subdomain"]) == ("user", "info")


async def test_lookup_is_exact_match(sql_store):
    await sql_store.upsert_user_by_id(_record(id="Alice"))
    with pytest.raises(UserNotFoundError):
        await sql_store.fetch_user_by_id("alice")
    with pytest.raises(UserNotFoundError):
        await sql_store.fetch_user_by_id("Ali")


async def test_upsert_writes_exactly_one_document(sql_store, db_manager):
    await sql_store.upsert_user_by_id(_record(id="a"))
    await sql_store.upsert_user_by_id(_record(id="b"))
    await sql_store.upsert_user_by_id(_record(id="a", email="a2@example.com"))

    async with db_manager.session() as db:
        rows = (await db.execute(select(Document))).scalars().all()

    assert sorted(r.doc_id for r in rows) == ["a", "b"]
    assert {(r.domain, r.subdomain) for r in rows} == {("user", "info")}


async def test_stored_body_holds_only_record_fields(sql_store, db_manager):
    await sql_store.upsert_user_by_id(_record())

    async with db_manager.session() as db:
        row = await db.get(Document, ("user", "info", "u1"))

    assert row.body == {
        "id": "u1",
        "email": "ada@example.com",
        "firstname": "Ada",
        "lastname": "Lovelace",
    }


async def test_collections_are_isolated(db_manager):
    users = UserStore(db_manager)
    archive = UserStore(db_manager, domain="user", subdomain="archive")
    await archive.upsert_user_by_id(_record())

    with pytest.raises(UserNotFoundError):
        await users.fetch_user_by_id("u1")
    assert (await archive.fetch_user_by_id("u1")).id == "u1"


async def test_missing_table_raises_storage_error(tmp_path):
    from userkit.infrastructure.database import DatabaseSessionManager

    manager = DatabaseSessionManager(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        with pytest.raises(StorageError) as exc:
            await UserStore(manager).fetch_user_by_id("u1")
        assert exc.value.kind is ErrorKind.STORAGE_ERROR
    finally:
        await manager.close()


# ─── Fault injection ─────────────────────────────────────────────

async def test_fetch_uses_user_info_collection(fake_store, fake_collections):
    fake_collections.docs[(("user", "info"), "u1")] = _record().to_document()

    await fake_store.fetch_user_by_id("u1")

    assert fake_collections.calls == [("find_one", ("user", "info"), "u1")]


async def test_fetch_ignores_extra_stored_keys(fake_store, fake_collections):
    doc = _record().to_document() | {"_id": "abc123", "legacy": True}
    fake_collections.docs[(("user", "info"), "u1")] = doc

    assert await fake_store.fetch_user_by_id("u1") == _record()


async def test_fetch_fault_maps_to_storage_error(fake_store, fake_collections):
    cause = ConnectionError("store unreachable")
    fake_collections.fail_with = cause

    with pytest.raises(StorageError) as exc:
        await fake_store.fetch_user_by_id("u1")

    assert exc.value.operation == "fetch"
    assert exc.value.__cause__ is cause


async def test_unreachable_store_maps_to_storage_error(fake_store, fake_collections):
    fake_collections.unreachable = TimeoutError()

    with pytest.raises(StorageError) as exc:
        await fake_store.fetch_user_by_id("u1")

    assert "TimeoutError" in exc.value.message


async def test_malformed_stored_document_maps_to_storage_error(fake_store, fake_collections):
    fake_collections.docs[(("user", "info"), "u1")] = {"id": "u1", "email": "x"}

    with pytest.raises(StorageError) as exc:
        await fake_store.fetch_user_by_id("u1")

    assert exc.value.kind is ErrorKind.STORAGE_ERROR
    assert exc.value.context.user_id == "u1"


async def test_storage_error_from_collection_propagates_unchanged(fake_store, fake_collections):
    original = StorageError("Connection or operational error", "execute")
    fake_collections.fail_with = original

    with pytest.raises(StorageError) as exc:
        await fake_store.upsert_user_by_id(_record())

    assert exc.value is original
    assert exc.value.to_response()["error"]["context"] == {
        "user_id": "u1", "domain": "user", "subdomain": "info", "operation": "execute",
    }


async def test_upsert_fault_maps_to_storage_error_and_logs(fake_store, fake_collections, caplog):
    fake_collections.fail_with = OSError("disk full")

    with caplog.at_level(logging.ERROR, logger="userkit.services.user_store"):
        with pytest.raises(StorageError) as exc:
            await fake_store.upsert_user_by_id(_record())

    assert exc.value.operation == "upsert"
    assert isinstance(exc.value.__cause__, OSError)
    assert any(getattr(r, "user_id", None) == "u1" for r in caplog.records)


async def test_not_found_is_not_logged_as_error(fake_store, caplog):
    with caplog.at_level(logging.ERROR, logger="userkit.services.user_store"):
        with pytest.raises(UserNotFoundError):
            await fake_store.fetch_user_by_id("u1")

    assert caplog.records == []
