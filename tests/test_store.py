import asyncio

import pytest
from bson import ObjectId

from staffdesk.core.errors import ConflictError, NotFoundError
from staffdesk.db.store import RecordStore, parse_object_id


def test_rows_use_string_ids(db):
    store = RecordStore(db)
    owner = ObjectId()
    row = asyncio.run(store.create("documents", {"user_id": owner, "file_name": "a.pdf"}))
    assert isinstance(row["id"], str)
    assert row["user_id"] == str(owner)
    assert "_id" not in row


def test_update_returns_new_row_or_none(db):
    store = RecordStore(db)
    row = asyncio.run(store.create("leave_requests", {"status": "pending"}))
    oid = ObjectId(row["id"])

    updated = asyncio.run(store.update("leave_requests", {"status": "approved"}, {"_id": oid, "status": "pending"}))
    assert updated["status"] == "approved"
    again = asyncio.run(store.update("leave_requests", {"status": "rejected"}, {"_id": oid, "status": "pending"}))
    assert again is None


def test_unique_index_violation_is_a_conflict(db):
    store = RecordStore(db)
    with pytest.raises(ConflictError):
        asyncio.run(store.create("roles", {"name": "admin"}))


def test_parse_object_id():
    oid = ObjectId()
    assert parse_object_id(str(oid)) == oid
    with pytest.raises(NotFoundError):
        parse_object_id("123")


def test_delete_reports_how_many_rows_went(db):
    store = RecordStore(db)
    row = asyncio.run(store.create("documents", {"file_name": "a.pdf"}))
    oid = ObjectId(row["id"])
    assert asyncio.run(store.delete("documents", {"_id": oid})) == 1
    assert asyncio.run(store.delete("documents", {"_id": oid})) == 0
    assert asyncio.run(store.select_one("documents", {"_id": oid})) is None
