"""Table-style access to the MongoDB collections.

Handlers and services talk to :class:`RecordStore` instead of raw Motor
collections so that every driver failure surfaces as a
:class:`~staffdesk.core.errors.StoreError` and every row comes back as a
plain dict with a string ``id``.
"""
from typing import Any, Iterable, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from staffdesk.core.errors import ConflictError, NotFoundError, StoreReadError, StoreWriteError


Order = Iterable[tuple[str, int]]


def parse_object_id(value: str, what: str = "Record") -> ObjectId:
    """Convert a path id to an ObjectId; malformed ids are reported as missing."""
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(str(value)):
        raise NotFoundError(f"{what} not found")
    return ObjectId(str(value))


def to_row(doc: Optional[dict]) -> Optional[dict]:
    if doc is None:
        return None
    row: dict[str, Any] = {}
    for key, value in doc.items():
        if key == "_id":
            row["id"] = str(value)
        elif isinstance(value, ObjectId):
            row[key] = str(value)
        else:
            row[key] = value
    return row


class RecordStore:
    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self.db = db

    def collection(self, table: str) -> AsyncIOMotorCollection:
        return self.db[table]

    async def create(self, table: str, fields: dict) -> dict:
        doc = dict(fields)
        try:
            res = await self.collection(table).insert_one(doc)
        except DuplicateKeyError as exc:
            raise ConflictError("Record already exists") from exc
        except PyMongoError as exc:
            raise StoreWriteError() from exc
        doc["_id"] = res.inserted_id
        return to_row(doc)

    async def select(
        self,
        table: str,
        filter: Optional[dict] = None,
        order: Optional[Order] = None,
        limit: Optional[int] = None,
    ) -> list[dict]:
        try:
            cursor = self.collection(table).find(filter or {})
            if order:
                cursor = cursor.sort(list(order))
            if limit:
                cursor = cursor.limit(limit)
            return [to_row(doc) async for doc in cursor]
        except PyMongoError as exc:
            raise StoreReadError() from exc

    async def select_one(self, table: str, filter: dict) -> Optional[dict]:
        try:
            doc = await self.collection(table).find_one(filter)
        except PyMongoError as exc:
            raise StoreReadError() from exc
        return to_row(doc)

    async def count(self, table: str, filter: Optional[dict] = None) -> int:
        try:
            return await self.collection(table).count_documents(filter or {})
        except PyMongoError as exc:
            raise StoreReadError() from exc

    async def update(self, table: str, fields: dict, filter: dict) -> Optional[dict]:
        """Apply ``$set`` to the first row matching ``filter``; ``None`` when nothing matched."""
        try:
            doc = await self.collection(table).find_one_and_update(
                filter,
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise ConflictError("Record already exists") from exc
        except PyMongoError as exc:
            raise StoreWriteError() from exc
        return to_row(doc)

    async def delete(self, table: str, filter: dict) -> int:
        try:
            res = await self.collection(table).delete_one(filter)
        except PyMongoError as exc:
            raise StoreWriteError() from exc
        return res.deleted_count
