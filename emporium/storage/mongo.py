"""
MongoDB storage implementation.

Uses the asyncio client that ships with pymongo. Document IDs are stored
as ObjectId in "_id" and exposed as "id" strings; references between
documents (owner, client, orders) are stored as id strings.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from bson import ObjectId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError
from pymongo.errors import PyMongoError

from emporium.storage.base import (
    Contains,
    DocumentStore,
    DuplicateKeyError,
    Filters,
    StoreError,
)

logger = logging.getLogger(__name__)


def _to_query(filters: Filters | None) -> dict[str, Any]:
    query: dict[str, Any] = {}
    for key, expected in (filters or {}).items():
        if key == "id":
            query["_id"] = ObjectId(expected)
        elif isinstance(expected, Contains):
            query[key] = {"$regex": re.escape(expected.text), "$options": "i"}
        else:
            query[key] = expected
    return query


def _from_mongo(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    if doc is None:
        return None
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id"))
    return doc


def _duplicate(collection: str, error: MongoDuplicateKeyError) -> DuplicateKeyError:
    key_pattern = (error.details or {}).get("keyPattern") or {}
    field = next(iter(key_pattern), "unknown")
    return DuplicateKeyError(collection, field)


class MongoDocumentStore(DocumentStore):
    """Document storage backed by a MongoDB database."""

    def __init__(self, uri: str, database: str):
        # Aware datetimes, matching the in-memory store
        self._client: AsyncMongoClient = AsyncMongoClient(uri, tz_aware=True)
        self._db = self._client[database]

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        try:
            cursor = self._db[collection].find(_to_query(filters)).sort("_id", 1).skip(skip)
            if limit is not None:
                cursor = cursor.limit(limit)
            return [_from_mongo(doc) async for doc in cursor]
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def count(self, collection: str, filters: Filters | None = None) -> int:
        try:
            return await self._db[collection].count_documents(_to_query(filters))
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        try:
            return _from_mongo(await self._db[collection].find_one({"_id": ObjectId(id)}))
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        doc = {k: v for k, v in data.items() if k != "id"}
        try:
            result = await self._db[collection].insert_one(doc)
        except MongoDuplicateKeyError as e:
            raise _duplicate(collection, e) from e
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return _from_mongo({**doc, "_id": result.inserted_id})

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        updates = {k: v for k, v in updates.items() if k != "id"}
        if not updates:
            return await self.get(collection, id)
        try:
            doc = await self._db[collection].find_one_and_update(
                {"_id": ObjectId(id)},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except MongoDuplicateKeyError as e:
            raise _duplicate(collection, e) from e
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return _from_mongo(doc)

    async def append(self, collection: str, id: str, field: str, value: Any) -> dict[str, Any] | None:
        try:
            doc = await self._db[collection].find_one_and_update(
                {"_id": ObjectId(id)},
                {"$push": {field: value}},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return _from_mongo(doc)

    async def delete(self, collection: str, id: str) -> bool:
        try:
            result = await self._db[collection].delete_one({"_id": ObjectId(id)})
        except PyMongoError as e:
            raise StoreError(str(e)) from e
        return result.deleted_count > 0

    async def ensure_unique(self, collection: str, field: str) -> None:
        try:
            await self._db[collection].create_index(field, unique=True)
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def clear(self, collection: str) -> None:
        try:
            await self._db[collection].delete_many({})
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    async def close(self) -> None:
        await self._client.close()
        logger.info("MongoDB connection closed")
