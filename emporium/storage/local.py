"""
In-memory storage implementation for development and tests.

Works without any external services. Data lives for the life of the
process.
"""

from __future__ import annotations

import copy
from typing import Any

from emporium.core.utils import generate_id
from emporium.storage.base import (
    Contains,
    DocumentStore,
    DuplicateKeyError,
    Filters,
)


class InMemoryDocumentStore(DocumentStore):
    """In-memory document storage."""

    def __init__(self):
        self._data: dict[str, dict[str, dict[str, Any]]] = {}
        self._unique: dict[str, set[str]] = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    @staticmethod
    def _matches(doc: dict[str, Any], filters: Filters | None) -> bool:
        if not filters:
            return True
        for key, expected in filters.items():
            value = doc.get(key)
            if isinstance(expected, Contains):
                if not expected.matches(value):
                    return False
            elif value != expected:
                return False
        return True

    def _check_unique(self, collection: str, doc: dict[str, Any]) -> None:
        for field in self._unique.get(collection, set()):
            value = doc.get(field)
            if value is None:
                continue
            for other in self._collection(collection).values():
                if other["id"] != doc["id"] and other.get(field) == value:
                    raise DuplicateKeyError(collection, field)

    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        results = [
            doc for doc in self._collection(collection).values()
            if self._matches(doc, filters)
        ]

        # Apply pagination
        end = None if limit is None else skip + limit
        return copy.deepcopy(results[skip:end])

    async def count(self, collection: str, filters: Filters | None = None) -> int:
        return sum(1 for doc in self._collection(collection).values() if self._matches(doc, filters))

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._collection(collection).get(id)
        return copy.deepcopy(doc) if doc is not None else None

    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        doc = {**copy.deepcopy(data), "id": generate_id()}
        self._check_unique(collection, doc)
        self._collection(collection)[doc["id"]] = doc
        return copy.deepcopy(doc)

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        current = self._collection(collection).get(id)
        if current is None:
            return None
        merged = {**current, **copy.deepcopy(updates), "id": id}
        self._check_unique(collection, merged)
        self._collection(collection)[id] = merged
        return copy.deepcopy(merged)

    async def append(self, collection: str, id: str, field: str, value: Any) -> dict[str, Any] | None:
        current = self._collection(collection).get(id)
        if current is None:
            return None
        current[field] = [*current.get(field, []), copy.deepcopy(value)]
        return copy.deepcopy(current)

    async def delete(self, collection: str, id: str) -> bool:
        return self._collection(collection).pop(id, None) is not None

    async def ensure_unique(self, collection: str, field: str) -> None:
        self._unique.setdefault(collection, set()).add(field)
