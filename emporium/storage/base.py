"""
Storage abstraction layer.

All persistence goes through the DocumentStore interface. This allows
swapping implementations (in-memory → MongoDB) without changing
application code.

Documents are plain dicts. Every stored document carries an "id" string
in the document ID format (see emporium.core.utils.generate_id).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


# =============================================================================
# Errors
# =============================================================================


class StoreError(Exception):
    """The backing store failed to complete an operation."""
    pass


class DuplicateKeyError(StoreError):
    """A write would violate a unique field."""

    def __init__(self, collection: str, field: str):
        self.collection = collection
        self.field = field
        super().__init__(f"Duplicate value for {collection}.{field}")


# =============================================================================
# Filters
# =============================================================================


@dataclass(frozen=True)
class Contains:
    """Case-insensitive literal substring match on a field."""

    text: str

    def matches(self, value: Any) -> bool:
        if value is None:
            return False
        return self.text.lower() in str(value).lower()


Filters = dict[str, Any]


# =============================================================================
# Storage Interface
# =============================================================================


class DocumentStore(ABC):
    """
    Storage for structured documents (users, items, orders).

    Filters map a field to either an exact value or a Contains matcher.
    Results come back in insertion order.

    Mongo Implementation: emporium.storage.mongo
    Local Implementation: emporium.storage.local (in-memory)
    """

    @abstractmethod
    async def find(
        self,
        collection: str,
        filters: Filters | None = None,
        skip: int = 0,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Query documents with optional filters and pagination."""
        pass

    @abstractmethod
    async def count(self, collection: str, filters: Filters | None = None) -> int:
        """Count documents matching the filters."""
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def create(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """Insert a document, return it with its new ID."""
        pass

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """Partial update of a document. Returns the updated document, or None if missing."""
        pass

    @abstractmethod
    async def append(self, collection: str, id: str, field: str, value: Any) -> dict[str, Any] | None:
        """Atomically append a value to a list field. Returns the updated document, or None if missing."""
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document."""
        pass

    @abstractmethod
    async def ensure_unique(self, collection: str, field: str) -> None:
        """Declare a field whose values must be unique within a collection."""
        pass

    async def find_one(self, collection: str, filters: Filters) -> dict[str, Any] | None:
        """Get the first document matching the filters."""
        results = await self.find(collection, filters, limit=1)
        return results[0] if results else None

    async def clear(self, collection: str) -> None:
        """Delete every document in a collection."""
        for doc in await self.find(collection):
            await self.delete(collection, doc["id"])

    async def close(self) -> None:
        """Release backend resources."""
        pass


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names."""

    USERS = "users"
    ITEMS = "items"
    ORDERS = "orders"
