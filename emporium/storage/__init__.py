"""
Storage abstractions.

Backends:
- InMemoryDocumentStore → development and tests
- MongoDocumentStore → MongoDB (STORAGE_BACKEND=mongo)
"""

from __future__ import annotations

import logging

from emporium.config import Settings
from emporium.storage.base import (
    Collections,
    Contains,
    DocumentStore,
    DuplicateKeyError,
    Filters,
    StoreError,
)
from emporium.storage.local import InMemoryDocumentStore
from emporium.storage.mongo import MongoDocumentStore

logger = logging.getLogger(__name__)


async def create_storage(settings: Settings) -> DocumentStore:
    """Create the configured store and declare its unique fields."""
    if settings.storage_backend == "mongo":
        store: DocumentStore = MongoDocumentStore(settings.mongo_uri, settings.mongo_database)
    elif settings.storage_backend == "memory":
        store = InMemoryDocumentStore()
    else:
        raise ValueError(f"Unknown storage backend: {settings.storage_backend}")

    await store.ensure_unique(Collections.USERS, "username")
    await store.ensure_unique(Collections.USERS, "email")

    logger.info("Using %s storage backend", settings.storage_backend)
    return store


__all__ = [
    "Collections",
    "Contains",
    "DocumentStore",
    "DuplicateKeyError",
    "Filters",
    "StoreError",
    "InMemoryDocumentStore",
    "MongoDocumentStore",
    "create_storage",
]
