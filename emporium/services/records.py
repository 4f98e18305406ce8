"""
Record lookups shared by the resource handlers.
"""

from __future__ import annotations

import logging
from typing import Any

from emporium.core.errors import BadRequest, NotFound, ServerError
from emporium.core.utils import is_valid_id
from emporium.storage import DocumentStore, StoreError

logger = logging.getLogger(__name__)


def check_id(id: str) -> str:
    """Reject ids that are not in the document ID format."""
    if not is_valid_id(id):
        raise BadRequest("Invalid id")
    return id


async def load_record(store: DocumentStore, collection: str, id: str, label: str) -> dict[str, Any]:
    """
    Fetch a document by id or fail with the matching API error.

    Raises:
        BadRequest: malformed id
        NotFound: "<label> not found"
        ServerError: the store failed
    """
    check_id(id)
    try:
        doc = await store.get(collection, id)
    except StoreError:
        logger.exception("Failed to load %s %s", collection, id)
        raise ServerError()
    if doc is None:
        raise NotFound(f"{label} not found")
    return doc


async def delete_record(store: DocumentStore, collection: str, id: str, label: str) -> None:
    """Delete a document by id, 404 when it does not exist."""
    check_id(id)
    try:
        deleted = await store.delete(collection, id)
    except StoreError:
        logger.exception("Failed to delete %s %s", collection, id)
        raise ServerError()
    if not deleted:
        raise NotFound(f"{label} not found")
