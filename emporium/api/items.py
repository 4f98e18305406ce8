"""
Item routes.

Anyone may browse items. Admins and Owners may create them; the creator
becomes the owner. Only the owner (or an Admin) may update or delete.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response

from emporium.api.deps import get_store, json_body
from emporium.auth.context import Identity
from emporium.auth.policies import require_item_owner, require_roles
from emporium.core.errors import BadRequest, NotFound, ServerError
from emporium.core.models import Item, ItemCreate, ItemPage, ItemUpdate, Role
from emporium.services.listing import paginate, parse_page_params, search_filter
from emporium.services.records import delete_record, load_record
from emporium.storage import Collections, DocumentStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/items", tags=["items"])


@router.get("", response_model=ItemPage)
async def list_items(
    q: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    store: DocumentStore = Depends(get_store),
):
    """List items, optionally searching by name, one page at a time."""
    params = parse_page_params(page, limit)
    try:
        result = await paginate(store, Collections.ITEMS, search_filter("name", q), params)
    except StoreError:
        logger.exception("Failed to list items")
        raise ServerError()

    return ItemPage(
        items=[Item.model_validate(doc) for doc in result.results],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_count=result.total_count,
    )


@router.post("", response_model=Item, status_code=201)
async def create_item(
    identity: Identity = Depends(require_roles(Role.ADMIN, Role.OWNER)),
    data: ItemCreate = Depends(json_body(ItemCreate)),
    store: DocumentStore = Depends(get_store),
):
    """Create an item owned by the caller. Any owner in the body is ignored."""
    fields = data.model_dump()
    fields["owner"] = identity.id
    try:
        item = await store.create(Collections.ITEMS, fields)
    except StoreError:
        logger.exception("Failed to create item for %s", identity.username)
        raise BadRequest()
    return Item.model_validate(item)


@router.get("/{item_id}", response_model=Item)
async def get_item(item_id: str, store: DocumentStore = Depends(get_store)):
    item = await load_record(store, Collections.ITEMS, item_id, "Item")
    return Item.model_validate(item)


@router.put("/{item_id}", response_model=Item, status_code=203)
async def update_item(
    item_id: str,
    item: dict[str, Any] = Depends(require_item_owner),
    data: ItemUpdate = Depends(json_body(ItemUpdate)),
    store: DocumentStore = Depends(get_store),
):
    """Update an item. The owner never changes through this route."""
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    updates["owner"] = item["owner"]
    try:
        updated = await store.update(Collections.ITEMS, item_id, updates)
    except StoreError:
        logger.exception("Failed to update item %s", item_id)
        raise BadRequest()

    if updated is None:
        raise NotFound("Item not found")
    return Item.model_validate(updated)


@router.delete("/{item_id}", status_code=204, response_class=Response, dependencies=[Depends(require_item_owner)])
async def delete_item(item_id: str, store: DocumentStore = Depends(get_store)):
    await delete_record(store, Collections.ITEMS, item_id, "Item")
    return Response(status_code=204)
