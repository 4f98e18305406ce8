"""
Order operations: placing orders and expanding their client reference.
"""

from __future__ import annotations

import logging
from typing import Any

from emporium.auth.context import Identity
from emporium.core.errors import BadRequest
from emporium.core.models import OrderCreate, OrderLine, OrderStatus, UserPublic
from emporium.core.utils import utc_now
from emporium.storage import Collections, DocumentStore, StoreError

logger = logging.getLogger(__name__)


async def compute_total(store: DocumentStore, lines: list[OrderLine]) -> float:
    """Sum of price × quantity over the referenced items."""
    total = 0.0
    for line in lines:
        item = await store.get(Collections.ITEMS, line.item)
        if item is None:
            raise BadRequest(f"Item not found: {line.item}")
        total += float(item.get("price", 0)) * line.quantity
    return round(total, 2)


async def place_order(store: DocumentStore, identity: Identity, data: OrderCreate) -> dict[str, Any]:
    """
    Create an order for the calling client.

    The client is always the caller, the status starts as Created, and the
    date defaults to now. A missing total is computed from the items.
    The new order id is appended to the client's orders list.
    """
    fields = data.model_dump()
    try:
        if data.total is None:
            fields["total"] = await compute_total(store, data.items_order)
        fields["date"] = data.date or utc_now()
        fields["status"] = OrderStatus.CREATED.value
        fields["client"] = identity.id
        order = await store.create(Collections.ORDERS, fields)

        await store.append(Collections.USERS, identity.id, "orders", order["id"])
    except StoreError:
        logger.exception("Failed to place order for %s", identity.username)
        raise BadRequest()

    logger.info("Order %s placed by %s (total %.2f)", order["id"], identity.username, order["total"])
    return order


async def with_client(store: DocumentStore, order: dict[str, Any]) -> dict[str, Any]:
    """Replace the client id with the public user document, when it still exists."""
    client_id = order.get("client")
    if not client_id:
        return order
    user = await store.get(Collections.USERS, client_id)
    if user is None:
        return order
    return {**order, "client": UserPublic.model_validate(user).model_dump()}
