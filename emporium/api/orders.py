"""
Order routes.

Clients place orders; Admins read, edit and delete them. Status changes
are unconstrained: an Admin may set either status at any time.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Response

from emporium.api.deps import get_store, json_body
from emporium.auth.context import Identity
from emporium.auth.policies import require_roles
from emporium.core.errors import BadRequest, NotFound, ServerError
from emporium.core.models import Order, OrderCreate, OrderStatusUpdate, OrderUpdate, Role
from emporium.services.orders import place_order, with_client
from emporium.services.records import delete_record, load_record
from emporium.storage import Collections, DocumentStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])

admin_only = require_roles(Role.ADMIN)


async def _apply(store: DocumentStore, order_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    await load_record(store, Collections.ORDERS, order_id, "Order")
    try:
        order = await store.update(Collections.ORDERS, order_id, updates)
    except StoreError:
        logger.exception("Failed to update order %s", order_id)
        raise BadRequest()
    if order is None:
        raise NotFound("Order not found")
    return order


@router.post("", response_model=Order, status_code=201)
async def create_order(
    identity: Identity = Depends(require_roles(Role.CLIENT)),
    data: OrderCreate = Depends(json_body(OrderCreate)),
    store: DocumentStore = Depends(get_store),
):
    order = await place_order(store, identity, data)
    return Order.model_validate(order)


@router.get("", response_model=list[Order], dependencies=[Depends(admin_only)])
async def list_orders(store: DocumentStore = Depends(get_store)):
    """All orders, each with its client expanded."""
    try:
        orders = await store.find(Collections.ORDERS)
        return [Order.model_validate(await with_client(store, order)) for order in orders]
    except StoreError:
        logger.exception("Failed to list orders")
        raise ServerError()


@router.get("/{order_id}", response_model=Order, dependencies=[Depends(admin_only)])
async def get_order(order_id: str, store: DocumentStore = Depends(get_store)):
    order = await load_record(store, Collections.ORDERS, order_id, "Order")
    try:
        return Order.model_validate(await with_client(store, order))
    except StoreError:
        logger.exception("Failed to load client of order %s", order_id)
        raise ServerError()


@router.put("/{order_id}", response_model=Order, dependencies=[Depends(admin_only)])
async def update_order(
    order_id: str,
    data: OrderUpdate = Depends(json_body(OrderUpdate)),
    store: DocumentStore = Depends(get_store),
):
    """Set any supplied order fields."""
    order = await _apply(store, order_id, data.model_dump(exclude_unset=True, exclude_none=True))
    return Order.model_validate(order)


@router.patch("/{order_id}", response_model=Order, dependencies=[Depends(admin_only)])
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate = Depends(json_body(OrderStatusUpdate)),
    store: DocumentStore = Depends(get_store),
):
    order = await _apply(store, order_id, {"status": data.status})
    return Order.model_validate(order)


@router.delete("/{order_id}", status_code=204, response_class=Response, dependencies=[Depends(admin_only)])
async def delete_order(order_id: str, store: DocumentStore = Depends(get_store)):
    await delete_record(store, Collections.ORDERS, order_id, "Order")
    return Response(status_code=204)
