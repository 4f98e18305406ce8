"""
Sample data for development databases.

Wipes users, items and orders, then inserts two users, two items and one
order whose total matches its line items.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from emporium.auth.passwords import PasswordHasher
from emporium.core.models import OrderStatus, Role, UserCreate
from emporium.core.utils import utc_now
from emporium.services.users import create_user
from emporium.storage import Collections, DocumentStore

logger = logging.getLogger(__name__)


SAMPLE_USERS = [
    {
        "username": "user1",
        "fullname": "User One",
        "email": "user1@example.com",
        "password": "password1",
        "role": Role.ADMIN,
        "is_active": True,
    },
    {
        "username": "user2",
        "fullname": "User Two",
        "email": "user2@example.com",
        "password": "password2",
        "role": Role.OWNER,
        "is_active": True,
    },
]

SAMPLE_ITEMS = [
    {
        "name": "Item 1",
        "price": 9.99,
        "description": "Description for Item 1",
        "quantity": 10,
        "image": None,
    },
    {
        "name": "Item 2",
        "price": 19.99,
        "description": "Description for Item 2",
        "quantity": 5,
        "image": None,
    },
]


async def seed_database(
    store: DocumentStore,
    hasher: PasswordHasher,
    rng: random.Random | None = None,
) -> dict[str, int]:
    """
    Replace all data with the sample set.

    Returns:
        Dict with counts of each collection seeded
    """
    rng = rng or random.Random()

    for collection in (Collections.USERS, Collections.ITEMS, Collections.ORDERS):
        await store.clear(collection)

    users = [await create_user(store, hasher, UserCreate(**data)) for data in SAMPLE_USERS]
    admin, owner = users

    items = [
        await store.create(Collections.ITEMS, {**data, "owner": owner["id"]})
        for data in SAMPLE_ITEMS
    ]

    lines: list[dict[str, Any]] = []
    total = 0.0
    for item in items:
        quantity = rng.randint(1, 5)
        lines.append({"item": item["id"], "quantity": quantity})
        total += item["price"] * quantity

    order = await store.create(Collections.ORDERS, {
        "date": utc_now(),
        "description": "Sample order",
        "status": OrderStatus.CREATED.value,
        "client": admin["id"],
        "total": round(total, 2),
        "items_order": lines,
    })
    await store.append(Collections.USERS, admin["id"], "orders", order["id"])

    counts = {"users": len(users), "items": len(items), "orders": 1}
    logger.info("Database seeded: %s", counts)
    return counts
