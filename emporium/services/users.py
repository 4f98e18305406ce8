"""
User account operations: creation, update and credential checks.

Passwords are hashed here, never in route handlers, so no code path can
store a plaintext password.
"""

from __future__ import annotations

import logging
from typing import Any

from emporium.auth.passwords import PasswordHasher
from emporium.core.errors import BadRequest, ConflictError, InvalidCredentials, NotFound, ServerError
from emporium.core.models import UserCreate, UserUpdate
from emporium.core.utils import utc_now
from emporium.services.records import load_record
from emporium.storage import Collections, DocumentStore, DuplicateKeyError, StoreError

logger = logging.getLogger(__name__)

_DUPLICATE_MESSAGES = {
    "username": "User with this username exists!!",
    "email": "User with this email exists!!",
}


def _conflict(field: str) -> ConflictError:
    return ConflictError(_DUPLICATE_MESSAGES.get(field, f"User with this {field} exists!!"))


async def _ensure_available(store: DocumentStore, fields: dict[str, Any], exclude_id: str | None = None) -> None:
    """Fail with a conflict when a unique field value is already taken."""
    for field in ("username", "email"):
        value = fields.get(field)
        if value is None:
            continue
        existing = await store.find_one(Collections.USERS, {field: value})
        if existing and existing["id"] != exclude_id:
            raise _conflict(field)


async def create_user(store: DocumentStore, hasher: PasswordHasher, data: UserCreate) -> dict[str, Any]:
    """
    Create a user account.

    joinedAt and the orders list are always set by the server.

    Raises:
        ConflictError: username or email already registered
        ServerError: the store failed
    """
    fields = data.model_dump()
    try:
        await _ensure_available(store, fields)
        fields["password"] = await hasher.hash_async(data.password)
        fields["joined_at"] = utc_now()
        fields["orders"] = []
        user = await store.create(Collections.USERS, fields)
    except DuplicateKeyError as e:
        raise _conflict(e.field)
    except StoreError:
        logger.exception("Failed to create user %s", data.username)
        raise ServerError()

    logger.info("Created user %s (%s)", user["username"], user["role"])
    return user


async def update_user(
    store: DocumentStore,
    hasher: PasswordHasher,
    user_id: str,
    data: UserUpdate,
) -> dict[str, Any]:
    """
    Apply a partial update to a user.

    The password is re-hashed only when a new one is supplied and it
    differs from the stored one.

    Raises:
        BadRequest: malformed id or the store rejected the write
        NotFound: no such user
        ConflictError: new username or email already taken
    """
    current = await load_record(store, Collections.USERS, user_id, "User")
    updates = data.model_dump(exclude_unset=True, exclude_none=True)

    if "password" in updates:
        if await hasher.verify_async(updates["password"], current.get("password", "")):
            del updates["password"]
        else:
            updates["password"] = await hasher.hash_async(updates["password"])

    try:
        await _ensure_available(store, updates, exclude_id=user_id)
        user = await store.update(Collections.USERS, user_id, updates)
    except DuplicateKeyError as e:
        raise _conflict(e.field)
    except StoreError:
        logger.exception("Failed to update user %s", user_id)
        raise BadRequest()

    if user is None:
        raise NotFound("User not found")
    return user


async def authenticate_user(
    store: DocumentStore,
    hasher: PasswordHasher,
    username: str,
    password: str,
) -> dict[str, Any]:
    """
    Check a username/password pair.

    Raises:
        InvalidCredentials: unknown username or wrong password
    """
    try:
        user = await store.find_one(Collections.USERS, {"username": username})
    except StoreError:
        logger.exception("Login lookup failed for %s", username)
        raise InvalidCredentials("400 Not Found")

    if not user:
        raise InvalidCredentials("user not found")

    if not await hasher.verify_async(password, user.get("password", "")):
        logger.info("Invalid password for %s", username)
        raise InvalidCredentials("invalid password")

    return user
