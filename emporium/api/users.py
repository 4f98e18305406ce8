"""
User administration routes. Every route requires the Admin role.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Response

from emporium.api.deps import get_hasher, get_store, json_body
from emporium.auth.passwords import PasswordHasher
from emporium.auth.policies import require_roles
from emporium.core.errors import ServerError
from emporium.core.models import Role, UserCreate, UserPage, UserPublic, UserUpdate
from emporium.services.listing import paginate, parse_page_params, search_filter
from emporium.services.records import delete_record, load_record
from emporium.services.users import create_user, update_user
from emporium.storage import Collections, DocumentStore, StoreError

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


@router.get("", response_model=UserPage)
async def list_users(
    q: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    store: DocumentStore = Depends(get_store),
):
    """List users, optionally searching by username."""
    params = parse_page_params(page, limit)
    try:
        result = await paginate(store, Collections.USERS, search_filter("username", q), params)
    except StoreError:
        logger.exception("Failed to list users")
        raise ServerError()

    return UserPage(
        users=[UserPublic.model_validate(doc) for doc in result.results],
        current_page=result.current_page,
        total_pages=result.total_pages,
        total_count=result.total_count,
    )


@router.post("", response_model=UserPublic, status_code=201)
async def add_user(
    data: UserCreate = Depends(json_body(UserCreate)),
    store: DocumentStore = Depends(get_store),
    hasher: PasswordHasher = Depends(get_hasher),
):
    user = await create_user(store, hasher, data)
    return UserPublic.model_validate(user)


@router.get("/{user_id}", response_model=UserPublic)
async def get_user(user_id: str, store: DocumentStore = Depends(get_store)):
    user = await load_record(store, Collections.USERS, user_id, "User")
    return UserPublic.model_validate(user)


@router.put("/{user_id}", response_model=UserPublic)
async def edit_user(
    user_id: str,
    data: UserUpdate = Depends(json_body(UserUpdate)),
    store: DocumentStore = Depends(get_store),
    hasher: PasswordHasher = Depends(get_hasher),
):
    user = await update_user(store, hasher, user_id, data)
    return UserPublic.model_validate(user)


@router.delete("/{user_id}", status_code=204, response_class=Response)
async def delete_user(user_id: str, store: DocumentStore = Depends(get_store)):
    """Delete a user. Their items and orders are left in place."""
    await delete_record(store, Collections.USERS, user_id, "User")
    return Response(status_code=204)
