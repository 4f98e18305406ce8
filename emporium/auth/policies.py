"""
Policies - the clean interface for route authentication and authorization.

Authorization decisions are small pure predicates over an Identity and,
where relevant, the target resource:

    has_role(identity, roles)      → role allow-list
    owns(identity, item)           → item ownership
    can_modify_item(identity, item) → owner or Admin

Routes compose them through FastAPI dependencies. Each dependency takes
the Identity produced by `authenticate` as an input, so authorization can
never run without authentication:

    @router.get("/users")
    async def list_users(identity: Identity = Depends(require_roles(Role.ADMIN))):
        ...
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from emporium.api.deps import get_store, get_token_service
from emporium.auth.context import Identity
from emporium.auth.tokens import TokenError, TokenService
from emporium.core.errors import Forbidden, Unauthorized
from emporium.core.models import Role
from emporium.integrations.sentry import set_user
from emporium.services.records import load_record
from emporium.storage import Collections, DocumentStore

logger = logging.getLogger(__name__)


# =============================================================================
# Predicates
# =============================================================================


def has_role(identity: Identity, roles: Iterable[Role | str]) -> bool:
    """Is the caller's role in the allow-list?"""
    return identity.role in {Role(r) for r in roles}


def owns(identity: Identity, item: dict[str, Any]) -> bool:
    """Did the caller create this item?"""
    return item.get("owner") == identity.id


def can_modify_item(identity: Identity, item: dict[str, Any]) -> bool:
    """Only the owner or an Admin may update or delete an item."""
    return identity.is_admin or owns(identity, item)


# =============================================================================
# Authentication
# =============================================================================


# Missing header is reported by `authenticate`, not by HTTPBearer
bearer = HTTPBearer(auto_error=False)


async def authenticate(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """
    Resolve the caller from the `Authorization: Bearer <token>` header.

    Raises Unauthorized (401) when the header is missing or the token
    fails verification.
    """
    if not credentials:
        raise Unauthorized()

    try:
        identity = tokens.verify(credentials.credentials)
    except TokenError as e:
        logger.info("Rejected token: %s", e)
        raise Unauthorized(f"Unauthorized {e}")

    set_user(identity.id, identity.username, identity.role.value)
    return identity


# =============================================================================
# Authorization dependencies
# =============================================================================


def require_roles(*roles: Role | str) -> Callable:
    """
    Require the caller to hold one of the given roles.

    Returns:
        FastAPI dependency that resolves to the caller's Identity
    """
    allowed = frozenset(Role(r) for r in roles)

    async def dependency(identity: Identity = Depends(authenticate)) -> Identity:
        if not has_role(identity, allowed):
            logger.info("User %s (%s) denied, requires %s", identity.username, identity.role.value, sorted(r.value for r in allowed))
            raise Forbidden()
        return identity

    return dependency


async def require_item_owner(
    item_id: str,
    identity: Identity = Depends(authenticate),
    store: DocumentStore = Depends(get_store),
) -> dict[str, Any]:
    """
    Load the item named in the path and require the caller may modify it.

    Returns the item document. Fails with 400 for a malformed id, 404 when
    the item does not exist, 403 when the caller is neither the owner nor
    an Admin, and 500 when the store fails.
    """
    item = await load_record(store, Collections.ITEMS, item_id, "Item")
    if not can_modify_item(identity, item):
        raise Forbidden()
    return item
