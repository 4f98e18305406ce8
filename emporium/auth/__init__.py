"""
Authentication and authorization.

Design principles:
1. Identity comes only from a verified bearer token
2. Authorization is a set of pure predicates over Identity + resource
3. Routes compose predicates explicitly through dependencies
"""

from emporium.auth.context import Identity
from emporium.auth.passwords import PasswordHasher
from emporium.auth.policies import (
    authenticate,
    can_modify_item,
    has_role,
    owns,
    require_item_owner,
    require_roles,
)
from emporium.auth.tokens import (
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    TokenService,
)

__all__ = [
    # Main interface
    "authenticate",
    "require_roles",
    "require_item_owner",
    "Identity",
    # Predicates
    "has_role",
    "owns",
    "can_modify_item",
    # Passwords
    "PasswordHasher",
    # Tokens
    "TokenService",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
]
