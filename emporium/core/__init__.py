"""
Core building blocks: models, errors and shared utilities.
"""

from emporium.core.errors import (
    ApiError,
    BadRequest,
    ConflictError,
    Forbidden,
    InvalidCredentials,
    NotFound,
    ServerError,
    Unauthorized,
)
from emporium.core.models import OrderStatus, Role
from emporium.core.utils import generate_id, is_valid_id, utc_now

__all__ = [
    # Errors
    "ApiError",
    "BadRequest",
    "ConflictError",
    "Forbidden",
    "InvalidCredentials",
    "NotFound",
    "ServerError",
    "Unauthorized",
    # Enums
    "OrderStatus",
    "Role",
    # Utils
    "generate_id",
    "is_valid_id",
    "utc_now",
]
