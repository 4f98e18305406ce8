"""
Core data models for the emporium API.

These models represent the three resources (users, items, orders) and
the payloads accepted for them. Payload models are the request validator:
every rule is declared on the field, and FastAPI collects all violations
before a handler runs.

JSON uses camelCase names (isActive, joinedAt, itemsOrder); Python code
and stored documents use the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel

from emporium.core.utils import is_valid_id


# =============================================================================
# Enums
# =============================================================================


class Role(str, Enum):
    """Platform-wide role of a user."""

    ADMIN = "Admin"    # Manages users and orders
    OWNER = "Owner"    # Sells items
    CLIENT = "Client"  # Places orders


class OrderStatus(str, Enum):
    """Status of an order. Transitions are unconstrained."""

    CREATED = "Created"
    CANCELLED = "Cancelled"


class ApiModel(BaseModel):
    """Base for all wire models: camelCase aliases, snake_case attributes."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )


# =============================================================================
# Users
# =============================================================================


class LoginRequest(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=8)


class UserCreate(ApiModel):
    """Signup / admin user creation payload."""

    username: str = Field(min_length=1)
    fullname: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=8)
    role: Role
    is_active: StrictBool


class UserUpdate(ApiModel):
    """Partial user update. Only supplied fields are written."""

    username: str | None = Field(default=None, min_length=1)
    fullname: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=8)
    role: Role | None = None
    is_active: StrictBool | None = None


class UserPublic(ApiModel):
    """User data returned to clients (no password)."""

    id: str
    username: str
    fullname: str | None = None
    email: str
    role: Role
    is_active: bool = True
    joined_at: datetime | None = None
    orders: list[str] = Field(default_factory=list)


class SignupResponse(ApiModel):
    user: UserPublic


class TokenResponse(ApiModel):
    token: str


class UserPage(ApiModel):
    users: list[UserPublic]
    current_page: int
    total_pages: int
    total_count: int


# =============================================================================
# Items
# =============================================================================


class ItemCreate(ApiModel):
    name: str = Field(min_length=1)
    price: float = Field(ge=0, allow_inf_nan=False)
    description: str | None = None
    quantity: int = Field(default=0, ge=0)
    image: str | None = None


class ItemUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    description: str | None = None
    quantity: int | None = Field(default=None, ge=0)
    image: str | None = None


class Item(ApiModel):
    id: str
    name: str
    price: float
    description: str | None = None
    quantity: int = 0
    image: str | None = None
    owner: str


class ItemPage(ApiModel):
    items: list[Item]
    current_page: int
    total_pages: int
    total_count: int


# =============================================================================
# Orders
# =============================================================================


class OrderLine(ApiModel):
    """One line of an order: an item reference plus a quantity."""

    item: str
    quantity: int = Field(default=1, ge=1)

    @field_validator("item")
    @classmethod
    def _item_is_id(cls, value: str) -> str:
        if not is_valid_id(value):
            raise ValueError("Invalid item id")
        return value


class OrderCreate(ApiModel):
    description: str | None = None
    items_order: list[OrderLine] = Field(default_factory=list)
    total: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    date: datetime | None = None


class OrderUpdate(ApiModel):
    description: str | None = None
    status: OrderStatus | None = None
    items_order: list[OrderLine] | None = None
    total: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    date: datetime | None = None


class OrderStatusUpdate(ApiModel):
    status: OrderStatus


class Order(ApiModel):
    id: str
    date: datetime | None = None
    description: str | None = None
    status: OrderStatus = OrderStatus.CREATED
    client: UserPublic | str | None = None
    total: float = 0
    items_order: list[OrderLine] = Field(default_factory=list)
