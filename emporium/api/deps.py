"""
FastAPI dependencies for the process-wide collaborators.

The store, token service and password hasher are created once in the app
lifespan and kept on `app.state`.

Protected routes read their JSON body through `json_body`, declared after
the route's auth dependencies. FastAPI decodes plain body parameters
before any dependency runs, so a malformed body would otherwise answer
400 to a caller who should get 401 or 403.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

if TYPE_CHECKING:
    from emporium.auth.passwords import PasswordHasher
    from emporium.auth.tokens import TokenService
    from emporium.storage.base import DocumentStore


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_hasher(request: Request) -> PasswordHasher:
    return request.app.state.hasher


def json_body(model: type[BaseModel]) -> Callable:
    """
    Dependency that decodes the request body and validates it as `model`.

    Errors are raised as RequestValidationError with "body" locations, so
    they render exactly like errors on a plain body parameter.
    """

    async def dependency(request: Request):
        try:
            raw = await request.json()
        except ValueError as e:
            raise RequestValidationError([{
                "type": "json_invalid",
                "loc": ("body",),
                "msg": "JSON decode error",
                "input": {},
                "ctx": {"error": str(e)},
            }])

        try:
            return model.model_validate(raw)
        except ValidationError as e:
            raise RequestValidationError([
                {**error, "loc": ("body", *error["loc"])}
                for error in e.errors(include_url=False)
            ])

    return dependency
