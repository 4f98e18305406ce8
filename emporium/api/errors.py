"""
Exception handlers.

Every failure leaves the API as a small JSON body; stack traces and
internal messages are only logged.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from emporium.core.errors import ApiError

logger = logging.getLogger(__name__)


def _json_safe(value: Any) -> Any:
    """Replace NaN and infinities, which JSON cannot carry, with their string form."""
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def _validation_entry(error: dict[str, Any]) -> dict[str, Any]:
    loc = error.get("loc", ())
    location = loc[0] if loc else "body"
    path = ".".join(str(part) for part in loc[1:])
    entry = {
        "type": "field",
        "msg": error.get("msg", "Invalid value"),
        "path": path,
        "location": location,
        "value": _json_safe(error.get("input")),
    }
    if path.endswith("password"):
        entry["value"] = None
    elif isinstance(entry["value"], dict):
        entry["value"] = {k: v for k, v in entry["value"].items() if k != "password"}
    return entry


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report every violated rule, not just the first."""
    errors = [_validation_entry(e) for e in exc.errors()]
    return JSONResponse(status_code=400, content=jsonable_encoder({"errors": errors}))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Not Found 404"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
