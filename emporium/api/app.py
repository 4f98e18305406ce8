"""
FastAPI application for the emporium API.

All resource routes live under /api/v1. Process-wide collaborators (the
document store, token service and password hasher) are built once per
app and kept on `app.state`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from emporium import __version__
from emporium.api import auth, items, orders, users
from emporium.api.errors import register_error_handlers
from emporium.auth.passwords import PasswordHasher
from emporium.auth.tokens import TokenService
from emporium.config import Settings, get_settings
from emporium.integrations.sentry import init_sentry
from emporium.services.seed import seed_database
from emporium.storage import DocumentStore, create_storage

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def create_app(settings: Settings | None = None, store: DocumentStore | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Defaults to the environment settings
        store: Pre-built store (tests); otherwise created from settings at startup

    Raises:
        ValueError: No JWT signing key is configured
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize and cleanup app resources."""
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")

        app.state.store = store or await create_storage(settings)

        if settings.seed_on_startup:
            await seed_database(app.state.store, app.state.hasher)

        logger.info("Emporium API starting in %s mode", settings.environment)

        yield

        await app.state.store.close()
        logger.info("Emporium API shutting down")

    app = FastAPI(
        title="Emporium API",
        description="Role-based API for users, items and orders",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Fail at startup, not on the first login
    app.state.token_service = TokenService(
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )
    app.state.hasher = PasswordHasher(iterations=settings.password_hash_iterations)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(auth.router, prefix=API_PREFIX)
    app.include_router(users.router, prefix=API_PREFIX)
    app.include_router(items.router, prefix=API_PREFIX)
    app.include_router(orders.router, prefix=API_PREFIX)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "emporium-api"}

    return app
