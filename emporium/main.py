"""
Emporium API - command line entry point.

    emporium serve [--host HOST] [--port PORT] [--reload]
    emporium seed
"""

from __future__ import annotations

import asyncio
import logging

import uvicorn

from emporium.auth.passwords import PasswordHasher
from emporium.config import Settings, get_settings
from emporium.services.seed import seed_database
from emporium.storage import create_storage

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def seed(settings: Settings) -> dict[str, int]:
    """Reset the configured store to the sample data set."""
    store = await create_storage(settings)
    try:
        return await seed_database(store, PasswordHasher(iterations=settings.password_hash_iterations))
    finally:
        await store.close()


def main():
    """Main entry point."""
    import argparse

    settings = get_settings()

    parser = argparse.ArgumentParser(description="Emporium API")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="Run the HTTP API")
    serve_cmd.add_argument("--host", default=settings.api_host)
    serve_cmd.add_argument("--port", type=int, default=settings.api_port)
    serve_cmd.add_argument("--reload", action="store_true", help="Reload on code changes")

    commands.add_parser("seed", help="Replace all data with sample users, items and orders")

    args = parser.parse_args()
    configure_logging(settings.log_level)

    if args.command == "serve":
        uvicorn.run(
            "emporium.api.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=settings.log_level.lower(),
        )
    elif args.command == "seed":
        counts = asyncio.run(seed(settings))
        print(f"Seeded {counts['users']} users, {counts['items']} items, {counts['orders']} orders")


if __name__ == "__main__":
    main()
