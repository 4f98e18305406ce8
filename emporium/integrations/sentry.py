# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create a Python project at sentry.io
#   2. Copy DSN to .env: SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   init_sentry(settings) is called once in the app lifespan. Without a DSN
#   every helper here is a no-op.
#
# =============================================================================

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from emporium.config import Settings
from emporium.core.errors import ApiError

logger = logging.getLogger(__name__)

_SENSITIVE_HEADERS = ("authorization", "cookie", "x-api-key")


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,

        # Sample 10% of transactions in prod
        traces_sample_rate=0.1 if settings.is_production else 1.0,

        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(
                level=logging.INFO,
                event_level=logging.ERROR,
            ),
        ],

        # Don't send PII by default
        send_default_pii=False,

        before_send=_filter_events,
        before_send_transaction=_filter_transactions,
    )

    logger.info("Sentry initialized for %s", settings.environment)
    return True


def _filter_events(event: dict, hint: dict) -> dict | None:
    """Drop expected client errors and scrub credentials."""
    if "exc_info" in hint:
        _, exc_value, _ = hint["exc_info"]
        if isinstance(exc_value, ApiError) and exc_value.status_code < 500:
            return None

    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for key in list(headers.keys()):
        if key.lower() in _SENSITIVE_HEADERS:
            headers[key] = "[Filtered]"

    data = request.get("data")
    if isinstance(data, dict) and "password" in data:
        data["password"] = "[Filtered]"

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    """Skip health checks."""
    if event.get("transaction", "") in ("/health", "health_check"):
        return None
    return event


def set_user(user_id: str, username: str, role: str) -> None:
    """Set the current user context for error reports."""
    if sentry_sdk.get_client().is_active():
        sentry_sdk.set_user({"id": user_id, "username": username, "role": role})
