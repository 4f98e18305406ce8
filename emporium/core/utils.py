"""
Shared utility functions for the emporium API.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

from datetime import datetime, timezone

from bson import ObjectId


def generate_id() -> str:
    """
    Generate a unique document ID.

    Returns:
        A 24-character hex string like "65f1c2a9e4b0a1b2c3d4e5f6"
    """
    return str(ObjectId())


def is_valid_id(value: str) -> bool:
    """Check that a path id has the document ID format."""
    return ObjectId.is_valid(value) and len(value) == 24


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
