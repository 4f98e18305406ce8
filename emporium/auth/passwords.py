# =============================================================================
# Password Hashing
# =============================================================================
#
# PBKDF2-SHA256 with a fresh random salt per hash. Stored format is
# "salt:hash". The async variants run in a worker thread so a slow hash
# never stalls the event loop.
#
# =============================================================================

from __future__ import annotations

import asyncio
import hashlib
import secrets

DEFAULT_ITERATIONS = 100_000


class PasswordHasher:
    """Salted one-way password hashing."""

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        self.iterations = iterations

    def _digest(self, password: str, salt: str) -> str:
        return hashlib.pbkdf2_hmac(
            'sha256',
            password.encode('utf-8'),
            salt.encode('utf-8'),
            iterations=self.iterations,
        ).hex()

    def hash(self, password: str) -> str:
        """
        Hash a password using PBKDF2-SHA256.

        Returns: salt:hash format string
        """
        salt = secrets.token_hex(32)
        return f"{salt}:{self._digest(password, salt)}"

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against its hash."""
        try:
            salt, stored_hash = password_hash.split(':')
        except (ValueError, AttributeError):
            return False
        return secrets.compare_digest(self._digest(password, salt), stored_hash)

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: str) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)
