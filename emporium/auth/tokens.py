# =============================================================================
# JWT Token Service
# =============================================================================
#
# Issues and verifies signed access tokens carrying the caller's identity
# (user id, username, role). Tokens expire a fixed time after issuance.
#
# The signing key is passed in explicitly; there is no fallback key.
#
# =============================================================================

from __future__ import annotations

from datetime import timedelta
import logging

import jwt

from emporium.auth.context import Identity
from emporium.core.models import Role
from emporium.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    pass


# =============================================================================
# Service
# =============================================================================

class TokenService:
    """
    Signs and verifies access tokens.

    Created once at startup with the process-wide signing key.
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        if not secret_key:
            raise ValueError("JWT signing key is not configured (set JWT_SECRET_KEY)")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def issue(self, identity: Identity) -> str:
        """Create a signed access token for an identity."""
        now = utc_now()
        payload = {
            **identity.to_claims(),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
            "jti": generate_id(),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """
        Decode and validate an access token.

        Raises:
            TokenExpiredError: Token has expired
            TokenInvalidError: Token is malformed, tampered with or unsigned
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("jwt expired")
        except jwt.InvalidTokenError as e:
            raise TokenInvalidError(f"invalid token: {e}")

        try:
            return Identity(
                id=payload["sub"],
                username=payload.get("username", ""),
                role=Role(payload.get("role")),
            )
        except ValueError:
            raise TokenInvalidError(f"invalid token: unknown role {payload.get('role')!r}")
