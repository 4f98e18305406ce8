"""
Identity - the "who is calling" for each authenticated request.

This is the lightweight object passed to route handlers and to the
authorization predicates. It only exists once a token has been verified,
so any code that takes an Identity can rely on authentication having run.
"""

from __future__ import annotations

from dataclasses import dataclass

from emporium.core.models import Role


@dataclass(frozen=True)
class Identity:
    """
    The authenticated caller.

    Usage in routes:
        async def my_route(identity: Identity = Depends(require_roles(Role.ADMIN))):
            print(f"User {identity.username} ({identity.role.value})")
    """

    id: str
    username: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def to_claims(self) -> dict[str, str]:
        """Claims embedded in an access token."""
        return {"sub": self.id, "username": self.username, "role": self.role.value}
