"""
Tests for password hashing, token issuance and authorization predicates.
"""

import jwt
import pytest

from emporium.auth import (
    Identity,
    PasswordHasher,
    TokenExpiredError,
    TokenInvalidError,
    TokenService,
    can_modify_item,
    has_role,
    owns,
)
from emporium.core.models import Role

from conftest import TEST_SECRET


@pytest.fixture
def identity():
    return Identity(id="65f1c2a9e4b0a1b2c3d4e5f6", username="oscar", role=Role.OWNER)


# =============================================================================
# Password Hasher
# =============================================================================


class TestPasswordHasher:
    def test_verify_round_trip(self, hasher):
        hashed = hasher.hash("correct horse")

        assert hashed != "correct horse"
        assert hasher.verify("correct horse", hashed)
        assert not hasher.verify("wrong horse", hashed)

    def test_fresh_salt_per_hash(self, hasher):
        assert hasher.hash("same password") != hasher.hash("same password")

    def test_malformed_hash_never_verifies(self, hasher):
        assert not hasher.verify("anything", "not-a-hash")
        assert not hasher.verify("anything", "")
        assert not hasher.verify("anything", None)

    def test_iterations_are_part_of_the_digest(self):
        hashed = PasswordHasher(iterations=1_000).hash("password123")
        assert not PasswordHasher(iterations=2_000).verify("password123", hashed)

    @pytest.mark.asyncio
    async def test_async_variants(self, hasher):
        hashed = await hasher.hash_async("password123")
        assert await hasher.verify_async("password123", hashed)
        assert not await hasher.verify_async("password124", hashed)


# =============================================================================
# Token Service
# =============================================================================


class TestTokenService:
    def test_issue_and_verify(self, token_service, identity):
        token = token_service.issue(identity)
        assert token_service.verify(token) == identity

    def test_expiry_is_one_hour_by_default(self, token_service, identity):
        claims = jwt.decode(token_service.issue(identity), TEST_SECRET, algorithms=["HS256"])
        assert claims["exp"] - claims["iat"] == 3600
        assert claims["sub"] == identity.id
        assert claims["role"] == "Owner"

    def test_expired_token(self, identity):
        service = TokenService(TEST_SECRET, expire_minutes=-1)
        with pytest.raises(TokenExpiredError):
            service.verify(service.issue(identity))

    def test_wrong_key(self, token_service, identity):
        forged = TokenService("some-other-key").issue(identity)
        with pytest.raises(TokenInvalidError):
            token_service.verify(forged)

    def test_tampered_token(self, token_service, identity):
        header, payload, signature = token_service.issue(identity).split(".")
        flipped = "A" if signature[10] != "A" else "B"
        tampered = f"{header}.{payload}.{signature[:10]}{flipped}{signature[11:]}"
        with pytest.raises(TokenInvalidError):
            token_service.verify(tampered)

    def test_unsigned_token(self, token_service):
        unsigned = jwt.encode({"sub": "x", "role": "Admin", "iat": 0, "exp": 9999999999}, "", algorithm="none")
        with pytest.raises(TokenInvalidError):
            token_service.verify(unsigned)

    def test_garbage(self, token_service):
        with pytest.raises(TokenInvalidError):
            token_service.verify("not.a.token")

    def test_unknown_role(self, token_service):
        token = jwt.encode(
            {"sub": "x", "username": "x", "role": "Superuser", "iat": 0, "exp": 9999999999},
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(TokenInvalidError):
            token_service.verify(token)

    def test_missing_key_is_fatal(self):
        with pytest.raises(ValueError):
            TokenService("")


# =============================================================================
# Predicates
# =============================================================================


class TestPredicates:
    def test_has_role(self, identity):
        assert has_role(identity, [Role.ADMIN, Role.OWNER])
        assert has_role(identity, ["Owner"])
        assert not has_role(identity, [Role.ADMIN])
        assert not has_role(identity, [])

    def test_owns(self, identity):
        assert owns(identity, {"owner": identity.id})
        assert not owns(identity, {"owner": "someone-else"})
        assert not owns(identity, {})

    def test_admin_may_modify_any_item(self):
        admin = Identity(id="a", username="alice", role=Role.ADMIN)
        assert can_modify_item(admin, {"owner": "someone-else"})

    def test_client_may_not_modify_others_items(self):
        client = Identity(id="c", username="carol", role=Role.CLIENT)
        assert not can_modify_item(client, {"owner": "someone-else"})
        assert can_modify_item(client, {"owner": "c"})
