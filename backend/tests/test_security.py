"""
Notebench Backend — Authentication Gate Unit Tests
====================================================

What we test:
    ✅ Password hashing and verification
    ✅ Token issue / decode round trip
    ✅ Expired, tampered and sub-less tokens → AuthenticationError
"""

import uuid

import pytest
from jose import jwt

from notebench.config import settings
from notebench.exceptions import AuthenticationError
from notebench.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestPasswords:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct-horse-battery")
        assert hashed != "correct-horse-battery"
        assert hashed.startswith("$pbkdf2-sha256$")

    def test_verify(self):
        hashed = hash_password("correct-horse-battery")
        assert verify_password("correct-horse-battery", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_verify_garbage_hash(self):
        assert verify_password("anything", "not-a-hash") is False


class TestTokens:

    def setup_method(self):
        self.user_id = uuid.uuid4()

    def test_round_trip(self):
        token = create_access_token(self.user_id)
        assert decode_token(token) == self.user_id

    def test_expired(self):
        token = create_access_token(self.user_id, expires_minutes=-1)

        with pytest.raises(AuthenticationError, match="Invalid or expired token"):
            decode_token(token)

    def test_wrong_secret(self):
        token = jwt.encode(
            {"sub": str(self.user_id)}, "some-other-secret", algorithm=settings.jwt_algorithm
        )

        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_sub_must_be_a_user_id(self):
        token = jwt.encode(
            {"sub": "alice"}, settings.jwt_secret, algorithm=settings.jwt_algorithm
        )

        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_token(token)

    @pytest.mark.asyncio
    async def test_token_for_deleted_user_is_rejected(self, test_client):
        token = create_access_token(uuid.uuid4())

        response = await test_client.get(
            "/api/notes", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401
