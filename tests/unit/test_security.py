"""
Unit tests for password hashing and access tokens.
"""

from datetime import timedelta

import pytest
from jose import JWTError

from streetcred.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("TestPassword123!")

        assert hashed != "TestPassword123!"
        assert hashed.startswith("$2")

    def test_verify_correct_password(self):
        hashed = hash_password("TestPassword123!")

        assert verify_password("TestPassword123!", hashed) is True

    def test_verify_wrong_password(self):
        hashed = hash_password("TestPassword123!")

        assert verify_password("WrongPassword", hashed) is False

    def test_same_password_hashes_differently(self):
        assert hash_password("same") != hash_password("same")

    def test_verify_against_non_hash(self):
        """A legacy plaintext value never verifies."""
        assert verify_password("secret", "secret") is False


class TestAccessTokens:
    """Tests for JWT creation and decoding."""

    def test_round_trip_subject(self):
        token = create_access_token(user_id="user-123")

        payload = decode_token(token)

        assert payload["sub"] == "user-123"
        assert "exp" in payload
        assert "iat" in payload

    def test_expired_token_rejected(self):
        token = create_access_token(user_id="user-123", expires_delta=timedelta(seconds=-10))

        with pytest.raises(JWTError):
            decode_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token(user_id="user-123")

        with pytest.raises(JWTError):
            decode_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
