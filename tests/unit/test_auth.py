"""Unit tests for access token handling."""
import pytest
from jose import JWTError, jwt

from ideahub.auth import create_access_token, decode_access_token
from ideahub.config import ALGORITHM, SECRET_KEY


class TestAccessTokens:
    """Test cases for token creation and decoding."""

    def test_round_trip(self):
        token = create_access_token({
            "sub": "user-alice", "email": "alice@company.com",
            "name": "Alice Johnson", "roles": ["admin"],
        })

        user = decode_access_token(token)

        assert user.user_id == "user-alice"
        assert user.email == "alice@company.com"
        assert user.name == "Alice Johnson"
        assert user.roles == ["admin"]
        assert user.access_token == token

    def test_hosted_backend_claims(self):
        """Tokens from the identity provider carry the name in user_metadata and an audience."""
        token = jwt.encode(
            {"sub": "user-bob", "aud": "authenticated", "user_metadata": {"full_name": "Bob Smith"}},
            SECRET_KEY, algorithm=ALGORITHM
        )

        user = decode_access_token(token)

        assert user.user_id == "user-bob"
        assert user.name == "Bob Smith"
        assert user.roles == []

    def test_user_id_claim(self):
        token = jwt.encode({"user_id": "user-carol"}, SECRET_KEY, algorithm=ALGORITHM)

        assert decode_access_token(token).user_id == "user-carol"

    def test_missing_subject(self):
        token = jwt.encode({"email": "nobody@company.com"}, SECRET_KEY, algorithm=ALGORITHM)

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_roles_claim_not_a_list(self):
        token = jwt.encode({"sub": "user-alice", "roles": "authenticated"}, SECRET_KEY, algorithm=ALGORITHM)

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_numeric_user_id_claim(self):
        token = jwt.encode({"user_id": 42}, SECRET_KEY, algorithm=ALGORITHM)

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_expired_token(self):
        token = create_access_token({"sub": "user-alice"}, expires_in_minutes=-5)

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_wrong_signature(self):
        token = jwt.encode({"sub": "user-alice"}, "not-the-secret", algorithm=ALGORITHM)

        with pytest.raises(JWTError):
            decode_access_token(token)

    def test_garbage_token(self):
        with pytest.raises(JWTError):
            decode_access_token("not-a-jwt")
