from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from jose import jwt

from bloodhub.config import settings
from bloodhub.utils.security import (
    TokenManager,
    get_password_hash,
    needs_rehash,
    verify_password,
)


class TestTokenManager:
    def test_token_carries_identity_claims(self):
        user_id = uuid4()

        token = TokenManager.create_access_token(user_id, "ama@college.edu", "admin")
        principal = TokenManager.principal_from_token(token)

        assert principal.id == user_id
        assert principal.email == "ama@college.edu"
        assert principal.role == "admin"

    def test_default_lifetime_is_24_hours(self):
        token = TokenManager.create_access_token(uuid4(), "ama@college.edu", "user")
        payload = TokenManager.decode_token(token)

        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = expires_at - datetime.now(timezone.utc)
        assert timedelta(hours=23, minutes=59) < remaining <= timedelta(hours=24)
        assert payload["type"] == "access"

    def test_expired_token_rejected(self):
        token = TokenManager.create_access_token(
            uuid4(), "ama@college.edu", "user", expires_delta=timedelta(seconds=-1)
        )

        with pytest.raises(ValueError):
            TokenManager.decode_token(token)

    def test_tampered_token_rejected(self):
        token = TokenManager.create_access_token(uuid4(), "ama@college.edu", "user")
        forged = jwt.encode(
            {**jwt.get_unverified_claims(token), "role": "admin"},
            "some-other-secret",
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(ValueError):
            TokenManager.principal_from_token(forged)

    def test_token_without_subject_rejected(self):
        token = jwt.encode(
            {"type": "access", "role": "admin"},
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
        )

        with pytest.raises(ValueError):
            TokenManager.principal_from_token(token)


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = get_password_hash("SecurePass123!")

        assert hashed != "SecurePass123!"
        assert hashed.startswith("$argon2")
        assert verify_password("SecurePass123!", hashed)
        assert not verify_password("WrongPass123!", hashed)

    def test_hashes_are_salted(self):
        assert get_password_hash("SecurePass123!") != get_password_hash("SecurePass123!")

    def test_garbage_hash_does_not_verify(self):
        assert not verify_password("SecurePass123!", "not-a-hash")
        assert needs_rehash("not-a-hash")
