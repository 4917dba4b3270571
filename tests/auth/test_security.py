"""
Tests for password hashing and token utilities.
"""
from datetime import datetime, timedelta, timezone

from jose import jwt

from clinic_auth.config import settings
from clinic_auth.core.security import (
    create_access_token,
    generate_random_password,
    hash_password,
    verify_password,
    verify_token,
)


def test_hash_and_verify():
    hashed = hash_password("pw123")
    assert hashed != "pw123"
    assert hashed.startswith("$2")
    assert verify_password("pw123", hashed)
    assert not verify_password("pw124", hashed)


def test_hash_is_salted():
    assert hash_password("pw123") != hash_password("pw123")


def test_random_passwords_differ():
    assert generate_random_password() != generate_random_password()
    assert len(generate_random_password()) >= 24


def test_token_round_trip_with_expiry():
    token = create_access_token({"id": 1, "username": "doc1", "role": "Medico"})

    payload = verify_token(token)

    assert payload["username"] == "doc1"
    expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    assert timedelta(minutes=59) < expires - datetime.now(timezone.utc) <= timedelta(minutes=60)


def test_expired_token_is_rejected():
    token = create_access_token({"id": 1}, expires_delta=timedelta(seconds=-10))
    assert verify_token(token) is None


def test_token_with_other_secret_is_rejected():
    token = jwt.encode({"id": 1}, "another-secret", algorithm=settings.algorithm)
    assert verify_token(token) is None
