"""Session tokens, opaque tokens, and password hashing."""

import re
import time

import jwt
import pytest

from peoplehub.auth.password import DUMMY_HASH, hash_password, verify_password
from peoplehub.auth.tokens import (
    TokenError,
    create_session_token,
    expiry_from_now,
    new_opaque_token,
    verify_session_token,
)
from peoplehub.config import settings
from peoplehub.db.models import utcnow


# ─── Session tokens ─────────────────────────────────────


def test_session_token_round_trip():
    token = create_session_token("user-123")
    payload = verify_session_token(token)
    assert payload["sub"] == "user-123"
    assert payload["type"] == "session"


def test_expired_session_token():
    token = create_session_token("user-123", expires_hours=-1)
    with pytest.raises(TokenError, match="expired"):
        verify_session_token(token)


def test_tampered_session_token():
    token = create_session_token("user-123")
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[::-1]])
    with pytest.raises(TokenError):
        verify_session_token(tampered)


def test_token_of_another_type_is_rejected():
    token = jwt.encode(
        {"sub": "user-123", "type": "refresh", "exp": int(time.time()) + 60},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(TokenError, match="session"):
        verify_session_token(token)


def test_token_without_subject_is_rejected():
    token = jwt.encode(
        {"type": "session", "exp": int(time.time()) + 60},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(TokenError):
        verify_session_token(token)


# ─── Opaque tokens ──────────────────────────────────────


def test_opaque_tokens_are_long_random_hex():
    tokens = {new_opaque_token() for _ in range(50)}
    assert len(tokens) == 50
    for token in tokens:
        assert re.fullmatch(r"[0-9a-f]{64}", token)


def test_expiry_from_now_is_in_the_future():
    assert expiry_from_now(minutes=60) > utcnow()


# ─── Passwords ──────────────────────────────────────────


def test_hash_is_salted_and_verifies():
    first = hash_password("correct horse")
    second = hash_password("correct horse")
    assert first != second
    assert first.startswith("$2b$")
    assert verify_password("correct horse", first)
    assert verify_password("correct horse", second)
    assert not verify_password("battery staple", first)


def test_verify_against_garbage_hash_is_false():
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_dummy_hash_matches_nothing_useful():
    assert not verify_password("", DUMMY_HASH)
    assert not verify_password("password", DUMMY_HASH)
