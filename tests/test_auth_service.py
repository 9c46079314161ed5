"""Tests for the credential store."""

from __future__ import annotations

import pytest

from jobtrack.auth.models import User
from jobtrack.auth.service import auth_service
from jobtrack.errors import AuthenticationError, ConflictError, ValidationError


def test_register_stores_hash_not_plaintext(db_session):
    user = auth_service.register(db_session, "Alice", "alice@example.com", "password123")

    stored = db_session.query(User).filter(User.id == user.id).one()
    assert stored.hashed_password != "password123"
    assert stored.hashed_password.startswith("$2")


def test_verify_password_only_accepts_original(db_session):
    user = auth_service.register(db_session, "Alice", "alice@example.com", "password123")

    assert auth_service.verify_password(user, "password123") is True
    assert auth_service.verify_password(user, "password124") is False
    assert auth_service.verify_password(user, "") is False


def test_same_password_hashes_differently():
    assert auth_service.hash_password("password123") != auth_service.hash_password("password123")


def test_register_normalizes_email(db_session):
    user = auth_service.register(db_session, "  Alice ", " Alice@Example.com", "password123")

    assert user.email == "alice@example.com"
    assert user.name == "Alice"
    assert auth_service.find_by_email(db_session, "ALICE@example.com").id == user.id


def test_find_by_email_unknown(db_session):
    assert auth_service.find_by_email(db_session, "nobody@example.com") is None
    assert auth_service.find_by_email(db_session, None) is None


def test_duplicate_email_conflicts_and_keeps_first_user(db_session):
    first = auth_service.register(db_session, "Alice", "alice@example.com", "password123")
    first_hash = first.hashed_password

    with pytest.raises(ConflictError) as exc_info:
        auth_service.register(db_session, "Mallory", "alice@example.com", "otherpass123")

    assert "email" in exc_info.value.message
    users = db_session.query(User).all()
    assert len(users) == 1
    assert users[0].name == "Alice"
    assert users[0].hashed_password == first_hash


def test_register_rejects_invalid_fields(db_session):
    with pytest.raises(ValidationError) as exc_info:
        auth_service.register(db_session, "Al", "bad", "short")

    assert len(exc_info.value.messages) == 3
    assert db_session.query(User).count() == 0


def test_authenticate(db_session):
    user = auth_service.register(db_session, "Alice", "alice@example.com", "password123")

    assert auth_service.authenticate(db_session, "alice@example.com", "password123").id == user.id


def test_authenticate_requires_both_fields(db_session):
    with pytest.raises(ValidationError):
        auth_service.authenticate(db_session, "alice@example.com", " ")
    with pytest.raises(ValidationError):
        auth_service.authenticate(db_session, None, "password123")


def test_authenticate_rejects_bad_credentials(db_session):
    auth_service.register(db_session, "Alice", "alice@example.com", "password123")

    with pytest.raises(AuthenticationError):
        auth_service.authenticate(db_session, "bob@example.com", "password123")
    with pytest.raises(AuthenticationError):
        auth_service.authenticate(db_session, "alice@example.com", "wrong-password")
