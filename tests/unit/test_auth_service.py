from datetime import UTC, datetime
from unittest.mock import Mock
from uuid import uuid4

import pytest

from samankhojo.adapters.auth.crypto import PasslibPasswordHasher
from samankhojo.components.auth import AuthService, RegisterInput, validate_registration
from samankhojo.domain.entities import User
from samankhojo.rules.models import AuthRules


@pytest.fixture
def mock_repo():
    repo = Mock()
    repo.get_by_email.return_value = None
    repo.save.side_effect = lambda user: user
    return repo


@pytest.fixture
def mock_hasher():
    hasher = Mock()
    hasher.hash_password.side_effect = lambda p: f"hashed:{p}"
    hasher.verify_password.side_effect = lambda plain, hashed: hashed == f"hashed:{plain}"
    return hasher


@pytest.fixture
def mock_time():
    """Mock time port that returns a fixed time."""
    time = Mock()
    time.now_utc.return_value = datetime(2025, 11, 1, 6, 30, tzinfo=UTC)
    return time


@pytest.fixture
def service(mock_repo, mock_hasher, mock_time):
    return AuthService(repo=mock_repo, hasher=mock_hasher, clock=mock_time, rules=AuthRules())


def test_validate_registration():
    errors = validate_registration(RegisterInput(email="nope", password="short", display_name=" "), AuthRules())
    assert {e.code for e in errors} == {"email_invalid", "password_too_short", "display_name_required"}


def test_register_success(service, mock_repo, mock_time):
    user, errors = service.register(
        RegisterInput(email=" Sita@Example.com ", password="correct horse", display_name="Sita")
    )

    assert errors == []
    assert user.email == "sita@example.com"
    assert user.roles == ["customer"]
    assert user.password_hash == "hashed:correct horse"
    assert user.created_at == mock_time.now_utc.return_value
    mock_repo.save.assert_called_once()


def test_register_email_taken(service, mock_repo):
    mock_repo.get_by_email.return_value = User(
        id=uuid4(), email="sita@example.com", display_name="Sita", password_hash="x"
    )

    user, errors = service.register(
        RegisterInput(email="sita@example.com", password="correct horse", display_name="Sita")
    )

    assert user is None
    assert errors[0].code == "email_taken"
    mock_repo.save.assert_not_called()


def test_authenticate(service, mock_repo):
    user = User(id=uuid4(), email="sita@example.com", display_name="Sita", password_hash="hashed:secret123")
    mock_repo.get_by_email.return_value = user

    assert service.authenticate("SITA@example.com", "secret123") is user
    assert service.authenticate("sita@example.com", "wrong") is None
    mock_repo.get_by_email.assert_called_with("sita@example.com")


def test_authenticate_unknown_user(service):
    assert service.authenticate("ghost@example.com", "whatever") is None


def test_passlib_hasher_roundtrip():
    hasher = PasslibPasswordHasher()
    hashed = hasher.hash_password("correct horse")

    assert hashed.startswith("$argon2")
    assert hasher.verify_password("correct horse", hashed) is True
    assert hasher.verify_password("wrong horse", hashed) is False
