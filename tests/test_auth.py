"""Token, password and auth service tests."""

from datetime import UTC, datetime, timedelta

import pytest
from jose import jwt

from src.errors import AuthenticationError, ConflictError
from src.models.user import User
from src.services.auth import AuthService


def test_password_hash_roundtrip(password_hasher):
    """Test that hashes verify and never equal the plaintext."""
    hashed = password_hasher.hash("s3cret-pass")
    assert hashed != "s3cret-pass"
    assert password_hasher.verify("s3cret-pass", hashed)
    assert not password_hasher.verify("wrong-pass", hashed)


def test_token_roundtrip(token_service):
    token = token_service.issue(42, "owner@example.com")
    assert token_service.verify(token) == 42


def test_token_carries_expiry(token_service, settings):
    """Test that issued tokens expire after the configured lifetime."""
    token = token_service.issue(42, "owner@example.com")
    claims = jwt.get_unverified_claims(token)
    expires = datetime.fromtimestamp(claims["exp"], tz=UTC)
    expected = datetime.now(UTC) + timedelta(minutes=settings.jwt_expiration_minutes)
    assert abs((expires - expected).total_seconds()) < 60
    assert claims["sub"] == "42"


def test_expired_token_rejected(token_service, settings):
    token = jwt.encode(
        {"sub": "42", "exp": datetime.now(UTC) - timedelta(minutes=1)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_wrong_secret_rejected(token_service, settings):
    token = jwt.encode(
        {"sub": "42", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        "some-other-secret",
        algorithm=settings.jwt_algorithm,
    )
    with pytest.raises(AuthenticationError):
        token_service.verify(token)


@pytest.mark.parametrize("claims", [{}, {"sub": "not-a-number"}])
def test_token_without_usable_subject_rejected(token_service, settings, claims):
    payload = {"exp": datetime.now(UTC) + timedelta(minutes=5), **claims}
    token = jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(AuthenticationError):
        token_service.verify(token)


def test_expired_token_over_http(client, auth_headers, settings):
    """Test that an expired token is refused by the task endpoints."""
    token = jwt.encode(
        {"sub": str(auth_headers.user_id), "exp": datetime.now(UTC) - timedelta(seconds=5)},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.json() == {"error": "Invalid or expired token"}


@pytest.fixture
def auth_service(db, password_hasher, token_service):
    return AuthService(db, password_hasher, token_service)


def test_register_stores_hash(auth_service, db):
    """Test that the stored credential is a hash, not the password."""
    user = auth_service.register("hash@example.com", "plaintext-pw", first_name="Ada")
    stored = db.query(User).filter(User.email == "hash@example.com").one()
    assert stored.id == user.id
    assert stored.password_hash != "plaintext-pw"
    assert stored.first_name == "Ada"
    assert stored.last_name is None


def test_register_duplicate(auth_service, db):
    auth_service.register("dup@example.com", "password1")
    with pytest.raises(ConflictError):
        auth_service.register("dup@example.com", "password2")
    assert db.query(User).filter(User.email == "dup@example.com").count() == 1


def test_login_issues_token_for_user(auth_service, token_service):
    user = auth_service.register("login@example.com", "password1")
    logged_in, token = auth_service.login("login@example.com", "password1")
    assert logged_in.id == user.id
    assert token_service.verify(token) == user.id


def test_login_failures_share_message(auth_service):
    """Test that unknown email and wrong password raise the same error."""
    auth_service.register("known@example.com", "password1")

    with pytest.raises(AuthenticationError) as unknown:
        auth_service.login("unknown@example.com", "password1")
    with pytest.raises(AuthenticationError) as wrong:
        auth_service.login("known@example.com", "password2")

    assert unknown.value.message == wrong.value.message
