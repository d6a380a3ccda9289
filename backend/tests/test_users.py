import jwt
import pytest

from wanderplan.core.config import settings
from wanderplan.core.errors import BadRequestError, UnauthorizedError
from wanderplan.core.security import create_access_token, decode_access_token, verify_password


def test_register_hashes_password(user_service, repository):
    user = user_service.register("Ana", " Ana@Example.COM ", "secret123")

    assert user.email == "ana@example.com"
    assert user.password_hash != "secret123"
    assert verify_password("secret123", user.password_hash)
    assert repository.users[user.user_id]["password_hash"] == user.password_hash


def test_duplicate_email_is_rejected(user_service, owner):
    with pytest.raises(BadRequestError):
        user_service.register("Someone", owner.email.upper(), "secret123")


def test_short_password_is_rejected(user_service):
    with pytest.raises(BadRequestError):
        user_service.register("Ana", "ana@example.com", "123")


def test_authenticate(user_service, owner):
    assert user_service.authenticate("XENA@example.com", "secret123").user_id == owner.user_id

    with pytest.raises(UnauthorizedError):
        user_service.authenticate(owner.email, "wrong-password")
    with pytest.raises(UnauthorizedError):
        user_service.authenticate("missing@example.com", "secret123")


def test_profile_update_keeps_password_hash(user_service, owner):
    updated = user_service.update_profile(owner, name="Xena O.", image="https://img.example.com/x.png")

    assert updated.name == "Xena O."
    assert updated.image == "https://img.example.com/x.png"
    assert updated.password_hash == owner.password_hash
    assert updated.email == owner.email


def test_access_token_round_trip():
    assert decode_access_token(create_access_token("user-42")) == "user-42"


def test_token_signed_with_another_secret_is_rejected():
    forged = jwt.encode({"sub": "user-42", "type": "access"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(UnauthorizedError):
        decode_access_token(forged)


def test_non_access_token_is_rejected():
    token = jwt.encode({"sub": "user-42", "type": "refresh"}, settings.jwt_secret, algorithm=settings.jwt_algorithm)
    with pytest.raises(UnauthorizedError):
        decode_access_token(token)
