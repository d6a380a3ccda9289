"""Password hashing (Argon2id) and bearer tokens (JWT)."""

from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from wanderplan.core.config import settings
from wanderplan.core.errors import BadRequestError, UnauthorizedError

_hasher = PasswordHasher()


def hash_password(password: str) -> str:
    if len(password) < settings.password_min_length:
        raise BadRequestError(f"Password must be at least {settings.password_min_length} characters")
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return _hasher.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def create_access_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.access_token_ttl_minutes),
        "type": "access",
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str:
    """Return the user id carried by the token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise UnauthorizedError() from exc
    if payload.get("type") != "access" or not payload.get("sub"):
        raise UnauthorizedError()
    return str(payload["sub"])
