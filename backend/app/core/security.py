import uuid
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from app.config import settings

# bcrypt ignores everything past 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode("utf-8")[:_BCRYPT_MAX_BYTES], salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(
        plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
        hashed_password.encode("utf-8"),
    )


def _create_token(user_id: uuid.UUID, token_type: str, lifetime: timedelta) -> str:
    payload = {
        "sub": str(user_id),
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": token_type,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def create_access_token(user_id: uuid.UUID) -> str:
    return _create_token(
        user_id, "access", timedelta(minutes=settings.access_token_expire_minutes)
    )


def create_refresh_token(user_id: uuid.UUID) -> str:
    return _create_token(
        user_id, "refresh", timedelta(days=settings.refresh_token_expire_days)
    )


def decode_token(token: str, expected_type: str | None = None) -> uuid.UUID:
    """Return the subject of a valid token.

    Raises jwt.InvalidTokenError for bad signatures, expiry or a type
    mismatch, and ValueError/KeyError for a malformed subject.
    """
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    if expected_type is not None and payload.get("type") != expected_type:
        raise jwt.InvalidTokenError(f"Expected {expected_type} token")
    return uuid.UUID(payload["sub"])


def validate_password_strength(password: str) -> str | None:
    """Return error message if password is too weak, or None if acceptable."""
    if len(password) < 8:
        return "Password must be at least 8 characters"
    if not any(c.isupper() for c in password):
        return "Password must contain at least one uppercase letter"
    if not any(c.islower() for c in password):
        return "Password must contain at least one lowercase letter"
    if not any(c.isdigit() for c in password):
        return "Password must contain at least one digit"
    return None
