"""Password hashing and token helpers."""
from __future__ import annotations

import secrets
from datetime import timedelta

from jose import JWTError, jwt
from passlib.hash import sha256_crypt

from aura_share.core.settings import Settings
from aura_share.db.time import utcnow

# Stored in place of a hash for soft-deleted accounts; never verifies.
UNUSABLE_PASSWORD = "!"


def hash_password(password: str) -> str:
    """Return a salted hash for ``password``."""
    return sha256_crypt.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash."""
    if not password_hash or password_hash == UNUSABLE_PASSWORD:
        return False
    try:
        return sha256_crypt.verify(password, password_hash)
    except ValueError:
        # Malformed hash in storage
        return False


def create_access_token(
    subject: int | str,
    settings: Settings,
    extra_claims: dict[str, str] | None = None,
) -> str:
    """Create a JWT access token for a regular user."""
    to_encode: dict[str, object] = {"sub": str(subject)}
    if extra_claims:
        to_encode.update(extra_claims)
    to_encode["exp"] = utcnow() + timedelta(minutes=settings.access_token_expire_minutes)
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_access_token(token: str, settings: Settings) -> int | None:
    """Return the user id carried by ``token`` or ``None`` if it is invalid."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    subject = payload.get("sub")
    if subject is None:
        return None
    try:
        return int(subject)
    except (TypeError, ValueError):
        return None


def generate_session_token() -> str:
    """Return a random 64-character hex token for admin sessions."""
    return secrets.token_hex(32)
