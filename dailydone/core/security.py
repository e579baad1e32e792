"""Password hashing and JWT creation/verification for authentication."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
from pydantic import ValidationError

from dailydone.core.config import Settings, get_settings
from dailydone.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(
    claims: TokenClaims,
    ttl: timedelta | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a JWT carrying sub (user id), email, role, iat and exp."""
    settings = settings or get_settings()
    if ttl is None:
        ttl = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": claims.user_id,
        "email": claims.email,
        "role": claims.role.value,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: Settings | None = None) -> TokenClaims | None:
    """
    Validate signature, structure and expiry; return the claims.

    Returns None instead of raising so callers can map every failure to one status.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.debug("Rejected expired token")
        return None
    except jwt.PyJWTError as e:
        logger.debug("Rejected invalid token: %s", e)
        return None
    try:
        return TokenClaims(
            user_id=payload["sub"],
            email=payload.get("email", ""),
            role=payload.get("role"),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
    except (ValidationError, TypeError, ValueError):
        logger.debug("Rejected token with malformed claims")
        return None
