"""
Security utilities: password hashing and session token creation/verification.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Any
import logging

from jose import jwt
from passlib.context import CryptContext

from artisan_admin.core.config import settings
from artisan_admin.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(plain_password: str) -> str:
    """Return the bcrypt hash of *plain_password*."""
    logger.trace("Hashing user password")
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True if *plain_password* matches *hashed_password*."""
    logger.trace("Verifying password hash")
    return pwd_context.verify(plain_password, hashed_password)


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------

def _require_secret() -> str:
    """Return the signing secret or fail with a configuration error."""
    if not settings.JWT_SECRET:
        logger.error("JWT_SECRET is not set in environment variables")
        raise ConfigurationError("JWT_SECRET is not configured.")
    return settings.JWT_SECRET


def _create_token(
    user_id: int,
    email: str,
    role: str,
    expires_delta: timedelta,
    extra_claims: Optional[dict] = None,
) -> str:
    """Internal helper that builds and signs a session JWT."""
    secret = _require_secret()
    now = datetime.now(tz=timezone.utc)
    payload: dict[str, Any] = {
        "userId": user_id,
        "email": email,
        "role": role,
        "iat": now,
        "exp": now + expires_delta,
    }
    if extra_claims:
        payload.update(extra_claims)
    token = jwt.encode(payload, secret, algorithm=settings.JWT_ALGORITHM)
    logger.info("Issued %s session token for user id=%s", role, user_id)
    return token


def create_admin_token(user_id: int, email: str, role: str) -> str:
    """Create the admin session token stored in the admin cookie (1 day)."""
    logger.trace("Creating admin token for user id=%s", user_id)
    return _create_token(
        user_id=user_id,
        email=email,
        role=role,
        expires_delta=timedelta(days=settings.ADMIN_TOKEN_EXPIRE_DAYS),
    )


def create_artisan_token(user_id: int, email: str, role: str, name: str) -> str:
    """Create the artisan bearer token returned to the client (7 days)."""
    logger.trace("Creating artisan token for user id=%s", user_id)
    return _create_token(
        user_id=user_id,
        email=email,
        role=role,
        expires_delta=timedelta(days=settings.ARTISAN_TOKEN_EXPIRE_DAYS),
        extra_claims={"name": name},
    )


def decode_token(token: str) -> dict:
    """
    Decode and verify a session JWT.

    Raises:
        jose.JWTError: if the token is invalid or expired.
        ConfigurationError: if JWT_SECRET is not configured.
    """
    logger.trace("Decoding JWT token")
    return jwt.decode(token, _require_secret(), algorithms=[settings.JWT_ALGORITHM])
