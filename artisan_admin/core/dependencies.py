"""
FastAPI dependency injection helpers for authentication and authorisation.

Admins authenticate with the ``adminToken`` session cookie set at login;
artisans send the token returned by artisan login as a Bearer header. Both
tokens carry the same claims, so either transport resolves to a ``User``.
"""
from typing import Generator, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
import logging

from artisan_admin.core.config import settings
from artisan_admin.core.exceptions import AuthError, ForbiddenError
from artisan_admin.core.security import decode_token
from artisan_admin.db.database import get_db
from artisan_admin.models.user import User, UserRole
from artisan_admin.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/artisan/login", auto_error=False)


# ---------------------------------------------------------------------------
# DB dependency
# ---------------------------------------------------------------------------

def db_dependency() -> Generator:
    """Yield a database connection for the duration of a request."""
    logger.trace("Creating database dependency connection")
    with get_db() as conn:
        yield conn


# ---------------------------------------------------------------------------
# Token resolution
# ---------------------------------------------------------------------------

def user_from_token(token: Optional[str], conn) -> Optional[User]:
    """
    Return the active user a session token belongs to, or None when the token
    is missing, invalid, expired or names an unknown/inactive account.
    """
    if not token:
        return None
    try:
        payload = decode_token(token)
    except JWTError:
        logger.warning("Rejected invalid or expired session token")
        return None

    user_id = payload.get("userId")
    if user_id is None:
        logger.warning("Session token missing userId claim")
        return None

    user = UserRepository(conn).get_by_id(int(user_id))
    if user is None or not user.is_active:
        logger.warning("Session token user id=%s not found or inactive", user_id)
        return None
    return user


def get_optional_principal(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> Optional[User]:
    """Resolve the caller from the admin cookie, then the Bearer header; None for anonymous."""
    user = user_from_token(request.cookies.get(settings.ADMIN_COOKIE_NAME), conn)
    if user is None:
        user = user_from_token(bearer, conn)
    if user is not None:
        logger.trace("Resolved principal id=%s role=%s", user.id, user.role.value)
    return user


def get_current_principal(
    principal: Optional[User] = Depends(get_optional_principal),
) -> User:
    if principal is None:
        raise AuthError("Authentication required.")
    return principal


# ---------------------------------------------------------------------------
# Role-based access control
# ---------------------------------------------------------------------------

def require_roles(*roles: UserRole):
    """
    Factory that returns a dependency which enforces that the current user
    has one of the specified roles.

    Usage::
        @router.get("/admin-only")
        def admin_only(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...
    """
    def _check(current_user: User = Depends(get_current_principal)) -> User:
        """Validate the current user has one of the required roles."""
        if current_user.role not in roles:
            logger.warning(
                "User id=%s lacks required roles: %s",
                current_user.id,
                ", ".join(role.value for role in roles),
            )
            raise ForbiddenError("You do not have permission to perform this action.")
        logger.info(
            "User id=%s authorized with role %s",
            current_user.id,
            current_user.role.value,
        )
        return current_user
    return _check


def get_current_artisan(
    bearer: Optional[str] = Depends(oauth2_scheme),
    conn=Depends(db_dependency),
) -> User:
    """Artisan identity comes only from the verified Bearer token."""
    user = user_from_token(bearer, conn)
    if user is None:
        raise AuthError("Unauthorized. Artisan login required.")
    if user.role != UserRole.ARTISAN:
        logger.warning("User id=%s with role %s attempted an artisan action", user.id, user.role.value)
        raise ForbiddenError("Only artisan accounts can create listings.")
    return user


# Convenience shortcut
require_admin = require_roles(UserRole.ADMIN)
