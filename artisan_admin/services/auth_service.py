"""
Authentication service: admin and artisan login, artisan registration.
"""
import sqlite3
import logging

from artisan_admin.core.exceptions import AuthError, ConflictError, ForbiddenError
from artisan_admin.core.security import (
    create_admin_token,
    create_artisan_token,
    hash_password,
    verify_password,
)
from artisan_admin.models.user import User, UserRole
from artisan_admin.repositories.user_repository import UserRepository
from artisan_admin.schemas.auth import ArtisanRegister

logger = logging.getLogger(__name__)

ADMIN_INVALID_CREDENTIALS = "Invalid credentials"
ARTISAN_INVALID_CREDENTIALS = "Invalid credentials or not an artisan account."
ARTISAN_INACTIVE = "Account is inactive. Please contact support."


class AuthService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing AuthService")
        self._user_repo = UserRepository(conn)

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def admin_login(self, email: str, password: str) -> tuple[User, str]:
        """
        Validate admin credentials and return the user with a fresh session token.
        Every failure looks the same to the caller.
        """
        logger.info("Admin login attempt for '%s'", email)
        user = self._user_repo.get_by_email(email)

        if (
            user is None
            or user.role != UserRole.ADMIN
            or not user.is_active
            or not verify_password(password, user.hashed_password)
        ):
            logger.warning("Rejected admin login for '%s'", email)
            raise AuthError(ADMIN_INVALID_CREDENTIALS)

        user = self._user_repo.touch_last_login(user.id)  # type: ignore[assignment]
        token = create_admin_token(user.id, user.email, user.role.value)
        logger.info("Admin login successful id=%s", user.id)
        return user, token

    # ------------------------------------------------------------------
    # Artisan
    # ------------------------------------------------------------------

    def artisan_login(self, email: str, password: str) -> tuple[User, str]:
        """
        Validate artisan credentials. Inactive accounts are refused only after
        the password checks out, and get neither a token nor a last_login stamp.
        """
        logger.info("Artisan login attempt for '%s'", email)
        user = self._user_repo.get_by_email(email)

        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("Invalid artisan credentials for '%s'", email)
            raise AuthError(ARTISAN_INVALID_CREDENTIALS)

        if user.role != UserRole.ARTISAN:
            logger.warning("Non-artisan id=%s attempted artisan login", user.id)
            raise AuthError(ARTISAN_INVALID_CREDENTIALS)

        if not user.is_active:
            logger.warning("Inactive artisan attempted login id=%s", user.id)
            raise ForbiddenError(ARTISAN_INACTIVE)

        user = self._user_repo.touch_last_login(user.id)  # type: ignore[assignment]
        logger.info("Artisan login successful id=%s", user.id)
        return user, self._artisan_token(user)

    def register_artisan(self, data: ArtisanRegister) -> tuple[User, str]:
        logger.info("Registering artisan %s", data.email)
        if self._user_repo.get_by_email(data.email):
            logger.warning("Duplicate email registration attempt: %s", data.email)
            raise ConflictError("An account with this email already exists.")

        user = self._user_repo.create(
            email=data.email,
            hashed_password=hash_password(data.password),
            role=UserRole.ARTISAN,
            name=data.name,
            phone_number=data.phone_number,
            national_id=data.national_id,
        )
        logger.info("Artisan registered id=%s", user.id)
        return user, self._artisan_token(user)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _artisan_token(self, user: User) -> str:
        return create_artisan_token(user.id, user.email, user.role.value, user.name)
