"""
User management service: listing, retrieval, update and activation.

Business rules enforced here:
- Users are never hard-deleted; deactivation sets is_active=0.
- Email stays unique across accounts.
- An admin cannot deactivate their own account.
"""
import sqlite3
from typing import Optional
import logging

from artisan_admin.core.exceptions import ConflictError, ForbiddenError, NotFoundError
from artisan_admin.models.page import Page, page_offset
from artisan_admin.models.user import User, UserRole
from artisan_admin.repositories.user_repository import UserRepository
from artisan_admin.schemas.user import UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing UserService")
        self._repo = UserRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_user(self, user_id: int) -> User:
        """Return a user or raise 404."""
        logger.info("Fetching user id=%s", user_id)
        user = self._repo.get_by_id(user_id)
        if not user:
            logger.warning("User id=%s not found", user_id)
            raise NotFoundError("User not found.")
        return user

    def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Page[User]:
        logger.info(
            "Listing users page=%s limit=%s role=%s is_active=%s search=%s",
            page, limit, role, is_active, search,
        )
        users = self._repo.list_page(
            offset=page_offset(page, limit),
            limit=limit,
            role=role,
            is_active=is_active,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
        )
        total = self._repo.count(role=role, is_active=is_active, search=search)
        return Page(items=users, total_items=total, current_page=page, limit=limit)

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_user(self, user_id: int, data: UserUpdate, updated_by: User) -> User:
        logger.info("Updating user id=%s fields=%s", user_id, sorted(data.model_fields_set))
        self.get_user(user_id)

        updates: dict = {}

        if data.email is not None:
            existing = self._repo.get_by_email(data.email)
            if existing and existing.id != user_id:
                logger.warning("Duplicate email update attempt: %s", data.email)
                raise ConflictError("Email is already in use by another account.")
            updates["email"] = data.email

        if data.name is not None:
            updates["name"] = data.name.strip()

        if data.role is not None:
            updates["role"] = data.role.value

        if data.is_active is not None:
            self._guard_self_deactivation(user_id, data.is_active, updated_by)
            updates["is_active"] = int(data.is_active)

        updated_user = self._repo.update(user_id, **updates)  # type: ignore[return-value]
        logger.info("User updated id=%s", user_id)
        return updated_user

    def set_active(self, user_id: int, is_active: bool, updated_by: User) -> User:
        logger.info("Setting user id=%s is_active=%s", user_id, is_active)
        self.get_user(user_id)
        self._guard_self_deactivation(user_id, is_active, updated_by)
        return self._repo.update(user_id, is_active=int(is_active))  # type: ignore[return-value]

    def _guard_self_deactivation(self, user_id: int, is_active: bool, updated_by: User) -> None:
        if not is_active and updated_by.id == user_id:
            logger.warning("Admin id=%s attempted to deactivate their own account", user_id)
            raise ForbiddenError("You cannot deactivate your own account.")
