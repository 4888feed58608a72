"""
Repository layer for User persistence.
All SQL for the `users` table lives here.
"""
import sqlite3
from typing import Optional
from datetime import datetime, timezone
import logging

from artisan_admin.models.user import User, UserRole
from artisan_admin.core.logging_config import log_db_timing
from artisan_admin.repositories.query_helpers import WhereBuilder, order_by_clause

logger = logging.getLogger(__name__)

USER_SORT_COLUMNS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "name": "name",
}


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing UserRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id or None if missing."""
        logger.trace("Fetching user by id=%s", user_id)
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by (already normalized) email."""
        logger.trace("Fetching user by email=%s", email)
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ?", (email,)
        ).fetchone()
        return User.from_row(row) if row else None

    def _filters(
        self,
        role: Optional[UserRole],
        is_active: Optional[bool],
        search: Optional[str],
    ) -> WhereBuilder:
        return (
            WhereBuilder()
            .equals("role", role.value if role else None)
            .equals("is_active", int(is_active) if is_active is not None else None)
            .contains_any(["name", "email"], search)
        )

    @log_db_timing
    def list_page(
        self,
        offset: int,
        limit: int,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> list[User]:
        """Return one page of users matching the filters."""
        where = self._filters(role, is_active, search)
        order = order_by_clause(sort_by, sort_order, USER_SORT_COLUMNS)
        rows = self._conn.execute(
            f"SELECT * FROM users {where.sql()} {order} LIMIT ? OFFSET ?",
            [*where.params, limit, offset],
        ).fetchall()
        return [User.from_row(r) for r in rows]

    @log_db_timing
    def count(
        self,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> int:
        """Count users matching the same filters as :meth:`list_page`."""
        where = self._filters(role, is_active, search)
        row = self._conn.execute(
            f"SELECT COUNT(*) AS total FROM users {where.sql()}", where.params
        ).fetchone()
        return row["total"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        email: str,
        hashed_password: str,
        role: UserRole,
        name: Optional[str] = None,
        phone_number: Optional[str] = None,
        national_id: Optional[str] = None,
        is_active: bool = True,
    ) -> User:
        """Insert a new user row and return the created user."""
        logger.info("Creating user record email=%s role=%s", email, role.value)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO users (
                name, email, hashed_password, role, is_active,
                phone_number, national_id, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                name, email, hashed_password, role.value, int(is_active),
                phone_number, national_id, now, now,
            ),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, user_id: int, **fields) -> Optional[User]:
        """Update user fields and return the updated row."""
        if not fields:
            logger.trace("No user fields to update id=%s", user_id)
            return self.get_by_id(user_id)

        logger.info("Updating user record id=%s fields=%s", user_id, sorted(fields))
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [user_id]
        self._conn.execute(
            f"UPDATE users SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(user_id)

    @log_db_timing
    def touch_last_login(self, user_id: int) -> Optional[User]:
        """Stamp ``last_login`` with the current time without bumping ``updated_at``."""
        logger.info("Recording login for user id=%s", user_id)
        self._conn.execute(
            "UPDATE users SET last_login = ? WHERE id = ?",
            (datetime.now(tz=timezone.utc).isoformat(), user_id),
        )
        return self.get_by_id(user_id)
