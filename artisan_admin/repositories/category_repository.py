"""
Repository layer for Category persistence.
All SQL for the `categories` table lives here.
"""
import sqlite3
from typing import Optional
from datetime import datetime, timezone
import logging

from artisan_admin.core.logging_config import log_db_timing
from artisan_admin.models.category import Category, CategoryType

logger = logging.getLogger(__name__)


class CategoryRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing CategoryRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, category_id: int) -> Optional[Category]:
        logger.trace("Fetching category id=%s", category_id)
        row = self._conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return Category.from_row(row) if row else None

    @log_db_timing
    def find_by_name_and_type(
        self,
        name: str,
        category_type: CategoryType,
        exclude_id: Optional[int] = None,
    ) -> Optional[Category]:
        """Exact name match within a type; case handling follows the column collation."""
        logger.trace("Fetching category by name=%s type=%s", name, category_type.value)
        row = self._conn.execute(
            "SELECT * FROM categories WHERE name = ? AND type = ? AND id IS NOT ?",
            (name, category_type.value, exclude_id),
        ).fetchone()
        return Category.from_row(row) if row else None

    @log_db_timing
    def slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM categories WHERE slug = ? AND id IS NOT ?",
            (slug, exclude_id),
        ).fetchone()
        return row is not None

    @log_db_timing
    def list_all(self, category_type: Optional[CategoryType] = None) -> list[Category]:
        """Flat list ordered by type, then name."""
        logger.trace("Listing categories type=%s", category_type)
        if category_type is not None:
            rows = self._conn.execute(
                "SELECT * FROM categories WHERE type = ? ORDER BY type, name, id",
                (category_type.value,),
            ).fetchall()
        else:
            rows = self._conn.execute(
                "SELECT * FROM categories ORDER BY type, name, id"
            ).fetchall()
        return [Category.from_row(r) for r in rows]

    @log_db_timing
    def count_children(self, category_id: int) -> int:
        row = self._conn.execute(
            "SELECT COUNT(*) AS total FROM categories WHERE parent_id = ?",
            (category_id,),
        ).fetchone()
        return row["total"]

    @log_db_timing
    def count_listings(self, category_id: int) -> int:
        """Listings of any kind classified under the category."""
        row = self._conn.execute(
            """
            SELECT (SELECT COUNT(*) FROM product_listings WHERE category_id = :id)
                 + (SELECT COUNT(*) FROM service_listings WHERE category_id = :id)
                 + (SELECT COUNT(*) FROM training_offers  WHERE category_id = :id) AS total
            """,
            {"id": category_id},
        ).fetchone()
        return row["total"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        name: str,
        slug: str,
        category_type: CategoryType,
        description: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> Category:
        logger.info("Creating category record name=%s slug=%s", name, slug)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO categories (name, slug, description, type, parent_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (name, slug, description, category_type.value, parent_id, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, category_id: int, **fields) -> Optional[Category]:
        """Update the given columns; enum values must already be plain strings."""
        if not fields:
            logger.trace("No category fields to update id=%s", category_id)
            return self.get_by_id(category_id)

        logger.info("Updating category record id=%s fields=%s", category_id, sorted(fields))
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [category_id]
        self._conn.execute(
            f"UPDATE categories SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(category_id)

    @log_db_timing
    def delete(self, category_id: int) -> bool:
        """Delete a category. Raises sqlite3.IntegrityError while listings reference it."""
        logger.info("Deleting category record id=%s", category_id)
        cursor = self._conn.execute(
            "DELETE FROM categories WHERE id = ?", (category_id,)
        )
        logger.info("Category delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
