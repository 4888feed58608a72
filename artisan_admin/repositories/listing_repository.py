"""
Repository layer for listing persistence.
All SQL for the `product_listings`, `service_listings` and `training_offers`
tables lives here. The three tables share their lifecycle columns, so the
query logic sits on :class:`ListingRepository` and each subclass only names
its table and row model.
"""
import json
import sqlite3
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
import logging

from artisan_admin.core.logging_config import log_db_timing
from artisan_admin.models.listing import (
    Listing,
    ListingKind,
    ListingStatus,
    ProductListing,
    ServiceListing,
    TrainingOffer,
)
from artisan_admin.repositories.query_helpers import WhereBuilder, order_by_clause

logger = logging.getLogger(__name__)

LISTING_SORT_COLUMNS = {
    "createdAt": "l.created_at",
    "updatedAt": "l.updated_at",
    "title": "l.title",
    "price": "l.price",
}


def _to_column_value(value: Any) -> Any:
    """Convert Python values to what SQLite stores (JSON arrays, ints for bools)."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (list, tuple)):
        return json.dumps(list(value))
    return value


class ListingRepository:
    """Shared data access for the three listing tables."""

    table: str = ""
    model: type = Listing

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing %s", type(self).__name__)
        self._conn = conn

    @property
    def _select(self) -> str:
        return f"""
            SELECT l.*,
                   u.name  AS artisan_name,
                   u.email AS artisan_email,
                   c.name  AS category_name,
                   c.slug  AS category_slug
            FROM {self.table} l
            JOIN users u      ON u.id = l.artisan_id
            JOIN categories c ON c.id = l.category_id
        """

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, listing_id: int) -> Optional[Listing]:
        logger.trace("Fetching %s id=%s", self.table, listing_id)
        row = self._conn.execute(
            f"{self._select} WHERE l.id = ?", (listing_id,)
        ).fetchone()
        return self.model.from_row(row) if row else None

    def _filters(
        self,
        status: Optional[ListingStatus],
        category_id: Optional[int],
        artisan_id: Optional[int],
        search: Optional[str],
    ) -> WhereBuilder:
        return (
            WhereBuilder()
            .equals("l.status", status.value if status else None)
            .equals("l.category_id", category_id)
            .equals("l.artisan_id", artisan_id)
            .contains_any(["l.title", "l.description"], search)
        )

    @log_db_timing
    def list_page(
        self,
        offset: int,
        limit: int,
        status: Optional[ListingStatus] = None,
        category_id: Optional[int] = None,
        artisan_id: Optional[int] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> list[Listing]:
        where = self._filters(status, category_id, artisan_id, search)
        order = order_by_clause(
            sort_by,
            sort_order,
            LISTING_SORT_COLUMNS,
            default_column="l.created_at",
            tie_breaker="l.id",
        )
        rows = self._conn.execute(
            f"{self._select} {where.sql()} {order} LIMIT ? OFFSET ?",
            [*where.params, limit, offset],
        ).fetchall()
        return [self.model.from_row(r) for r in rows]

    @log_db_timing
    def count(
        self,
        status: Optional[ListingStatus] = None,
        category_id: Optional[int] = None,
        artisan_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> int:
        where = self._filters(status, category_id, artisan_id, search)
        row = self._conn.execute(
            f"SELECT COUNT(*) AS total FROM {self.table} l {where.sql()}",
            where.params,
        ).fetchone()
        return row["total"]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(self, **fields) -> Listing:
        """Insert a listing; *fields* are column names mapped to Python values."""
        logger.info("Creating %s record title=%s", self.table, fields.get("title"))
        now = datetime.now(tz=timezone.utc).isoformat()
        fields.setdefault("created_at", now)
        fields.setdefault("updated_at", now)
        columns = ", ".join(fields)
        placeholders = ", ".join("?" for _ in fields)
        cursor = self._conn.execute(
            f"INSERT INTO {self.table} ({columns}) VALUES ({placeholders})",
            [_to_column_value(v) for v in fields.values()],
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, listing_id: int, **fields) -> Optional[Listing]:
        if not fields:
            logger.trace("No %s fields to update id=%s", self.table, listing_id)
            return self.get_by_id(listing_id)

        logger.info("Updating %s record id=%s fields=%s", self.table, listing_id, sorted(fields))
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = [_to_column_value(v) for v in fields.values()] + [listing_id]
        self._conn.execute(
            f"UPDATE {self.table} SET {set_clause} WHERE id = ?", values
        )
        return self.get_by_id(listing_id)

    @log_db_timing
    def delete(self, listing_id: int) -> bool:
        logger.info("Deleting %s record id=%s", self.table, listing_id)
        cursor = self._conn.execute(
            f"DELETE FROM {self.table} WHERE id = ?", (listing_id,)
        )
        logger.info("%s delete affected %s rows", self.table, cursor.rowcount)
        return cursor.rowcount > 0


class ProductRepository(ListingRepository):
    table = "product_listings"
    model = ProductListing

    @log_db_timing
    def sku_taken(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM product_listings WHERE sku = ? AND id IS NOT ?",
            (sku, exclude_id),
        ).fetchone()
        return row is not None


class ServiceRepository(ListingRepository):
    table = "service_listings"
    model = ServiceListing


class TrainingRepository(ListingRepository):
    table = "training_offers"
    model = TrainingOffer


REPOSITORIES: dict[ListingKind, type[ListingRepository]] = {
    ListingKind.PRODUCT: ProductRepository,
    ListingKind.SERVICE: ServiceRepository,
    ListingKind.TRAINING: TrainingRepository,
}


def repository_for(kind: ListingKind, conn: sqlite3.Connection) -> ListingRepository:
    """Return the repository instance that stores listings of *kind*."""
    return REPOSITORIES[kind](conn)
