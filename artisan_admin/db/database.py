"""SQLite connection handling for the marketplace database."""

import logging
import os
import sqlite3
from contextlib import contextmanager

from artisan_admin.core.config import settings

logger = logging.getLogger(__name__)


def database_path() -> str:
    """File path behind ``DATABASE_URL``; read per call so tests can repoint it."""
    return settings.DATABASE_URL.replace("sqlite:///", "")


def get_connection() -> sqlite3.Connection:
    """Open a connection with ``sqlite3.Row`` rows and foreign keys enforced."""
    db_path = database_path()
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)
    logger.trace("Opening database connection to %s", db_path)
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextmanager
def get_db():
    """One unit of work: commit when the block succeeds, roll back when it raises."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
        logger.trace("Database transaction committed")
    except Exception:
        logger.warning("Database transaction rolled back")
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db() -> None:
    """Create missing tables and apply column migrations."""
    logger.info("Initializing database schema at %s", database_path())
    from artisan_admin.db import schema
    schema.create_tables()
