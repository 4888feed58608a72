"""
SQL DDL statements for all application tables.
Tables are created in dependency order so foreign keys resolve correctly.

Migration helpers run ALTER TABLE only when a column does not yet exist,
making them safe to call on every startup (idempotent).
"""
from artisan_admin.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    name              TEXT,
    email             TEXT    NOT NULL UNIQUE,
    hashed_password   TEXT    NOT NULL,
    role              TEXT    NOT NULL DEFAULT 'CUSTOMER'
                              CHECK(role IN ('ADMIN', 'ARTISAN', 'CUSTOMER')),
    is_active         INTEGER NOT NULL DEFAULT 1,
    phone_number      TEXT,
    national_id       TEXT,
    last_login        TEXT,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS categories (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL,
    slug        TEXT    NOT NULL UNIQUE,
    description TEXT,
    type        TEXT    NOT NULL CHECK(type IN ('PRODUCT', 'SERVICE', 'TRAINING')),
    parent_id   INTEGER REFERENCES categories(id) ON DELETE RESTRICT,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

_LISTING_STATUS_CHECK = (
    "CHECK(status IN ('DRAFT', 'PENDING_APPROVAL', 'ACTIVE', "
    "'INACTIVE', 'REJECTED', 'ARCHIVED'))"
)

CREATE_PRODUCT_LISTINGS_TABLE = f"""
CREATE TABLE IF NOT EXISTS product_listings (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    title             TEXT    NOT NULL,
    description       TEXT    NOT NULL,
    price             REAL    NOT NULL CHECK(price >= 0),
    currency          TEXT    NOT NULL DEFAULT 'GHS',
    images            TEXT    NOT NULL DEFAULT '[]',
    stock_quantity    INTEGER CHECK(stock_quantity IS NULL OR stock_quantity >= 0),
    materials         TEXT    NOT NULL DEFAULT '[]',
    dimensions        TEXT,
    sku               TEXT    UNIQUE,
    shipping_details  TEXT,
    status            TEXT    NOT NULL DEFAULT 'PENDING_APPROVAL' {_LISTING_STATUS_CHECK},
    rejection_reason  TEXT,
    artisan_id        INTEGER NOT NULL REFERENCES users(id) ON DELETE RESTRICT,
    category_id       INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_SERVICE_LISTINGS_TABLE = f"""
CREATE TABLE IF NOT EXISTS service_listings (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    title             TEXT    NOT NULL,
    description       TEXT    NOT NULL,
    price_type        TEXT    NOT NULL DEFAULT 'FIXED'
                              CHECK(price_type IN ('FIXED', 'HOURLY', 'QUOTE')),
    price             REAL    CHECK(price IS NULL OR price >= 0),
    currency          TEXT    NOT NULL DEFAULT 'GHS',
    images            TEXT    NOT NULL DEFAULT '[]',
    location_type     TEXT    NOT NULL DEFAULT 'IN_STUDIO'
                              CHECK(location_type IN ('IN_STUDIO', 'ON_SITE', 'REMOTE')),
    location          TEXT,
    availability      TEXT,
    status            TEXT    NOT NULL DEFAULT 'PENDING_APPROVAL' {_LISTING_STATUS_CHECK},
    rejection_reason  TEXT,
    artisan_id        INTEGER NOT NULL REFERENCES users(id) ON DELETE RESTRICT,
    category_id       INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_TRAINING_OFFERS_TABLE = f"""
CREATE TABLE IF NOT EXISTS training_offers (
    id                   INTEGER PRIMARY KEY AUTOINCREMENT,
    title                TEXT    NOT NULL,
    description          TEXT    NOT NULL,
    is_free              INTEGER NOT NULL DEFAULT 0,
    price                REAL    CHECK(price IS NULL OR price >= 0),
    currency             TEXT,
    images               TEXT    NOT NULL DEFAULT '[]',
    duration             TEXT    NOT NULL,
    schedule_details     TEXT,
    location             TEXT    NOT NULL,
    capacity             INTEGER CHECK(capacity IS NULL OR capacity > 0),
    prerequisites        TEXT,
    what_you_will_learn  TEXT    NOT NULL DEFAULT '[]',
    status               TEXT    NOT NULL DEFAULT 'PENDING_APPROVAL' {_LISTING_STATUS_CHECK},
    rejection_reason     TEXT,
    artisan_id           INTEGER NOT NULL REFERENCES users(id) ON DELETE RESTRICT,
    category_id          INTEGER NOT NULL REFERENCES categories(id) ON DELETE RESTRICT,
    created_at           TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at           TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS ix_categories_parent_id ON categories(parent_id)",
    "CREATE INDEX IF NOT EXISTS ix_categories_type_name ON categories(type, name)",
    "CREATE INDEX IF NOT EXISTS ix_product_listings_status ON product_listings(status)",
    "CREATE INDEX IF NOT EXISTS ix_service_listings_status ON service_listings(status)",
    "CREATE INDEX IF NOT EXISTS ix_training_offers_status ON training_offers(status)",
]

# ---------------------------------------------------------------------------
# Incremental migrations (idempotent, safe to run every startup)
# ---------------------------------------------------------------------------

MIGRATIONS = [
    # Columns collected at artisan registration, absent from early databases
    ("users", "phone_number", "ALTER TABLE users ADD COLUMN phone_number TEXT"),
    ("users", "national_id",  "ALTER TABLE users ADD COLUMN national_id  TEXT"),
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_CATEGORIES_TABLE,
    CREATE_PRODUCT_LISTINGS_TABLE,
    CREATE_SERVICE_LISTINGS_TABLE,
    CREATE_TRAINING_OFFERS_TABLE,
]


def _column_exists(conn, table: str, column: str) -> bool:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return any(r["name"] == column for r in rows)


def create_tables() -> None:
    """Create all tables and indexes, then apply incremental migrations."""
    conn = get_connection()
    try:
        cursor = conn.cursor()

        for ddl in ALL_TABLES:
            cursor.execute(ddl)
        for ddl in CREATE_INDEXES:
            cursor.execute(ddl)

        for table, column, alter_sql in MIGRATIONS:
            if not _column_exists(conn, table, column):
                cursor.execute(alter_sql)

        conn.commit()
    finally:
        conn.close()
