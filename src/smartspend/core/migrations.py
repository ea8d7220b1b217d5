"""Schema versioning and migrations for the SmartSpend database."""

from __future__ import annotations

from smartspend.core.database import DatabaseConnection
from smartspend.core.exceptions import DatabaseError

CURRENT_SCHEMA_VERSION = 2

MIGRATIONS: dict[int, str | list[str]] = {
    1: """
    -- Schema version tracking
    CREATE TABLE IF NOT EXISTS schema_version (
        version INTEGER NOT NULL,
        applied_at TEXT NOT NULL DEFAULT (datetime('now'))
    );

    -- Users
    CREATE TABLE IF NOT EXISTS users (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT,
        google_id TEXT,
        avatar TEXT,
        preferences TEXT NOT NULL DEFAULT '{}',
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    );
    CREATE UNIQUE INDEX IF NOT EXISTS idx_users_google
        ON users(google_id) WHERE google_id IS NOT NULL;

    -- Bills
    CREATE TABLE IF NOT EXISTS bills (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        name TEXT NOT NULL,
        amount_cents INTEGER NOT NULL,
        due_date TEXT NOT NULL,
        category TEXT NOT NULL,
        is_paid INTEGER NOT NULL DEFAULT 0,
        is_recurring INTEGER NOT NULL DEFAULT 0,
        recurring_period TEXT,
        reminder_date TEXT,
        notes TEXT,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    );
    CREATE INDEX IF NOT EXISTS idx_bills_user_due ON bills(user_id, due_date);

    -- Expenses
    CREATE TABLE IF NOT EXISTS expenses (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        amount_cents INTEGER NOT NULL,
        description TEXT NOT NULL,
        category TEXT NOT NULL,
        date TEXT NOT NULL,
        payment_method TEXT NOT NULL DEFAULT 'Other',
        receipt TEXT,
        notes TEXT,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    );
    CREATE INDEX IF NOT EXISTS idx_expenses_user_date ON expenses(user_id, date);
    CREATE INDEX IF NOT EXISTS idx_expenses_user_category ON expenses(user_id, category);

    -- Warranties
    CREATE TABLE IF NOT EXISTS warranties (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        product_name TEXT NOT NULL,
        purchase_date TEXT,
        expiration_date TEXT NOT NULL,
        category TEXT NOT NULL,
        retailer TEXT,
        purchase_price_cents INTEGER,
        document_urls TEXT NOT NULL DEFAULT '[]',
        notes TEXT,
        reminder_date TEXT,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    );
    CREATE INDEX IF NOT EXISTS idx_warranties_user_exp ON warranties(user_id, expiration_date);

    INSERT INTO schema_version (version) VALUES (1);
    """,
    2: [
        # Per-warranty currency for purchase price
        "ALTER TABLE warranties ADD COLUMN currency TEXT NOT NULL DEFAULT 'USD'",
        "INSERT INTO schema_version (version) VALUES (2)",
    ],
}


def get_schema_version(db: DatabaseConnection) -> int:
    """Get the current schema version, or 0 if the table doesn't exist."""
    try:
        row = db.fetchone("SELECT MAX(version) as v FROM schema_version")
        return row["v"] if row and row["v"] else 0
    except DatabaseError:
        return 0


def run_migrations(db: DatabaseConnection) -> int:
    """Run all pending migrations and return the final schema version."""
    current = get_schema_version(db)

    for version in sorted(MIGRATIONS.keys()):
        if version > current:
            try:
                migration = MIGRATIONS[version]
                if isinstance(migration, list):
                    for stmt in migration:
                        db.execute(stmt)
                    db.commit()
                else:
                    db.conn.executescript(migration)
                    db.commit()
                current = version
            except Exception as e:
                raise DatabaseError(f"Migration to v{version} failed: {e}") from e

    return current


def initialize_database(db: DatabaseConnection) -> int:
    """Set up the database schema from scratch or run pending migrations."""
    return run_migrations(db)
