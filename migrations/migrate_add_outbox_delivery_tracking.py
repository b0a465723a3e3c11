#!/usr/bin/env python3
"""Migration script to add delivery tracking columns to outbox_events table.

Databases created before relay failures were recorded lack two columns:
- attempts (INTEGER, default=0)
- last_error (TEXT, nullable)

Existing delivered events keep attempts=0; only new relay runs count.

Usage:
    python migrations/migrate_add_outbox_delivery_tracking.py [--db-path PATH]
"""

import sys
from pathlib import Path

# Add src to path so we can import projtrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import text, inspect
from projtrack.database.factories import create_sqlite_database

NEW_COLUMNS = (
    ("attempts", "INTEGER NOT NULL DEFAULT 0"),
    ("last_error", "TEXT"),
)


def column_exists(engine, table_name: str, column_name: str) -> bool:
    """Check if a column exists in a table."""
    inspector = inspect(engine)
    columns = [col["name"] for col in inspector.get_columns(table_name)]
    return column_name in columns


def migrate_database(database_path: str | None = None) -> None:
    """Add the missing outbox delivery tracking columns.

    Args:
        database_path: Path to database file. If None, uses default location.

    Raises:
        Exception: If migration fails
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            engine = session.bind
            if engine is None:
                raise Exception("Could not get database engine from session")
        finally:
            session.close()

        if "outbox_events" not in inspect(engine).get_table_names():
            raise Exception("Table 'outbox_events' does not exist. Please initialize the database schema first.")

        missing = [(name, ddl) for name, ddl in NEW_COLUMNS if not column_exists(engine, "outbox_events", name)]
        if not missing:
            print("Migration already applied: outbox_events has attempts and last_error")
            return

        print("Starting migration: adding outbox delivery tracking columns...")
        with engine.begin() as conn:
            for name, ddl in missing:
                conn.execute(text(f"ALTER TABLE outbox_events ADD COLUMN {name} {ddl}"))
                print(f"  Added column: {name}")

        print("Migration completed successfully!")

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Migrate database to add outbox delivery tracking columns"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides PROJTRACK_DB_PATH environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
