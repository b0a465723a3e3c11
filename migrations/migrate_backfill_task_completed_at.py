#!/usr/bin/env python3
"""Migration script to make task status and completed_at agree.

Older data could hold a completed task without a completion time, or a
pending / in-progress task that still carries one. Reads of such tasks fail
with InconsistentStateError, so this script fixes them in place:
- status 'completed' and completed_at NULL -> completed_at = created_at
- any other status with completed_at set -> completed_at = NULL

Usage:
    python migrations/migrate_backfill_task_completed_at.py [--db-path PATH] [--dry-run]
"""

import sys
from pathlib import Path

# Add src to path so we can import projtrack modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from projtrack.database.factories import create_sqlite_database
from projtrack.database.models import Task
from projtrack.domain.entities import TaskStatus


def migrate_database(database_path: str | None = None, dry_run: bool = False) -> tuple[int, int]:
    """Repair tasks whose status and completed_at disagree.

    Args:
        database_path: Path to database file. If None, uses default location.
        dry_run: Count affected tasks without changing them

    Returns:
        Tuple of (tasks stamped, tasks cleared)
    """
    db = create_sqlite_database(database_path=database_path)
    db.connect()

    try:
        session = db.session_factory()
        try:
            unstamped = session.query(Task).filter(
                Task.status == TaskStatus.COMPLETED.value,
                Task.completed_at.is_(None),
            )
            stale = session.query(Task).filter(
                Task.status != TaskStatus.COMPLETED.value,
                Task.completed_at.isnot(None),
            )

            if dry_run:
                counts = (unstamped.count(), stale.count())
            else:
                # Creation time is the only timestamp known for these tasks
                stamped = unstamped.update(
                    {Task.completed_at: Task.created_at}, synchronize_session=False
                )
                cleared = stale.update({Task.completed_at: None}, synchronize_session=False)
                session.commit()
                counts = (stamped, cleared)
        finally:
            session.close()

        prefix = "Would repair" if dry_run else "Repaired"
        print(f"{prefix} {counts[0]} completed task(s) missing completed_at")
        print(f"{prefix} {counts[1]} non-completed task(s) with a stale completed_at")
        return counts

    except Exception as e:
        print(f"Migration failed: {e}")
        raise
    finally:
        db.disconnect()


def main():
    """Main entry point for migration script."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Repair tasks whose status and completed_at disagree"
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="Path to database file (overrides PROJTRACK_DB_PATH environment variable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Only report what would change")
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path, dry_run=args.dry_run)
        return 0
    except Exception as e:
        print(f"\nMigration failed: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
