"""Database layer for projtrack application."""

from projtrack.database.base import Database
from projtrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
