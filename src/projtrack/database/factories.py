"""Construction of the SQLite-backed store."""

import os
from pathlib import Path
from typing import Optional

from projtrack.config import ENV_DB_PATH
from projtrack.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".projtrack"
DEFAULT_DB_NAME = "projtrack.db"


def default_database_path() -> str:
    """Return ~/.projtrack/projtrack.db, creating the directory on first use."""
    DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
    return str(DEFAULT_DB_DIR / DEFAULT_DB_NAME)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a store for a SQLite file.

    The path is taken from the argument, then from PROJTRACK_DB_PATH, then
    from default_database_path(). The store is not connected yet.

    Args:
        database_path: SQLite file to use

    Returns:
        SQLAlchemyDatabase for the resolved file
    """
    path = database_path or os.environ.get(ENV_DB_PATH) or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}", database_path=path)
