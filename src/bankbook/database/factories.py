"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from bankbook.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "BANKBOOK_DB_PATH"
DEFAULT_DB_PATH = Path("~/.bankbook/bankbook.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file to use.

    An explicit path wins, then BANKBOOK_DB_PATH, then ~/.bankbook/bankbook.db.
    """
    chosen = database_path or os.environ.get(DB_PATH_ENV_VAR) or DEFAULT_DB_PATH
    return Path(chosen).expanduser()


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance, creating its directory if needed.

    Args:
        database_path: Path to SQLite database file (see resolve_database_path)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
