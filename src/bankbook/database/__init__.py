"""Database layer for bankbook application."""

from bankbook.database.base import Database
from bankbook.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
