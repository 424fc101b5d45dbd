"""Database layer for billbook application."""

from billbook.database.base import Database
from billbook.database.factories import (
    create_database,
    create_json_database,
    create_memory_database,
    create_sqlite_database,
)

__all__ = [
    "Database",
    "create_database",
    "create_json_database",
    "create_memory_database",
    "create_sqlite_database",
]
