"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from billbook.database.base import Database
from billbook.database.json_db import JSONFileDatabase
from billbook.database.memory import MemoryDatabase
from billbook.database.sqlalchemy_db import SQLAlchemyDatabase

BACKENDS = ("memory", "json", "sqlite")
DEFAULT_BACKEND = "json"
SQLITE_FILENAME = "billbook.db"


def resolve_data_dir(data_dir: Optional[str | Path] = None) -> Path:
    """Resolve the directory holding billbook data.

    Args:
        data_dir: Explicit directory. If None, checks BILLBOOK_DATA_DIR
            environment variable, then defaults to ~/.billbook

    Returns:
        Path of the (existing) data directory
    """
    if data_dir is None:
        # Check environment variable
        data_dir = os.environ.get("BILLBOOK_DATA_DIR")

    if data_dir is None:
        data_dir = Path.home() / ".billbook"

    path = Path(data_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path


def create_memory_database() -> MemoryDatabase:
    """Create an in-memory database instance (nothing is persisted)."""
    return MemoryDatabase()


def create_json_database(data_dir: Optional[str | Path] = None) -> JSONFileDatabase:
    """Create a JSON file-backed database instance.

    Args:
        data_dir: Directory for the JSON files (see resolve_data_dir)
    """
    return JSONFileDatabase(resolve_data_dir(data_dir))


def create_sqlite_database(database_path: Optional[str | Path] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, uses
            billbook.db inside the data directory

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = resolve_data_dir() / SQLITE_FILENAME

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(backend: str = DEFAULT_BACKEND, data_dir: Optional[str | Path] = None) -> Database:
    """Create the database for the selected backend.

    Args:
        backend: One of "memory", "json" or "sqlite"
        data_dir: Data directory for the persistent backends

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend == "memory":
        return create_memory_database()
    if backend == "json":
        return create_json_database(data_dir)
    if backend == "sqlite":
        return create_sqlite_database(resolve_data_dir(data_dir) / SQLITE_FILENAME)
    raise ValueError(f"Unknown backend '{backend}'. Supported backends: {', '.join(BACKENDS)}")
