"""Shared pytest fixtures for billbook tests."""

import logging
from pathlib import Path
import pytest

from billbook.database.factories import (
    create_json_database,
    create_memory_database,
    create_sqlite_database,
)
from billbook.domain.activity import ActivityService
from billbook.domain.bill import BillService
from billbook.domain.ledger import LedgerService
from billbook.domain.party import PartyService
from billbook.domain.user import UserService
from billbook.utils.bill_files import BillFileStore

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\ntrailer\n%%EOF\n"


@pytest.fixture(params=["memory", "json", "sqlite"])
def db(request, tmp_path):
    """Create an empty database for each storage backend."""
    if request.param == "memory":
        database = create_memory_database()
    elif request.param == "json":
        database = create_json_database(tmp_path / "data")
    else:
        database = create_sqlite_database(database_path=tmp_path / "billbook.db")
    database.connect()
    database.initialize_schema()

    yield database

    database.disconnect()


@pytest.fixture
def json_dir(tmp_path):
    """Return a data directory for JSON store tests."""
    return tmp_path / "json-data"


@pytest.fixture
def party_service(db):
    """Create a PartyService on the test database."""
    return PartyService(db)


@pytest.fixture
def ledger_service(db):
    """Create a LedgerService on the test database."""
    return LedgerService(db)


@pytest.fixture
def activity_service(db):
    """Create an ActivityService on the test database."""
    return ActivityService(db)


@pytest.fixture
def user_service(db):
    """Create a UserService on the test database."""
    return UserService(db)


@pytest.fixture
def file_store(tmp_path):
    """Create a bill file store under a temporary uploads directory."""
    return BillFileStore(tmp_path / "uploads")


@pytest.fixture
def bill_service(db, file_store):
    """Create a BillService on the test database."""
    return BillService(db, file_store)


@pytest.fixture
def sample_party(party_service):
    """Create a sample party for testing."""
    return party_service.create_party(name="Acme Traders", description="Wholesale supplier")


@pytest.fixture
def pdf_bytes():
    """Return the bytes of a minimal PDF document."""
    return PDF_BYTES


@pytest.fixture
def pdf_file(tmp_path):
    """Write a minimal PDF to disk and return its path."""
    path = tmp_path / "invoice.pdf"
    path.write_bytes(PDF_BYTES)
    return path


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Return a data directory for CLI runs."""
    return tmp_path / "billbook-data"


@pytest.fixture(autouse=True)
def reset_billbook_logging():
    """Undo the CLI logging setup so later tests see records through caplog."""
    yield
    logger = logging.getLogger("billbook")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
