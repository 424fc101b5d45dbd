"""JSON file-backed database implementation."""

import json
import logging
from decimal import InvalidOperation
from pathlib import Path
from typing import Any

from billbook.database.json_records import entity_to_record, record_to_entity
from billbook.database.memory import COLLECTIONS, MemoryDatabase
from billbook.domain.entities import Activity, Bill, Party, Transaction, User

logger = logging.getLogger(__name__)

ENTITY_TYPES = {
    "users": User,
    "parties": Party,
    "transactions": Transaction,
    "bills": Bill,
    "activities": Activity,
}

COUNTERS_FILE = "counters.json"

# Key names used in counters.json
COUNTER_KEYS = {
    "users": "userCounter",
    "parties": "partyCounter",
    "transactions": "transactionCounter",
    "bills": "billCounter",
    "activities": "activityCounter",
}


class JSONFileDatabase(MemoryDatabase):
    """In-memory database that mirrors every collection to a JSON file.

    Layout inside ``data_dir``: one array file per entity type
    (``parties.json`` and so on) plus ``counters.json`` holding the next id
    for each type. Every mutation fully rewrites the affected files. A failed
    write is logged and the in-memory state is kept; a file that cannot be
    read back is treated as empty.
    """

    def __init__(self, data_dir: str | Path):
        """Initialize JSON file database.

        Args:
            data_dir: Directory holding the JSON files
        """
        super().__init__()
        self.data_dir = Path(data_dir)
        self._loaded = False

    def connect(self) -> None:
        """Load all collections from disk (once)."""
        if self._loaded:
            return
        self.initialize_schema()
        self._load()
        self._loaded = True

    def initialize_schema(self) -> None:
        """Create the data directory if it does not exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def file_path(self, collection: str) -> Path:
        """Return the path of a collection file (or the counters file)."""
        if collection == "counters":
            return self.data_dir / COUNTERS_FILE
        return self.data_dir / f"{collection}.json"

    def _read_json(self, path: Path, default: Any) -> Any:
        if not path.exists():
            return default
        try:
            with open(path, encoding="utf-8") as fh:
                return json.load(fh)
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}, treating it as empty: {e}")
            return default

    def _write_json(self, path: Path, data: Any) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, ensure_ascii=False)
        except (OSError, TypeError) as e:
            # Best effort: in-memory state stays ahead of disk
            logger.error(f"Failed to write {path}: {e}", exc_info=True)

    def _load(self) -> None:
        for collection in COLLECTIONS:
            entity_type = ENTITY_TYPES[collection]
            path = self.file_path(collection)
            records = self._read_json(path, [])
            if not isinstance(records, list):
                logger.warning(f"{path} does not hold a JSON array, treating it as empty")
                records = []
            try:
                entities = [record_to_entity(entity_type, record) for record in records]
            except (KeyError, TypeError, ValueError, InvalidOperation) as e:
                logger.warning(f"Malformed record in {path}, treating it as empty: {e!r}")
                entities = []
            setattr(self, collection, {entity.id: entity for entity in entities})

        counters = self._read_json(self.file_path("counters"), {})
        if not isinstance(counters, dict):
            logger.warning("counters.json does not hold a JSON object, using defaults")
            counters = {}
        for collection, key in COUNTER_KEYS.items():
            stored = counters.get(key, 1)
            if not isinstance(stored, int) or stored < 1:
                logger.warning(f"Invalid {key} value {stored!r}, using default")
                stored = 1
            # Never hand out an id that is already taken
            highest = max(getattr(self, collection), default=0)
            self.counters[collection] = max(stored, highest + 1)

        logger.debug(
            f"Loaded {len(self.parties)} parties, {len(self.transactions)} transactions, "
            f"{len(self.bills)} bills from {self.data_dir}"
        )

    def _save(self, *collections: str) -> None:
        """Rewrite the files of the named collections."""
        for collection in collections:
            if collection == "counters":
                data = {key: self.counters[name] for name, key in COUNTER_KEYS.items()}
            else:
                items = getattr(self, collection)
                data = [entity_to_record(items[key]) for key in sorted(items)]
            self._write_json(self.file_path(collection), data)
            logger.debug(f"Saved {collection} to {self.file_path(collection)}")
