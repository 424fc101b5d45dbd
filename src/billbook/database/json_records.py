"""Conversion between domain entities and JSON-ready records.

Records use the entity field names as keys. Decimals are written as strings
so no precision is lost, dates and datetimes as ISO-8601 strings, enums as
their values.
"""

from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, TypeVar

from billbook.domain.entities import (
    Activity,
    Bill,
    EntityType,
    Party,
    Transaction,
    TransactionType,
    User,
)

T = TypeVar("T")

# Per-entity decoders for fields that are not plain JSON values
_DECODERS: dict[type, dict[str, Callable[[Any], Any]]] = {
    User: {},
    Party: {
        "balance": Decimal,
        "last_activity_date": datetime.fromisoformat,
        "created_at": datetime.fromisoformat,
        "updated_at": datetime.fromisoformat,
    },
    Transaction: {
        "type": TransactionType,
        "amount": Decimal,
        "date": date.fromisoformat,
        "created_at": datetime.fromisoformat,
        "updated_at": datetime.fromisoformat,
    },
    Bill: {
        "amount": Decimal,
        "upload_date": datetime.fromisoformat,
        "created_at": datetime.fromisoformat,
    },
    Activity: {
        "entity_type": EntityType,
        "timestamp": datetime.fromisoformat,
    },
}


def _encode(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def entity_to_record(entity: Any) -> dict[str, Any]:
    """Convert a domain entity to a JSON-serializable dict."""
    return {f.name: _encode(getattr(entity, f.name)) for f in fields(entity)}


def record_to_entity(entity_type: type[T], record: dict[str, Any]) -> T:
    """Convert a stored record back into a domain entity.

    Raises:
        KeyError: If the record lacks a field
        TypeError, ValueError: If a value cannot be decoded
    """
    if not isinstance(record, dict):
        raise TypeError(f"Expected an object, got {type(record).__name__}")

    decoders = _DECODERS[entity_type]
    values = {}
    for f in fields(entity_type):
        raw = record[f.name]
        decoder = decoders.get(f.name)
        values[f.name] = decoder(raw) if decoder is not None and raw is not None else raw
    if not isinstance(values["id"], int):
        raise ValueError(f"Invalid id {values['id']!r}")
    return entity_type(**values)
