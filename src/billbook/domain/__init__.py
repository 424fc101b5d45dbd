"""Domain layer for billbook application.

Services live in their own modules (``billbook.domain.party`` and so on) and
are imported from there; this package only re-exports the entities and
errors so the database layer can depend on it without import cycles.
"""

from billbook.domain.entities import (
    Activity,
    Bill,
    EntityType,
    Party,
    Transaction,
    TransactionType,
    User,
)
from billbook.domain.errors import (
    ConflictError,
    DomainError,
    FieldError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "Activity",
    "Bill",
    "EntityType",
    "Party",
    "Transaction",
    "TransactionType",
    "User",
    "ConflictError",
    "DomainError",
    "FieldError",
    "NotFoundError",
    "ValidationError",
]
