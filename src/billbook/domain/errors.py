"""Shared domain error messages and error types."""

from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation problem."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    Carries the list of field errors that caused the failure.
    """

    def __init__(self, message: str, errors: Optional[Iterable[FieldError]] = None):
        super().__init__(message)
        self.errors: list[FieldError] = list(errors or [])


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations or a bill already linked."""


def user_not_found(user_id: int) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def party_not_found(party_id: int) -> str:
    """Return message for missing party by ID."""
    return f"Party {party_id} not found"


def party_name_not_found(name: str) -> str:
    """Return message for missing party by name."""
    return f"Party '{name}' not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def bill_not_found(bill_id: int) -> str:
    """Return message for missing bill."""
    return f"Bill {bill_id} not found"


def duplicate_gstin(gstin: str) -> str:
    """Return message for a GSTIN already used by another party."""
    return f"A party with GSTIN '{gstin}' already exists"


def duplicate_username(username: str) -> str:
    """Return message for a username that is taken."""
    return f"User '{username}' already exists"


def bill_already_attached(transaction_id: int) -> str:
    """Return message when a transaction already carries a bill."""
    return f"Transaction {transaction_id} already has a bill attached"


def bill_requires_credit(transaction_id: int) -> str:
    """Return message when a bill targets a non-credit transaction."""
    return (
        f"Bills can only be attached to credit transactions "
        f"(transaction {transaction_id} is a deposit)"
    )
