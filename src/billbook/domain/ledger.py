"""Ledger domain service: transactions and party balances."""

import logging
from dataclasses import dataclass
from datetime import date as date_type
from decimal import Decimal
from typing import Any, Optional
from billbook.database.base import Database
from billbook.domain.audit import SYSTEM_USER
from billbook.domain.entities import (
    Party as PartyEntity,
    Transaction as TransactionEntity,
    TransactionType,
)
from billbook.domain.errors import (
    FieldError,
    NotFoundError,
    ValidationError,
    party_not_found,
    transaction_not_found,
)
from billbook.domain import validation

logger = logging.getLogger(__name__)

_UNSET = object()


@dataclass(frozen=True)
class StatementLine:
    """A transaction together with the party balance after it."""

    transaction: TransactionEntity
    running_balance: Decimal


@dataclass(frozen=True)
class PartyStatement:
    """A party's ledger: its entries in date order with running balances."""

    party: PartyEntity
    lines: list[StatementLine]

    @property
    def total_credit(self) -> Decimal:
        return sum(
            (line.transaction.amount for line in self.lines if line.transaction.is_credit),
            Decimal("0"),
        )

    @property
    def total_deposit(self) -> Decimal:
        return sum(
            (line.transaction.amount for line in self.lines if not line.transaction.is_credit),
            Decimal("0"),
        )


class LedgerService:
    """Service for managing ledger entries.

    Creating an entry moves the party balance: CREDIT adds to what the party
    owes, DEPOSIT subtracts from it. Editing an entry does not move the
    balance again.
    """

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        party_id: int,
        type: TransactionType | str,
        amount: Decimal | str,
        date: Optional[date_type] = None,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        performed_by: str = SYSTEM_USER,
    ) -> TransactionEntity:
        """Create a ledger entry and apply it to the party balance.

        Args:
            party_id: Party ID
            type: CREDIT or DEPOSIT
            amount: Positive amount
            date: Entry date (defaults to today)
            reference: Optional reference
            notes: Optional notes
            performed_by: Username recorded in the activity log

        Returns:
            The created transaction

        Raises:
            ValidationError: If type or amount is invalid
            NotFoundError: If the party does not exist
        """
        errors: list[FieldError] = []
        txn_type = validation.transaction_type(type, errors)
        txn_amount = validation.positive_amount(amount, errors)
        validation.raise_if_errors(errors, "Invalid transaction data")

        if self.db.get_party(party_id) is None:
            raise NotFoundError(party_not_found(party_id))

        transaction = self.db.create_transaction(
            party_id=party_id,
            type=txn_type,
            amount=txn_amount,
            date=date or date_type.today(),
            reference=validation.optional_text(reference),
            notes=validation.optional_text(notes),
            performed_by=performed_by,
        )
        logger.info(
            f"Created {txn_type.value} entry {transaction.id} of {txn_amount} for party {party_id}"
        )
        return transaction

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID, or None if not found."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        """Get transaction by ID.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return transaction

    def update_transaction(
        self,
        transaction_id: int,
        party_id: Optional[int] = None,
        type: Optional[TransactionType | str] = None,
        amount: Optional[Decimal | str] = None,
        date: Optional[date_type] = None,
        reference=_UNSET,
        notes=_UNSET,
        performed_by: str = SYSTEM_USER,
    ) -> TransactionEntity:
        """Update transaction fields.

        Only the given fields change; pass ``reference=None`` or ``notes=None``
        to clear them. The party balance is NOT recomputed when the amount or
        type changes; it keeps reflecting the values at creation time.

        Raises:
            NotFoundError: If the transaction or the new party does not exist
            ValidationError: If a field is invalid
        """
        self.require_transaction(transaction_id)

        errors: list[FieldError] = []
        changes: dict[str, Any] = {}
        if type is not None:
            changes["type"] = validation.transaction_type(type, errors)
        if amount is not None:
            changes["amount"] = validation.positive_amount(amount, errors)
        if date is not None:
            changes["date"] = date
        if reference is not _UNSET:
            changes["reference"] = validation.optional_text(reference)
        if notes is not _UNSET:
            changes["notes"] = validation.optional_text(notes)
        validation.raise_if_errors(errors, "Invalid transaction data")

        if party_id is not None:
            if self.db.get_party(party_id) is None:
                raise NotFoundError(party_not_found(party_id))
            changes["party_id"] = party_id

        transaction = self.db.update_transaction(transaction_id, changes, performed_by=performed_by)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        logger.info(f"Updated transaction {transaction_id}")
        return transaction

    def list_transactions(self, party_id: Optional[int] = None) -> list[TransactionEntity]:
        """List transactions, optionally only those of one party."""
        if party_id is not None:
            return self.db.list_transactions_by_party(party_id)
        return self.db.list_transactions()

    def list_recent(self, limit: int = 7) -> list[TransactionEntity]:
        """List the most recent entries, newest date first.

        Raises:
            ValidationError: If limit is not positive
        """
        if limit <= 0:
            raise ValidationError(
                "Invalid limit", [FieldError("limit", "must be greater than zero")]
            )
        return self.db.list_recent_transactions(limit)

    def list_credit_without_bill(self) -> list[TransactionEntity]:
        """List credit entries that still have no bill attached."""
        return self.db.list_credit_transactions_without_bill()

    def get_party_statement(self, party_id: int) -> PartyStatement:
        """Build a party's statement with a running balance per entry.

        Raises:
            NotFoundError: If the party does not exist
        """
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))

        running = Decimal("0")
        lines = []
        ordered = sorted(self.db.list_transactions_by_party(party_id), key=lambda t: (t.date, t.id))
        for transaction in ordered:
            running += transaction.signed_amount
            lines.append(StatementLine(transaction=transaction, running_balance=running))
        return PartyStatement(party=party, lines=lines)
