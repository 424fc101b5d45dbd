"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from datetime import date, datetime, UTC
from decimal import Decimal

# Import entities directly to keep the database layer free of service imports
from billbook.domain.entities import (
    Activity,
    Bill,
    EntityType,
    Party,
    Transaction,
    TransactionType,
    User,
)
from billbook.domain.audit import SYSTEM_USER

# Fields a generic update may touch. Balances move only through
# update_party_balance and bill links only through link_bill_to_transaction.
PARTY_FIELDS = frozenset({"name", "description", "gstin"})
TRANSACTION_FIELDS = frozenset({"party_id", "type", "amount", "date", "reference", "notes"})


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def check_fields(changes: dict[str, Any], allowed: frozenset[str], kind: str) -> dict[str, Any]:
    """Return the changes that may be merged into a record.

    ``id`` and the timestamps are dropped silently; any other field outside
    ``allowed`` raises ValueError.
    """
    changes = {k: v for k, v in changes.items() if k not in ("id", "created_at", "updated_at")}
    unknown = sorted(set(changes) - allowed)
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(unknown)}")
    return changes


class Database(ABC):
    """Abstract database interface for billbook.

    Every backend honours the same contract: ``get_*`` returns ``None`` for
    absent ids, ``create_*`` assigns the next per-type id, ``update_*``
    returns ``None`` for absent ids, and party/transaction/bill mutations
    append one activity each.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize storage (create tables, load files)."""
        pass

    # User operations
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass

    @abstractmethod
    def create_user(self, username: str, password: str) -> User:
        """Create a user. The password must already be hashed."""
        pass

    # Party operations
    @abstractmethod
    def get_party(self, party_id: int) -> Optional[Party]:
        """Get party by ID."""
        pass

    @abstractmethod
    def list_parties(self) -> list[Party]:
        """List all parties."""
        pass

    @abstractmethod
    def create_party(
        self,
        name: str,
        description: Optional[str] = None,
        gstin: Optional[str] = None,
        performed_by: str = SYSTEM_USER,
    ) -> Party:
        """Create a party with a zero balance and log the activity."""
        pass

    @abstractmethod
    def update_party(
        self, party_id: int, changes: dict[str, Any], performed_by: str = SYSTEM_USER
    ) -> Optional[Party]:
        """Merge changes into a party and log the activity.

        Returns None if the party does not exist.
        """
        pass

    @abstractmethod
    def update_party_balance(self, party_id: int, amount: Decimal, is_credit: bool) -> Optional[Party]:
        """Apply a signed amount to the party balance.

        Credit adds to the balance, deposit subtracts from it. Also stamps
        ``last_activity_date``. This is the only path that changes a balance.
        """
        pass

    # Transaction operations
    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions."""
        pass

    @abstractmethod
    def list_transactions_by_party(self, party_id: int) -> list[Transaction]:
        """List transactions belonging to a party."""
        pass

    @abstractmethod
    def list_recent_transactions(self, limit: int = 7) -> list[Transaction]:
        """List the most recent transactions by date, newest first."""
        pass

    @abstractmethod
    def list_credit_transactions_without_bill(self) -> list[Transaction]:
        """List credit transactions that have no bill attached."""
        pass

    @abstractmethod
    def create_transaction(
        self,
        party_id: int,
        type: TransactionType,
        amount: Decimal,
        date: date,
        reference: Optional[str] = None,
        notes: Optional[str] = None,
        performed_by: str = SYSTEM_USER,
    ) -> Transaction:
        """Create a transaction, apply it to the party balance and log it."""
        pass

    @abstractmethod
    def update_transaction(
        self, transaction_id: int, changes: dict[str, Any], performed_by: str = SYSTEM_USER
    ) -> Optional[Transaction]:
        """Merge changes into a transaction and log the activity.

        The party balance is not adjusted, even if amount or type change.
        Returns None if the transaction does not exist.
        """
        pass

    # Bill operations
    @abstractmethod
    def get_bill(self, bill_id: int) -> Optional[Bill]:
        """Get bill by ID."""
        pass

    @abstractmethod
    def list_bills(self) -> list[Bill]:
        """List all bills."""
        pass

    @abstractmethod
    def list_bills_by_party(self, party_id: int) -> list[Bill]:
        """List bills belonging to a party."""
        pass

    @abstractmethod
    def create_bill(
        self,
        party_id: int,
        filename: str,
        filepath: str,
        transaction_id: Optional[int] = None,
        reference: Optional[str] = None,
        amount: Optional[Decimal] = None,
        upload_date: Optional[datetime] = None,
        performed_by: str = SYSTEM_USER,
    ) -> Bill:
        """Create a bill, link it when a transaction is given, and log it."""
        pass

    @abstractmethod
    def link_bill_to_transaction(self, bill_id: int, transaction_id: int) -> None:
        """Link a bill and a transaction in both directions.

        A missing transaction or bill makes this a no-op, and repeating the
        call with the same pair changes nothing.
        """
        pass

    # Activity operations
    @abstractmethod
    def list_activities(self) -> list[Activity]:
        """List all activities, newest first."""
        pass

    @abstractmethod
    def create_activity(
        self,
        performed_by: str,
        description: str,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        entity_name: Optional[str] = None,
        details: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> Activity:
        """Append an activity record."""
        pass
