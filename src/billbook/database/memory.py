"""In-memory database implementation."""

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from billbook.database.base import (
    Database,
    PARTY_FIELDS,
    TRANSACTION_FIELDS,
    check_fields,
    utcnow,
)
from billbook.domain import audit
from billbook.domain.audit import SYSTEM_USER
from billbook.domain.entities import (
    Activity,
    Bill,
    EntityType,
    Party,
    Transaction,
    TransactionType,
    User,
)

COLLECTIONS = ("users", "parties", "transactions", "bills", "activities")


class MemoryDatabase(Database):
    """Dictionary-backed implementation of the Database interface.

    Each entity type lives in its own ``id -> entity`` map with its own id
    counter. Subclasses persist state by overriding ``_save``, which is
    called after every mutation with the names of the collections that
    changed (plus ``"counters"`` when an id was assigned).
    """

    def __init__(self):
        self.users: dict[int, User] = {}
        self.parties: dict[int, Party] = {}
        self.transactions: dict[int, Transaction] = {}
        self.bills: dict[int, Bill] = {}
        self.activities: dict[int, Activity] = {}
        self.counters: dict[str, int] = {name: 1 for name in COLLECTIONS}

    def connect(self) -> None:
        """Connect to the database."""
        # Nothing to connect to
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    def initialize_schema(self) -> None:
        """Initialize storage."""
        pass

    def _next_id(self, collection: str) -> int:
        next_id = self.counters[collection]
        self.counters[collection] = next_id + 1
        return next_id

    def _save(self, *collections: str) -> None:
        """Persist the named collections. No-op for the in-memory store."""
        pass

    # User operations
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        for user in self.users.values():
            if user.username == username:
                return user
        return None

    def create_user(self, username: str, password: str) -> User:
        """Create a user. Returns the stored user."""
        user = User(id=self._next_id("users"), username=username, password=password)
        self.users[user.id] = user
        self._save("users", "counters")
        return user

    # Party operations
    def get_party(self, party_id: int) -> Optional[Party]:
        """Get party by ID."""
        return self.parties.get(party_id)

    def list_parties(self) -> list[Party]:
        """List all parties in creation order."""
        return list(self.parties.values())

    def create_party(
        self,
        name: str,
        description: Optional[str] = None,
        gstin: Optional[str] = None,
        performed_by: str = SYSTEM_USER,
    ) -> Party:
        """Create a party. Returns the stored party."""
        now = utcnow()
        party = Party(
            id=self._next_id("parties"),
            name=name,
            description=description,
            gstin=gstin,
            balance=Decimal("0"),
            last_activity_date=None,
            created_at=now,
            updated_at=now,
        )
        self.parties[party.id] = party
        self.create_activity(**audit.party_created(party, performed_by), timestamp=now)
        self._save("parties", "counters")
        return party

    def update_party(
        self, party_id: int, changes: dict[str, Any], performed_by: str = SYSTEM_USER
    ) -> Optional[Party]:
        """Merge changes into a party. Returns None if not found."""
        party = self.parties.get(party_id)
        if party is None:
            return None

        changes = check_fields(changes, PARTY_FIELDS, "party")
        updated = replace(party, **changes, updated_at=utcnow())
        self.parties[party_id] = updated
        self.create_activity(**audit.party_updated(updated, performed_by))
        self._save("parties")
        return updated

    def update_party_balance(self, party_id: int, amount: Decimal, is_credit: bool) -> Optional[Party]:
        """Add (credit) or subtract (deposit) an amount from the balance."""
        party = self.parties.get(party_id)
        if party is None:
            return None

        # Credit increases what the party owes, deposit decreases it
        balance = party.balance + amount if is_credit else party.balance - amount
        now = utcnow()
        updated = replace(party, balance=balance, last_activity_date=now, updated_at=now)
        self.parties[party_id] = updated
        self._save("parties")
        return updated

    # Transaction operations
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.transactions.get(transaction_id)

    def list_transactions(self) -> list[Transaction]:
        """List all transactions in creation order."""
        return list(self.transactions.values())

    def list_transactions_by_party(self, party_id: int) -> list[Transaction]:
        """List transactions belonging to a party."""
        return [txn for txn in self.transactions.values() if txn.party_id == party_id]

    def list_recent_transactions(self, limit: int = 7) -> list[Transaction]:
        """List the most recent transactions, newest date first."""
        if limit <= 0:
            return []
        ordered = sorted(self.transactions.values(), key=lambda t: (t.date, t.id), reverse=True)
        return ordered[:limit]

    def list_credit_transactions_without_bill(self) -> list[Transaction]:
        """List credit transactions that have no bill."""
        return [
            txn
            for txn in self.transactions.values()
            if txn.type == TransactionType.CREDIT and txn.bill_id is None
        ]

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
        """Create a transaction and apply it to the party balance."""
        now = utcnow()
        transaction = Transaction(
            id=self._next_id("transactions"),
            party_id=party_id,
            type=TransactionType(type),
            amount=amount,
            date=date,
            reference=reference,
            notes=notes,
            bill_id=None,
            created_at=now,
            updated_at=now,
        )
        self.transactions[transaction.id] = transaction
        self._save("transactions", "counters")

        party = self.update_party_balance(party_id, amount, transaction.is_credit)
        self.create_activity(**audit.transaction_created(transaction, party, performed_by), timestamp=now)
        return transaction

    def update_transaction(
        self, transaction_id: int, changes: dict[str, Any], performed_by: str = SYSTEM_USER
    ) -> Optional[Transaction]:
        """Merge changes into a transaction. The balance is left untouched."""
        transaction = self.transactions.get(transaction_id)
        if transaction is None:
            return None

        changes = check_fields(changes, TRANSACTION_FIELDS, "transaction")
        if "type" in changes:
            changes["type"] = TransactionType(changes["type"])
        updated = replace(transaction, **changes, updated_at=utcnow())
        self.transactions[transaction_id] = updated
        self._save("transactions")

        party = self.parties.get(updated.party_id)
        self.create_activity(**audit.transaction_updated(updated, party, performed_by))
        return updated

    # Bill operations
    def get_bill(self, bill_id: int) -> Optional[Bill]:
        """Get bill by ID."""
        return self.bills.get(bill_id)

    def list_bills(self) -> list[Bill]:
        """List all bills in creation order."""
        return list(self.bills.values())

    def list_bills_by_party(self, party_id: int) -> list[Bill]:
        """List bills belonging to a party."""
        return [bill for bill in self.bills.values() if bill.party_id == party_id]

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
        """Create a bill. Returns the stored (and possibly linked) bill."""
        now = utcnow()
        bill = Bill(
            id=self._next_id("bills"),
            party_id=party_id,
            transaction_id=transaction_id,
            filename=filename,
            filepath=filepath,
            reference=reference,
            amount=amount,
            upload_date=upload_date or now,
            created_at=now,
        )
        self.bills[bill.id] = bill
        self._save("bills", "counters")

        if transaction_id is not None:
            self.link_bill_to_transaction(bill.id, transaction_id)

        party = self.parties.get(party_id)
        self.create_activity(**audit.bill_uploaded(bill, party, performed_by), timestamp=now)
        return self.bills[bill.id]

    def link_bill_to_transaction(self, bill_id: int, transaction_id: int) -> None:
        """Point the transaction at the bill and the bill at the transaction."""
        transaction = self.transactions.get(transaction_id)
        if transaction is None:
            return
        bill = self.bills.get(bill_id)
        if bill is None:
            return

        changed = []
        if transaction.bill_id != bill_id:
            self.transactions[transaction_id] = replace(
                transaction, bill_id=bill_id, updated_at=utcnow()
            )
            changed.append("transactions")
        if bill.transaction_id != transaction_id:
            self.bills[bill_id] = replace(bill, transaction_id=transaction_id)
            changed.append("bills")
        if changed:
            self._save(*changed)

    # Activity operations
    def list_activities(self) -> list[Activity]:
        """List all activities, newest first."""
        return sorted(self.activities.values(), key=lambda a: (a.timestamp, a.id), reverse=True)

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
        activity = Activity(
            id=self._next_id("activities"),
            performed_by=performed_by,
            description=description,
            entity_type=EntityType(entity_type) if entity_type is not None else None,
            entity_id=entity_id,
            entity_name=entity_name,
            details=details,
            timestamp=timestamp or utcnow(),
        )
        self.activities[activity.id] = activity
        self._save("activities", "counters")
        return activity
