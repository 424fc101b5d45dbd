"""Domain model entities for billbook.

These are pure data classes representing business concepts, independent of
how a backend stores them. Every backend hands out these frozen instances,
so callers can never mutate the records a store holds; updates produce new
instances through ``dataclasses.replace``.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Ledger entry type.

    CREDIT increases what the party owes, DEPOSIT decreases it.
    """

    CREDIT = "CREDIT"
    DEPOSIT = "DEPOSIT"


class EntityType(str, Enum):
    """Kind of entity an activity refers to."""

    PARTY = "PARTY"
    TRANSACTION = "TRANSACTION"
    BILL = "BILL"


@dataclass(frozen=True)
class User:
    """Application user. The password is stored pre-hashed."""

    id: int
    username: str
    password: str


@dataclass(frozen=True)
class Party:
    """Counterparty (customer or vendor) with a running balance."""

    id: int
    name: str
    description: Optional[str]
    gstin: Optional[str]
    balance: Decimal
    last_activity_date: Optional[datetime]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Ledger entry against a party."""

    id: int
    party_id: int
    type: TransactionType
    amount: Decimal
    date: date
    reference: Optional[str]
    notes: Optional[str]
    bill_id: Optional[int]
    created_at: datetime
    updated_at: datetime

    @property
    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign it contributes to the party balance."""
        return self.amount if self.is_credit else -self.amount


@dataclass(frozen=True)
class Bill:
    """Uploaded bill document, optionally linked to a transaction."""

    id: int
    party_id: int
    transaction_id: Optional[int]
    filename: str
    filepath: str
    reference: Optional[str]
    amount: Optional[Decimal]
    upload_date: datetime
    created_at: datetime


@dataclass(frozen=True)
class Activity:
    """Append-only audit log entry."""

    id: int
    performed_by: str
    description: str
    entity_type: Optional[EntityType]
    entity_id: Optional[int]
    entity_name: Optional[str]
    details: Optional[str]
    timestamp: datetime
