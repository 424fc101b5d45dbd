"""Mapper functions to convert SQLAlchemy models to domain entities.

SQLite drops time zone information, so datetimes read back from the
database are re-tagged as UTC here.
"""

from datetime import datetime, UTC
from typing import Optional

from billbook.domain import entities as domain
from billbook.database.models import (
    Activity as ORMActivity,
    Bill as ORMBill,
    Party as ORMParty,
    Transaction as ORMTransaction,
    User as ORMUser,
)


def _utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        username=orm_user.username,
        password=orm_user.password,
    )


def party_to_domain(orm_party: ORMParty) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        name=orm_party.name,
        description=orm_party.description,
        gstin=orm_party.gstin,
        balance=orm_party.balance,
        last_activity_date=_utc(orm_party.last_activity_date),
        created_at=_utc(orm_party.created_at),
        updated_at=_utc(orm_party.updated_at),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        party_id=orm_transaction.party_id,
        type=domain.TransactionType(orm_transaction.type),
        amount=orm_transaction.amount,
        date=orm_transaction.date,
        reference=orm_transaction.reference,
        notes=orm_transaction.notes,
        bill_id=orm_transaction.bill_id,
        created_at=_utc(orm_transaction.created_at),
        updated_at=_utc(orm_transaction.updated_at),
    )


def bill_to_domain(orm_bill: ORMBill) -> domain.Bill:
    """Convert SQLAlchemy Bill model to domain Bill entity."""
    return domain.Bill(
        id=orm_bill.id,
        party_id=orm_bill.party_id,
        transaction_id=orm_bill.transaction_id,
        filename=orm_bill.filename,
        filepath=orm_bill.filepath,
        reference=orm_bill.reference,
        amount=orm_bill.amount,
        upload_date=_utc(orm_bill.upload_date),
        created_at=_utc(orm_bill.created_at),
    )


def activity_to_domain(orm_activity: ORMActivity) -> domain.Activity:
    """Convert SQLAlchemy Activity model to domain Activity entity."""
    entity_type = orm_activity.entity_type
    return domain.Activity(
        id=orm_activity.id,
        performed_by=orm_activity.performed_by,
        description=orm_activity.description,
        entity_type=domain.EntityType(entity_type) if entity_type is not None else None,
        entity_id=orm_activity.entity_id,
        entity_name=orm_activity.entity_name,
        details=orm_activity.details,
        timestamp=_utc(orm_activity.timestamp),
    )
