"""SQLAlchemy models for billbook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """Application user model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)


class Party(Base):
    """Party (customer or vendor) model."""

    __tablename__ = "parties"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    gstin = Column(String, unique=True, nullable=True)
    balance = Column(Numeric(14, 2), default=0, nullable=False)
    last_activity_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="party")
    bills = relationship("Bill", back_populates="party")


class Transaction(Base):
    """Ledger entry model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=False)
    type = Column(String(10), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False)
    reference = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    # Plain column: bills reference transactions, not the other way round
    bill_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    party = relationship("Party", back_populates="transactions")


class Bill(Base):
    """Uploaded bill model."""

    __tablename__ = "bills"

    id = Column(Integer, primary_key=True)
    party_id = Column(Integer, ForeignKey("parties.id"), nullable=False)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=True)
    filename = Column(String, nullable=False)
    filepath = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    amount = Column(Numeric(14, 2), nullable=True)
    upload_date = Column(DateTime, default=_now, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)

    # Relationships
    party = relationship("Party", back_populates="bills")


class Activity(Base):
    """Audit log entry model."""

    __tablename__ = "activities"

    id = Column(Integer, primary_key=True)
    performed_by = Column(String, nullable=False)
    description = Column(String, nullable=False)
    entity_type = Column(String(20), nullable=True)
    entity_id = Column(Integer, nullable=True)
    entity_name = Column(String, nullable=True)
    details = Column(String, nullable=True)
    timestamp = Column(DateTime, default=_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
