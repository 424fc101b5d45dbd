"""Bill domain service: uploads and bill/transaction linking."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Optional
from billbook.database.base import Database
from billbook.domain.audit import SYSTEM_USER
from billbook.domain.entities import (
    Bill as BillEntity,
    Transaction as TransactionEntity,
    TransactionType,
)
from billbook.domain.errors import (
    ConflictError,
    FieldError,
    NotFoundError,
    ValidationError,
    bill_already_attached,
    bill_not_found,
    bill_requires_credit,
    party_not_found,
)
from billbook.domain.ledger import LedgerService
from billbook.domain import validation
from billbook.utils.bill_files import BillFileStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BillUpload:
    """Result of an upload: the stored bill and the transaction it is linked to."""

    bill: BillEntity
    transaction: Optional[TransactionEntity]


class BillService:
    """Service for uploading bills and linking them to ledger entries.

    A transaction carries at most one bill, and only CREDIT transactions take
    bills. Both rules are checked here before anything is stored.
    """

    def __init__(self, db: Database, file_store: BillFileStore):
        """Initialize bill service.

        Args:
            db: Database instance
            file_store: Where uploaded PDFs are written
        """
        self.db = db
        self.file_store = file_store
        self.ledger = LedgerService(db)

    def _check_attachable(self, transaction: TransactionEntity) -> None:
        if transaction.type != TransactionType.CREDIT:
            raise ConflictError(bill_requires_credit(transaction.id))
        if transaction.bill_id is not None:
            raise ConflictError(bill_already_attached(transaction.id))

    def upload_bill(
        self,
        party_id: int,
        content: bytes,
        filename: str,
        reference: Optional[str] = None,
        amount: Optional[Decimal | str] = None,
        transaction_id: Optional[int] = None,
        performed_by: str = SYSTEM_USER,
    ) -> BillUpload:
        """Upload a bill for a party.

        With ``transaction_id`` the bill is attached to that transaction
        (see attach_bill). Without it, an ``amount`` makes this create a
        matching CREDIT transaction and link the two; without an amount the
        bill is stored unlinked.

        Raises:
            ValidationError: If the file or amount is invalid, or the
                transaction belongs to another party
            NotFoundError: If the party or transaction does not exist
            ConflictError: If the transaction cannot take a bill
        """
        if transaction_id is not None:
            transaction = self.ledger.require_transaction(transaction_id)
            if transaction.party_id != party_id:
                raise ValidationError(
                    "Invalid bill upload",
                    [FieldError("transaction_id", f"belongs to party {transaction.party_id}")],
                )
            return self.attach_bill(
                transaction_id, content, filename, reference=reference, performed_by=performed_by
            )

        errors: list[FieldError] = []
        bill_amount = None
        if amount is not None:
            bill_amount = validation.positive_amount(amount, errors)
        validation.raise_if_errors(errors, "Invalid bill upload")

        if self.db.get_party(party_id) is None:
            raise NotFoundError(party_not_found(party_id))

        stored = self.file_store.save(content, filename)
        reference = validation.optional_text(reference)
        bill = self.db.create_bill(
            party_id=party_id,
            filename=stored.filename,
            filepath=stored.filepath,
            reference=reference,
            amount=bill_amount,
            performed_by=performed_by,
        )
        logger.info(f"Uploaded bill {bill.id} '{bill.filename}' for party {party_id}")

        if bill_amount is None:
            return BillUpload(bill=bill, transaction=None)

        transaction = self.ledger.create_transaction(
            party_id=party_id,
            type=TransactionType.CREDIT,
            amount=bill_amount,
            date=date.today(),
            reference=reference or f"Bill-{bill.id}",
            notes=f"Auto-created from bill upload: {stored.filename}",
            performed_by=performed_by,
        )
        self.db.link_bill_to_transaction(bill.id, transaction.id)
        logger.debug(f"Auto-created credit entry {transaction.id} for bill {bill.id}")
        return BillUpload(
            bill=self.db.get_bill(bill.id),
            transaction=self.db.get_transaction(transaction.id),
        )

    def attach_bill(
        self,
        transaction_id: int,
        content: bytes,
        filename: str,
        reference: Optional[str] = None,
        performed_by: str = SYSTEM_USER,
    ) -> BillUpload:
        """Upload a bill for an existing CREDIT transaction without a bill.

        The bill takes the transaction's party and amount, and its reference
        unless one is given.

        Raises:
            NotFoundError: If the transaction does not exist
            ConflictError: If the transaction is not a CREDIT or already has a bill
            ValidationError: If the file is invalid
        """
        transaction = self.ledger.require_transaction(transaction_id)
        self._check_attachable(transaction)

        stored = self.file_store.save(content, filename)
        bill = self.db.create_bill(
            party_id=transaction.party_id,
            filename=stored.filename,
            filepath=stored.filepath,
            transaction_id=transaction_id,
            reference=validation.optional_text(reference) or transaction.reference,
            amount=transaction.amount,
            performed_by=performed_by,
        )
        self.db.link_bill_to_transaction(bill.id, transaction_id)
        logger.info(f"Attached bill {bill.id} to transaction {transaction_id}")
        return BillUpload(
            bill=self.db.get_bill(bill.id),
            transaction=self.db.get_transaction(transaction_id),
        )

    def get_bill(self, bill_id: int) -> Optional[BillEntity]:
        """Get bill by ID, or None if not found."""
        return self.db.get_bill(bill_id)

    def require_bill(self, bill_id: int) -> BillEntity:
        """Get bill by ID.

        Raises:
            NotFoundError: If the bill does not exist
        """
        bill = self.db.get_bill(bill_id)
        if bill is None:
            raise NotFoundError(bill_not_found(bill_id))
        return bill

    def list_bills(self, party_id: Optional[int] = None) -> list[BillEntity]:
        """List bills, optionally only those of one party."""
        if party_id is not None:
            return self.db.list_bills_by_party(party_id)
        return self.db.list_bills()

    def transaction_reference(self, bill: BillEntity) -> Optional[str]:
        """Reference of the transaction a bill is linked to, if any."""
        if bill.transaction_id is None:
            return None
        transaction = self.db.get_transaction(bill.transaction_id)
        return transaction.reference if transaction is not None else None

    def bill_file_path(self, bill_id: int) -> Path:
        """Path of the stored PDF for a bill.

        Raises:
            NotFoundError: If the bill or its file does not exist
        """
        bill = self.require_bill(bill_id)
        path = Path(bill.filepath)
        if not path.is_file():
            raise NotFoundError(f"File for bill {bill_id} is missing: {bill.filepath}")
        return path
