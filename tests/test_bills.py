"""Tests for BillService and the bill file store."""

import pytest
from decimal import Decimal
from pathlib import Path

from billbook.domain.entities import TransactionType
from billbook.domain.errors import ConflictError, NotFoundError, ValidationError
from billbook.utils.bill_files import MAX_BILL_SIZE


class TestUploadBill:
    """Tests for uploading bills for a party."""

    def test_upload_with_amount_creates_linked_credit(
        self, bill_service, db, party_service, sample_party, pdf_bytes
    ):
        """Test that an amount makes the upload create exactly one linked credit."""
        upload = bill_service.upload_bill(
            sample_party.id, pdf_bytes, "invoice.pdf", amount=Decimal("500"), performed_by="alice"
        )

        bill, txn = upload.bill, upload.transaction
        assert txn is not None
        assert txn.type == TransactionType.CREDIT
        assert txn.amount == Decimal("500")
        assert txn.bill_id == bill.id
        assert txn.reference == f"Bill-{bill.id}"
        assert txn.notes == "Auto-created from bill upload: invoice.pdf"
        assert bill.transaction_id == txn.id
        assert bill.filename == "invoice.pdf"
        assert Path(bill.filepath).read_bytes() == pdf_bytes
        assert len(db.list_transactions()) == 1
        assert party_service.require_party(sample_party.id).balance == Decimal("500")

    def test_upload_uses_given_reference(self, bill_service, sample_party, pdf_bytes):
        """Test that the bill reference is copied to the auto-created entry."""
        upload = bill_service.upload_bill(
            sample_party.id, pdf_bytes, "invoice.pdf", reference="INV-42", amount="120.50"
        )

        assert upload.bill.reference == "INV-42"
        assert upload.transaction.reference == "INV-42"

    def test_upload_without_amount_is_unlinked(self, bill_service, db, sample_party, pdf_bytes):
        """Test that a bill without an amount creates no entry."""
        upload = bill_service.upload_bill(sample_party.id, pdf_bytes, "scan.pdf")

        assert upload.transaction is None
        assert upload.bill.transaction_id is None
        assert db.list_transactions() == []

    def test_upload_logs_activities(self, bill_service, activity_service, sample_party, pdf_bytes):
        """Test that an upload with an amount logs the bill and the entry."""
        bill_service.upload_bill(
            sample_party.id, pdf_bytes, "invoice.pdf", amount="500", performed_by="alice"
        )

        activities = activity_service.list_activities()
        descriptions = [a.description for a in activities]
        assert "Uploaded bill" in descriptions
        assert "Created credit entry" in descriptions
        bill_activity = next(a for a in activities if a.description == "Uploaded bill")
        assert bill_activity.performed_by == "alice"
        assert bill_activity.details == "Uploaded bill: invoice.pdf for Acme Traders"

    def test_upload_to_existing_transaction(self, bill_service, ledger_service, sample_party, pdf_bytes):
        """Test that a transaction id attaches instead of creating an entry."""
        txn = ledger_service.create_transaction(sample_party.id, "credit", "300", reference="PO-7")

        upload = bill_service.upload_bill(sample_party.id, pdf_bytes, "po.pdf", transaction_id=txn.id)

        assert upload.transaction.id == txn.id
        assert upload.transaction.bill_id == upload.bill.id
        assert upload.bill.amount == Decimal("300")
        assert upload.bill.reference == "PO-7"
        assert len(ledger_service.list_transactions()) == 1

    def test_upload_to_other_partys_transaction(
        self, bill_service, ledger_service, party_service, sample_party, pdf_bytes
    ):
        """Test that a transaction of another party is rejected."""
        other = party_service.create_party(name="Other")
        txn = ledger_service.create_transaction(other.id, "credit", "300")

        with pytest.raises(ValidationError):
            bill_service.upload_bill(sample_party.id, pdf_bytes, "po.pdf", transaction_id=txn.id)

    def test_upload_unknown_party(self, bill_service, db, file_store, pdf_bytes):
        """Test that uploads for unknown parties store nothing."""
        with pytest.raises(NotFoundError):
            bill_service.upload_bill(99, pdf_bytes, "invoice.pdf", amount="10")

        assert db.list_bills() == []
        assert not file_store.uploads_dir.exists()

    def test_upload_rejects_bad_amount(self, bill_service, sample_party, pdf_bytes):
        """Test that a non-positive bill amount is rejected."""
        with pytest.raises(ValidationError):
            bill_service.upload_bill(sample_party.id, pdf_bytes, "invoice.pdf", amount="-1")

    def test_upload_rejects_sub_cent_amount(self, bill_service, db, file_store, sample_party, pdf_bytes):
        """Test that a bill amount with more than two places stores nothing."""
        with pytest.raises(ValidationError):
            bill_service.upload_bill(sample_party.id, pdf_bytes, "invoice.pdf", amount="99.999")

        assert db.list_bills() == []
        assert db.list_transactions() == []
        assert not file_store.uploads_dir.exists()


class TestAttachBill:
    """Tests for attaching bills to existing entries."""

    def test_attach_to_credit(self, bill_service, ledger_service, sample_party, pdf_bytes):
        """Test attaching a bill to a credit entry without one."""
        txn = ledger_service.create_transaction(sample_party.id, "credit", "750")

        upload = bill_service.attach_bill(txn.id, pdf_bytes, "bill.pdf", reference="INV-9")

        assert upload.bill.party_id == sample_party.id
        assert upload.bill.transaction_id == txn.id
        assert upload.bill.reference == "INV-9"
        assert upload.bill.amount == Decimal("750")
        assert upload.transaction.bill_id == upload.bill.id
        assert ledger_service.list_credit_without_bill() == []

    def test_attach_twice_conflicts(self, bill_service, ledger_service, db, file_store, sample_party, pdf_bytes):
        """Test that an entry takes at most one bill and no second bill is stored."""
        txn = ledger_service.create_transaction(sample_party.id, "credit", "750")
        first = bill_service.attach_bill(txn.id, pdf_bytes, "bill.pdf")

        with pytest.raises(ConflictError, match="already has a bill"):
            bill_service.attach_bill(txn.id, pdf_bytes, "again.pdf")

        assert [b.id for b in db.list_bills()] == [first.bill.id]
        assert ledger_service.require_transaction(txn.id).bill_id == first.bill.id
        assert len(list(file_store.uploads_dir.iterdir())) == 1

    def test_attach_to_deposit_rejected(self, bill_service, ledger_service, db, sample_party, pdf_bytes):
        """Test that deposits cannot carry bills."""
        txn = ledger_service.create_transaction(sample_party.id, "deposit", "100")

        with pytest.raises(ConflictError, match="credit"):
            bill_service.attach_bill(txn.id, pdf_bytes, "bill.pdf")
        assert db.list_bills() == []

    def test_attach_to_missing_transaction(self, bill_service, pdf_bytes):
        """Test that attaching to an unknown entry raises NotFoundError."""
        with pytest.raises(NotFoundError):
            bill_service.attach_bill(12, pdf_bytes, "bill.pdf")

    def test_relinking_is_idempotent(self, bill_service, ledger_service, db, sample_party, pdf_bytes):
        """Test that linking an attached bill again changes nothing."""
        txn = ledger_service.create_transaction(sample_party.id, "credit", "750")
        upload = bill_service.attach_bill(txn.id, pdf_bytes, "bill.pdf")
        activity_count = len(db.list_activities())

        db.link_bill_to_transaction(upload.bill.id, txn.id)

        assert db.get_bill(upload.bill.id) == upload.bill
        assert db.get_transaction(txn.id) == upload.transaction
        assert len(db.list_activities()) == activity_count


class TestBillQueries:
    """Tests for listing bills and locating their files."""

    def test_list_bills_by_party(self, bill_service, party_service, sample_party, pdf_bytes):
        """Test listing all bills and one party's bills."""
        other = party_service.create_party(name="Other")
        bill_service.upload_bill(sample_party.id, pdf_bytes, "a.pdf")
        bill_service.upload_bill(other.id, pdf_bytes, "b.pdf")

        assert [b.filename for b in bill_service.list_bills()] == ["a.pdf", "b.pdf"]
        assert [b.filename for b in bill_service.list_bills(party_id=other.id)] == ["b.pdf"]

    def test_transaction_reference(self, bill_service, ledger_service, sample_party, pdf_bytes):
        """Test looking up the reference of a bill's entry."""
        txn = ledger_service.create_transaction(sample_party.id, "credit", "10", reference="R-1")
        linked = bill_service.attach_bill(txn.id, pdf_bytes, "a.pdf").bill
        unlinked = bill_service.upload_bill(sample_party.id, pdf_bytes, "b.pdf").bill

        assert bill_service.transaction_reference(linked) == "R-1"
        assert bill_service.transaction_reference(unlinked) is None

    def test_bill_file_path(self, bill_service, sample_party, pdf_bytes):
        """Test that the stored file can be located and a missing one is reported."""
        bill = bill_service.upload_bill(sample_party.id, pdf_bytes, "a.pdf").bill

        path = bill_service.bill_file_path(bill.id)
        assert path.read_bytes() == pdf_bytes

        path.unlink()
        with pytest.raises(NotFoundError, match="missing"):
            bill_service.bill_file_path(bill.id)
        with pytest.raises(NotFoundError):
            bill_service.require_bill(99)


class TestBillFileStore:
    """Tests for validating and storing uploaded PDFs."""

    def test_save_generates_unique_names(self, file_store, pdf_bytes):
        """Test that two uploads with the same name get different files."""
        first = file_store.save(pdf_bytes, "invoice.pdf")
        second = file_store.save(pdf_bytes, "invoice.pdf")

        assert first.filename == second.filename == "invoice.pdf"
        assert first.filepath != second.filepath
        assert Path(first.filepath).name.startswith("bill-")
        assert Path(first.filepath).suffix == ".pdf"

    def test_rejects_non_pdf_name(self, file_store, pdf_bytes):
        """Test that only .pdf files are accepted."""
        with pytest.raises(ValidationError, match="Invalid bill upload"):
            file_store.save(pdf_bytes, "invoice.png")

    def test_rejects_non_pdf_content(self, file_store):
        """Test that content must start with the PDF signature."""
        with pytest.raises(ValidationError) as excinfo:
            file_store.save(b"\x89PNG\r\n", "invoice.pdf")

        assert "only PDF files are allowed" in str(excinfo.value.errors[0])

    def test_rejects_empty_and_oversized(self, file_store, pdf_bytes):
        """Test the empty-file and 10 MB limits."""
        with pytest.raises(ValidationError):
            file_store.save(b"", "invoice.pdf")

        oversized = pdf_bytes + b"0" * MAX_BILL_SIZE
        with pytest.raises(ValidationError) as excinfo:
            file_store.save(oversized, "invoice.pdf")
        assert "10 MB" in str(excinfo.value.errors[0])
        assert not file_store.uploads_dir.exists()
