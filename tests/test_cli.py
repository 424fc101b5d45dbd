"""Tests for the billbook command line."""

import pytest

from billbook.cli.main import cli


def _run(runner, data_dir, *args, backend="json", user=None):
    options = ["--backend", backend, "--data-dir", str(data_dir)]
    if user is not None:
        options += ["--user", user]
    return runner.invoke(cli, [*options, *args])


def test_help_does_not_open_storage(cli_runner, data_dir):
    """Test that showing help leaves the data directory alone."""
    result = cli_runner.invoke(cli, ["--data-dir", str(data_dir), "--help"])

    assert result.exit_code == 0
    assert "party" in result.output
    assert not data_dir.exists()


class TestPartyCommands:
    """Tests for the party command group."""

    def test_create_and_list(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "party", "create", "Acme Traders", "--gstin", "27AAPFU0939F1ZV")
        assert result.exit_code == 0
        assert "Created party 'Acme Traders' (ID: 1)" in result.output

        result = _run(cli_runner, data_dir, "party", "list")
        assert result.exit_code == 0
        assert "Acme Traders" in result.output
        assert "27AAPFU0939F1ZV" in result.output

    def test_list_empty(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "party", "list")

        assert result.exit_code == 0
        assert "No parties found." in result.output

    def test_create_invalid_gstin_shows_field_errors(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "party", "create", "Acme", "--gstin", "123")

        assert result.exit_code == 1
        assert "Invalid party data" in result.output
        assert "gstin:" in result.output

    def test_update_and_show(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "party", "create", "Acme Traders")

        result = _run(cli_runner, data_dir, "party", "update", "Acme Traders", "--description", "Supplier")
        assert result.exit_code == 0
        assert "Updated party 'Acme Traders'" in result.output

        result = _run(cli_runner, data_dir, "party", "update", "1")
        assert "Nothing to update." in result.output

        result = _run(cli_runner, data_dir, "party", "show", "1")
        assert result.exit_code == 0
        assert "Supplier" in result.output
        assert "No entries found." in result.output

    def test_show_unknown_party(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "party", "show", "Nobody")

        assert result.exit_code == 1
        assert "Party 'Nobody' not found" in result.output


class TestEntryCommands:
    """Tests for the entry command group."""

    @pytest.fixture(autouse=True)
    def _party(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "party", "create", "Acme Traders")

    def test_add_credit_and_deposit(self, cli_runner, data_dir):
        result = _run(
            cli_runner, data_dir, "entry", "add", "--party", "Acme Traders", "--type", "credit",
            "--amount", "500", "--date", "2024-01-15", "--reference", "INV-1",
        )
        assert result.exit_code == 0
        assert "Created credit entry 1" in result.output
        assert "Balance: ₹500.00" in result.output

        result = _run(
            cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "DEPOSIT", "--amount", "200"
        )
        assert result.exit_code == 0
        assert "Created deposit entry 2" in result.output
        assert "Balance: ₹300.00" in result.output

        result = _run(cli_runner, data_dir, "party", "show", "Acme Traders")
        assert "Credit: ₹500.00 | Deposit: ₹200.00 | Count: 2" in result.output

    def test_add_invalid_amount(self, cli_runner, data_dir):
        result = _run(
            cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "abc"
        )

        assert result.exit_code == 1
        assert "Invalid amount format" in result.output

    def test_add_sub_cent_amount(self, cli_runner, data_dir):
        result = _run(
            cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "10.005"
        )

        assert result.exit_code == 1
        assert "amount: must have at most 2 decimal places" in result.output

    def test_update_reports_balance_not_adjusted(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "500")

        result = _run(cli_runner, data_dir, "entry", "update", "1", "--amount", "900")
        assert result.exit_code == 0
        assert "Updated entry 1" in result.output
        assert "balance was not adjusted" in result.output

        result = _run(cli_runner, data_dir, "party", "list")
        assert "₹500.00" in result.output

    def test_update_unknown_entry(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "entry", "update", "9", "--notes", "x")

        assert result.exit_code == 1
        assert "Transaction 9 not found" in result.output

    def test_list_recent_and_unbilled(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "entry", "unbilled")
        assert "No entries found." in result.output

        _run(cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "10")
        _run(cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "deposit", "--amount", "5")

        result = _run(cli_runner, data_dir, "entry", "list", "--party", "Acme Traders")
        assert "Found 2 entries" in result.output

        result = _run(cli_runner, data_dir, "entry", "recent", "--limit", "1")
        assert "Found 1 entry" in result.output

        result = _run(cli_runner, data_dir, "entry", "unbilled")
        assert "Found 1 entry" in result.output
        assert "CREDIT" in result.output

    def test_recent_rejects_zero_limit(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "entry", "recent", "--limit", "0")

        assert result.exit_code == 1
        assert "limit: must be greater than zero" in result.output


class TestBillCommands:
    """Tests for the bill command group."""

    @pytest.fixture(autouse=True)
    def _party(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "party", "create", "Acme Traders")

    def test_upload_with_amount(self, cli_runner, data_dir, pdf_file):
        result = _run(
            cli_runner, data_dir, "bill", "upload", str(pdf_file), "--party", "Acme Traders", "--amount", "500"
        )

        assert result.exit_code == 0
        assert "Uploaded bill 1 'invoice.pdf'" in result.output
        assert "Linked to credit entry 1 of ₹500.00" in result.output
        assert len(list((data_dir / "uploads").iterdir())) == 1

        result = _run(cli_runner, data_dir, "bill", "list")
        assert "invoice.pdf" in result.output
        assert "entry 1" in result.output

    def test_attach_twice_fails(self, cli_runner, data_dir, pdf_file):
        _run(cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "75")

        result = _run(cli_runner, data_dir, "bill", "attach", "1", str(pdf_file))
        assert result.exit_code == 0
        assert "Linked to credit entry 1" in result.output

        result = _run(cli_runner, data_dir, "bill", "attach", "1", str(pdf_file))
        assert result.exit_code == 1
        assert "already has a bill attached" in result.output

    def test_upload_rejects_non_pdf(self, cli_runner, data_dir, tmp_path):
        text_file = tmp_path / "notes.txt"
        text_file.write_text("hello")

        result = _run(cli_runner, data_dir, "bill", "upload", str(text_file), "--party", "1")

        assert result.exit_code == 1
        assert "only PDF files are allowed" in result.output

    def test_download(self, cli_runner, data_dir, pdf_file, tmp_path):
        _run(cli_runner, data_dir, "bill", "upload", str(pdf_file), "--party", "1")
        out_dir = tmp_path / "out"
        out_dir.mkdir()

        result = _run(cli_runner, data_dir, "bill", "download", "1", str(out_dir))

        assert result.exit_code == 0
        assert (out_dir / "invoice.pdf").read_bytes() == pdf_file.read_bytes()

    def test_list_empty_and_missing_bill(self, cli_runner, data_dir, tmp_path):
        result = _run(cli_runner, data_dir, "bill", "list")
        assert "No bills found." in result.output

        result = _run(cli_runner, data_dir, "bill", "download", "5", str(tmp_path / "x.pdf"))
        assert result.exit_code == 1
        assert "Bill 5 not found" in result.output


class TestActivityAndUserCommands:
    """Tests for the activity log and user commands."""

    def test_activity_records_acting_user(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "party", "create", "Acme Traders", user="alice")

        result = _run(cli_runner, data_dir, "activity", "list", "-v")

        assert result.exit_code == 0
        assert "alice" in result.output
        assert "Created new party [Acme Traders]" in result.output
        assert "Created party: Acme Traders" in result.output

    def test_activity_filters(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "activity", "list")
        assert "No activities found." in result.output

        _run(cli_runner, data_dir, "party", "create", "Acme Traders")
        _run(cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "10")

        result = _run(cli_runner, data_dir, "activity", "list", "--entity", "transaction")
        assert "Created credit entry" in result.output
        assert "Created new party" not in result.output

    def test_user_create_duplicate(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "user", "create", "alice", "--password-hash", "h")
        assert result.exit_code == 0
        assert "Created user 'alice' (ID: 1)" in result.output

        result = _run(cli_runner, data_dir, "user", "create", "alice", "--password-hash", "h")
        assert result.exit_code == 1
        assert "already exists" in result.output


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_summary_empty(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "summary")

        assert result.exit_code == 0
        assert "Total outstanding: ₹0.00" in result.output
        assert "No parties found." in result.output

    def test_summary_ranks_parties(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "party", "create", "Acme Traders")
        _run(cli_runner, data_dir, "party", "create", "Sharma & Sons")
        _run(cli_runner, data_dir, "entry", "add", "--party", "1", "--type", "credit", "--amount", "500")
        _run(cli_runner, data_dir, "entry", "add", "--party", "2", "--type", "credit", "--amount", "1,500")

        result = _run(cli_runner, data_dir, "summary", "--top", "1")

        assert result.exit_code == 0
        assert "Total outstanding: ₹2,000.00" in result.output
        assert "Parties: 2" in result.output
        assert "Recent entries: 2" in result.output
        assert "Sharma & Sons" in result.output
        assert "Acme Traders" not in result.output

    def test_summary_rejects_zero_top(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "summary", "--top", "0")

        assert result.exit_code == 1
        assert "top: must be greater than zero" in result.output


class TestBackends:
    """Tests for choosing the storage backend."""

    def test_sqlite_backend_persists(self, cli_runner, data_dir):
        _run(cli_runner, data_dir, "party", "create", "Acme Traders", backend="sqlite")

        result = _run(cli_runner, data_dir, "party", "list", backend="sqlite")

        assert "Acme Traders" in result.output
        assert (data_dir / "billbook.db").exists()

    def test_memory_backend_forgets(self, cli_runner, data_dir):
        result = _run(cli_runner, data_dir, "party", "create", "Acme Traders", backend="memory")
        assert result.exit_code == 0

        result = _run(cli_runner, data_dir, "party", "list", backend="memory")
        assert "No parties found." in result.output
