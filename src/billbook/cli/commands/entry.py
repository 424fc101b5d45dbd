"""Ledger entry commands."""

import click
from billbook.cli.error_handling import handle_domain_error
from billbook.cli.party_resolution import resolve_party_or_exit
from billbook.domain.audit import format_amount
from billbook.domain.errors import DomainError
from billbook.domain.ledger import LedgerService
from billbook.domain.party import PartyService
from billbook.utils.amount_parser import parse_amount
from billbook.utils.date_parser import parse_date

ENTRY_TYPES = click.Choice(["credit", "deposit"], case_sensitive=False)


@click.group()
def entry_group():
    """Manage ledger entries."""
    pass


def _echo_entries(ctx, transactions) -> None:
    if not transactions:
        click.echo("No entries found.")
        return

    parties = {p.id: p.name for p in PartyService(ctx.obj["db"]).list_parties()}
    click.echo(f"\nFound {len(transactions)} entr{'y' if len(transactions) == 1 else 'ies'}:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Type':<8} {'Amount':>14}  {'Party':<24} {'Reference':<20} Bill"
    )
    click.echo("-" * 100)
    for txn in transactions:
        party_name = parties.get(txn.party_id, "Unknown")
        bill = str(txn.bill_id) if txn.bill_id is not None else "-"
        click.echo(
            f"{txn.id:<6} {txn.date.isoformat():<12} {txn.type.value:<8} "
            f"{format_amount(txn.amount):>14}  {party_name[:24]:<24} "
            f"{(txn.reference or '')[:20]:<20} {bill}"
        )


@entry_group.command("add")
@click.option("--party", required=True, help="Party name or ID")
@click.option("--type", "entry_type", type=ENTRY_TYPES, required=True, help="Entry type")
@click.option("--amount", required=True, help="Amount (e.g., 1500 or 1,500.50)")
@click.option("--date", help="Entry date (YYYY-MM-DD or 'today', 'yesterday'); defaults to today")
@click.option("--reference", help="Reference (invoice or receipt number)")
@click.option("--notes", help="Notes")
@click.pass_context
def add_entry(
    ctx,
    party: str,
    entry_type: str,
    amount: str,
    date: str | None,
    reference: str | None,
    notes: str | None,
):
    """Add a credit or deposit entry.

    A credit increases what the party owes; a deposit decreases it.

    Examples:
        billbook entry add --party "Acme Traders" --type credit --amount 500
        billbook entry add --party 1 --type deposit --amount 200 --date yesterday
    """
    db = ctx.obj["db"]
    ledger = LedgerService(db)
    party_service = PartyService(db)

    party_id = resolve_party_or_exit(ctx, party_service, party)

    entry_date = None
    if date is not None:
        try:
            entry_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        entry_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        txn = ledger.create_transaction(
            party_id=party_id,
            type=entry_type,
            amount=entry_amount,
            date=entry_date,
            reference=reference,
            notes=notes,
            performed_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    updated_party = party_service.require_party(party_id)
    click.echo(f"Created {txn.type.value.lower()} entry {txn.id}")
    click.echo(f"  Party: {updated_party.name}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {format_amount(txn.amount)}")
    click.echo(f"  Balance: {format_amount(updated_party.balance)}")


@entry_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--party", help="Party name or ID")
@click.option("--type", "entry_type", type=ENTRY_TYPES, help="Entry type")
@click.option("--amount", help="Amount")
@click.option("--date", help="Entry date")
@click.option("--reference", help="Reference (empty string to clear)")
@click.option("--notes", help="Notes (empty string to clear)")
@click.pass_context
def update_entry(
    ctx,
    transaction_id: int,
    party: str | None,
    entry_type: str | None,
    amount: str | None,
    date: str | None,
    reference: str | None,
    notes: str | None,
) -> None:
    """Update an entry.

    Updates only the fields that are provided. Changing the amount or type
    does not adjust the party balance.

    Examples:
        billbook entry update 3 --reference INV-0042
        billbook entry update 3 --notes ""
    """
    db = ctx.obj["db"]
    ledger = LedgerService(db)

    party_id = None
    if party is not None:
        party_id = resolve_party_or_exit(ctx, PartyService(db), party)

    entry_date = None
    if date is not None:
        try:
            entry_date = parse_date(date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    entry_amount = None
    if amount is not None:
        try:
            entry_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    optional = {}
    if reference is not None:
        optional["reference"] = reference
    if notes is not None:
        optional["notes"] = notes

    try:
        ledger.update_transaction(
            transaction_id,
            party_id=party_id,
            type=entry_type,
            amount=entry_amount,
            date=entry_date,
            performed_by=ctx.obj["user"],
            **optional,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated entry {transaction_id}")
    if entry_amount is not None or entry_type is not None:
        click.echo("Note: the party balance was not adjusted.")


@entry_group.command("list")
@click.option("--party", help="Party name or ID")
@click.pass_context
def list_entries(ctx, party: str | None):
    """List ledger entries, optionally for one party."""
    db = ctx.obj["db"]
    party_id = None
    if party is not None:
        party_id = resolve_party_or_exit(ctx, PartyService(db), party)
    _echo_entries(ctx, LedgerService(db).list_transactions(party_id=party_id))


@entry_group.command("recent")
@click.option("--limit", type=int, default=7, show_default=True, help="Number of entries")
@click.pass_context
def recent_entries(ctx, limit: int):
    """List the most recent entries by date."""
    try:
        transactions = LedgerService(ctx.obj["db"]).list_recent(limit)
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_entries(ctx, transactions)


@entry_group.command("unbilled")
@click.pass_context
def unbilled_entries(ctx):
    """List credit entries that have no bill attached."""
    _echo_entries(ctx, LedgerService(ctx.obj["db"]).list_credit_without_bill())


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
