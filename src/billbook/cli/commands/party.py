"""Party management commands."""

import click
from billbook.cli.error_handling import handle_domain_error
from billbook.cli.party_resolution import resolve_party_or_exit
from billbook.domain.audit import format_amount
from billbook.domain.errors import DomainError
from billbook.domain.ledger import LedgerService
from billbook.domain.party import PartyService


@click.group()
def party_group():
    """Manage parties."""
    pass


@party_group.command("create")
@click.argument("name", metavar="PARTY_NAME")
@click.option("--description", help="Free-text description")
@click.option("--gstin", help="GSTIN tax identifier (15 characters)")
@click.pass_context
def create_party(ctx, name: str, description: str | None, gstin: str | None):
    """Create a new party.

    Examples:
        billbook party create "Acme Traders"
        billbook party create "Sharma & Sons" --gstin 27AAPFU0939F1ZV
    """
    service = PartyService(ctx.obj["db"])

    try:
        party = service.create_party(
            name=name, description=description, gstin=gstin, performed_by=ctx.obj["user"]
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created party '{party.name}' (ID: {party.id})")


@party_group.command("list")
@click.pass_context
def list_parties(ctx):
    """List all parties with their balances."""
    service = PartyService(ctx.obj["db"])

    parties = service.list_parties()
    if not parties:
        click.echo("No parties found.")
        return

    click.echo("\nParties:")
    click.echo("-" * 80)
    for p in parties:
        gstin = p.gstin or "-"
        last = p.last_activity_date.date().isoformat() if p.last_activity_date else "never"
        click.echo(
            f"ID: {p.id:3d} | {p.name:24s} | GSTIN: {gstin:15s} | "
            f"Balance: {format_amount(p.balance):>14s} | Last: {last}"
        )


@party_group.command("show")
@click.argument("party", metavar="PARTY")
@click.pass_context
def show_party(ctx, party: str):
    """Show a party's statement with running balance.

    PARTY can be a party name or ID.
    """
    db = ctx.obj["db"]
    party_service = PartyService(db)
    ledger = LedgerService(db)

    party_id = resolve_party_or_exit(ctx, party_service, party)
    statement = ledger.get_party_statement(party_id)
    p = statement.party

    click.echo(f"\n{p.name} (ID: {p.id})")
    if p.description:
        click.echo(f"  {p.description}")
    if p.gstin:
        click.echo(f"  GSTIN: {p.gstin}")
    click.echo(f"  Balance: {format_amount(p.balance)}")

    if not statement.lines:
        click.echo("\nNo entries found.")
        return

    click.echo("-" * 80)
    click.echo(f"{'ID':<6} {'Date':<12} {'Type':<8} {'Amount':>14} {'Balance':>14}  Reference")
    click.echo("-" * 80)
    for line in statement.lines:
        txn = line.transaction
        bill_mark = " [bill]" if txn.bill_id is not None else ""
        click.echo(
            f"{txn.id:<6} {txn.date.isoformat():<12} {txn.type.value:<8} "
            f"{format_amount(txn.amount):>14} {format_amount(line.running_balance):>14}  "
            f"{txn.reference or ''}{bill_mark}"
        )
    click.echo("-" * 80)
    click.echo(
        f"Credit: {format_amount(statement.total_credit)} | "
        f"Deposit: {format_amount(statement.total_deposit)} | Count: {len(statement.lines)}"
    )


@party_group.command("update")
@click.argument("party", metavar="PARTY")
@click.option("--name", help="New party name")
@click.option("--description", help="New description (empty string to clear)")
@click.option("--gstin", help="New GSTIN (empty string to clear)")
@click.pass_context
def update_party(ctx, party: str, name: str | None, description: str | None, gstin: str | None) -> None:
    """Update a party.

    PARTY can be a party name or ID. Only the given fields change.

    Examples:
        billbook party update "Acme Traders" --name "Acme Traders Pvt Ltd"
        billbook party update 2 --gstin ""
    """
    service = PartyService(ctx.obj["db"])
    party_id = resolve_party_or_exit(ctx, service, party)

    changes = {}
    if description is not None:
        changes["description"] = description
    if gstin is not None:
        changes["gstin"] = gstin
    if name is None and not changes:
        click.echo("Nothing to update.")
        return

    try:
        updated = service.update_party(party_id, name=name, performed_by=ctx.obj["user"], **changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated party '{updated.name}' (ID: {updated.id})")


def register_commands(cli):
    """Register party commands with main CLI."""
    cli.add_command(party_group, name="party")
