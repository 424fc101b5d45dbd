"""Bill commands."""

import shutil
from pathlib import Path

import click
from billbook.cli.error_handling import handle_domain_error
from billbook.cli.party_resolution import resolve_party_or_exit
from billbook.domain.audit import format_amount
from billbook.domain.bill import BillService, BillUpload
from billbook.domain.errors import DomainError
from billbook.domain.party import PartyService
from billbook.utils.amount_parser import parse_amount
from billbook.utils.bill_files import BillFileStore


@click.group()
def bill_group():
    """Manage bills."""
    pass


def _bill_service(ctx) -> BillService:
    return BillService(ctx.obj["db"], BillFileStore(ctx.obj["uploads_dir"]))


def _echo_upload(upload: BillUpload) -> None:
    bill = upload.bill
    click.echo(f"Uploaded bill {bill.id} '{bill.filename}'")
    if upload.transaction is not None:
        txn = upload.transaction
        click.echo(
            f"  Linked to {txn.type.value.lower()} entry {txn.id} "
            f"of {format_amount(txn.amount)}"
        )


@bill_group.command("upload")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--party", required=True, help="Party name or ID")
@click.option("--amount", help="Bill amount; creates a credit entry when no --transaction is given")
@click.option("--reference", help="Bill reference (invoice number)")
@click.option("--transaction", "transaction_id", type=int, help="Attach to this existing entry")
@click.pass_context
def upload_bill(ctx, file: Path, party: str, amount: str | None, reference: str | None, transaction_id: int | None):
    """Upload a PDF bill for a party.

    Examples:
        billbook bill upload invoice.pdf --party "Acme Traders" --amount 500
        billbook bill upload invoice.pdf --party 1 --transaction 4
    """
    service = _bill_service(ctx)
    party_id = resolve_party_or_exit(ctx, PartyService(ctx.obj["db"]), party)

    bill_amount = None
    if amount is not None:
        try:
            bill_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    try:
        upload = service.upload_bill(
            party_id=party_id,
            content=file.read_bytes(),
            filename=file.name,
            reference=reference,
            amount=bill_amount,
            transaction_id=transaction_id,
            performed_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_upload(upload)


@bill_group.command("attach")
@click.argument("transaction_id", type=int)
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--reference", help="Bill reference (defaults to the entry's reference)")
@click.pass_context
def attach_bill(ctx, transaction_id: int, file: Path, reference: str | None):
    """Attach a PDF bill to an existing credit entry.

    The entry must be a credit and must not already have a bill.
    """
    service = _bill_service(ctx)
    try:
        upload = service.attach_bill(
            transaction_id,
            content=file.read_bytes(),
            filename=file.name,
            reference=reference,
            performed_by=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    _echo_upload(upload)


@bill_group.command("list")
@click.option("--party", help="Party name or ID")
@click.pass_context
def list_bills(ctx, party: str | None):
    """List bills, optionally for one party."""
    db = ctx.obj["db"]
    service = _bill_service(ctx)
    party_service = PartyService(db)

    party_id = None
    if party is not None:
        party_id = resolve_party_or_exit(ctx, party_service, party)

    bills = service.list_bills(party_id=party_id)
    if not bills:
        click.echo("No bills found.")
        return

    parties = {p.id: p.name for p in party_service.list_parties()}
    click.echo(f"\nFound {len(bills)} bill(s):")
    click.echo("-" * 100)
    for bill in bills:
        amount = format_amount(bill.amount) if bill.amount is not None else "-"
        linked = f"entry {bill.transaction_id}" if bill.transaction_id is not None else "unlinked"
        reference = bill.reference or service.transaction_reference(bill) or ""
        click.echo(
            f"ID: {bill.id:3d} | {bill.upload_date.date().isoformat()} | "
            f"{parties.get(bill.party_id, 'Unknown')[:20]:20s} | {bill.filename[:28]:28s} | "
            f"{amount:>12s} | {linked} {reference}".rstrip()
        )


@bill_group.command("download")
@click.argument("bill_id", type=int)
@click.argument("dest", type=click.Path(path_type=Path))
@click.pass_context
def download_bill(ctx, bill_id: int, dest: Path):
    """Copy a stored bill to DEST.

    If DEST is a directory the original file name is kept.
    """
    service = _bill_service(ctx)
    try:
        bill = service.require_bill(bill_id)
        source = service.bill_file_path(bill_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    target = dest / bill.filename if dest.is_dir() else dest
    shutil.copyfile(source, target)
    click.echo(f"Saved bill {bill_id} to {target}")


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
