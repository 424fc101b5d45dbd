"""Summary commands."""

import click
from billbook.cli.error_handling import handle_domain_error
from billbook.domain.audit import format_amount
from billbook.domain.errors import DomainError
from billbook.domain.summary import RECENT_LIMIT, TOP_PARTIES_LIMIT, SummaryService


@click.command("summary")
@click.option("--top", type=int, default=TOP_PARTIES_LIMIT, show_default=True, help="Number of parties to rank")
@click.option(
    "--recent", type=int, default=RECENT_LIMIT, show_default=True, help="Number of latest entries to count"
)
@click.pass_context
def summary(ctx, top: int, recent: int):
    """Show outstanding balances across all parties.

    Examples:
        billbook summary
        billbook summary --top 10
    """
    service = SummaryService(ctx.obj["db"])
    try:
        overview = service.build_summary(top_limit=top, recent_limit=recent)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Total outstanding: {format_amount(overview.total_outstanding)}")
    click.echo(f"Parties: {overview.party_count}")
    click.echo(f"Recent entries: {overview.recent_count}")

    if not overview.top_parties:
        click.echo("\nNo parties found.")
        return

    click.echo("\nTop parties by balance:")
    click.echo("-" * 60)
    for rank, party in enumerate(overview.top_parties, start=1):
        click.echo(f"{rank:2d}. {party.name[:36]:36s} {format_amount(party.balance):>16s}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
