"""Main CLI entry point."""

import click
from billbook.database.factories import BACKENDS, DEFAULT_BACKEND, create_database, resolve_data_dir
from billbook.domain.audit import SYSTEM_USER
from billbook.logging_config import configure_logging

# Import and register all commands at module level
from billbook.cli.commands import (
    activity,
    bill,
    entry,
    party,
    summary,
    user,
)


@click.group()
@click.option(
    "--backend",
    type=click.Choice(BACKENDS),
    default=DEFAULT_BACKEND,
    show_default=True,
    envvar="BILLBOOK_BACKEND",
    help="Storage backend",
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    envvar="BILLBOOK_DATA_DIR",
    help="Directory for data files and uploaded bills (default: ~/.billbook)",
)
@click.option(
    "--user",
    "username",
    default=SYSTEM_USER,
    envvar="BILLBOOK_USER",
    help="Username recorded in the activity log",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, backend: str, data_dir: str | None, username: str, verbose: bool):
    """Billbook - party ledger and bill keeping.

    Track what each party owes through credit and deposit entries, keep the
    scanned bills that back them, and review every change in the activity log.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        data_path = resolve_data_dir(data_dir)
        db = create_database(backend, data_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["user"] = username
        ctx.obj["uploads_dir"] = data_path / "uploads"


# Register all commands
party.register_commands(cli)
entry.register_commands(cli)
bill.register_commands(cli)
activity.register_commands(cli)
user.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
