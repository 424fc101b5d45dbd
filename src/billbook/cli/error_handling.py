"""CLI error handling helpers."""

import click

from billbook.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error (with any field errors) and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, ValidationError):
        for field_error in error.errors:
            click.echo(f"  {field_error}", err=True)
    ctx.exit(1)
