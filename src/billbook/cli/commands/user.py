"""User management commands."""

import click
from billbook.cli.error_handling import handle_domain_error
from billbook.domain.errors import DomainError
from billbook.domain.user import UserService


@click.group()
def user_group():
    """Manage users."""
    pass


@user_group.command("create")
@click.argument("username")
@click.option("--password-hash", required=True, help="Password hash produced by the auth layer")
@click.pass_context
def create_user(ctx, username: str, password_hash: str):
    """Register a user.

    Passwords are never hashed here; pass the hash your authentication
    setup produced.
    """
    service = UserService(ctx.obj["db"])
    try:
        user = service.create_user(username, password_hash)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{user.username}' (ID: {user.id})")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
