"""Activity log commands."""

import click
from billbook.domain.activity import ActivityService
from billbook.domain.entities import EntityType


@click.group()
def activity_group():
    """Review the activity log."""
    pass


@activity_group.command("list")
@click.option("--limit", type=int, help="Show at most this many records")
@click.option(
    "--entity",
    "entity_type",
    type=click.Choice([t.value for t in EntityType], case_sensitive=False),
    help="Only activities about this kind of entity",
)
@click.option("--id", "entity_id", type=int, help="Only activities about this entity ID")
@click.option("--verbose", "-v", is_flag=True, help="Show details for each record")
@click.pass_context
def list_activities(ctx, limit: int | None, entity_type: str | None, entity_id: int | None, verbose: bool):
    """List activities, newest first."""
    service = ActivityService(ctx.obj["db"])
    activities = service.list_activities(limit=limit, entity_type=entity_type, entity_id=entity_id)

    if not activities:
        click.echo("No activities found.")
        return

    for act in activities:
        when = act.timestamp.strftime("%Y-%m-%d %H:%M:%S")
        subject = f" [{act.entity_name}]" if act.entity_name else ""
        click.echo(f"{when} | {act.performed_by:12s} | {act.description}{subject}")
        if verbose and act.details:
            click.echo(f"    {act.details}")


def register_commands(cli):
    """Register activity commands with main CLI."""
    cli.add_command(activity_group, name="activity")
