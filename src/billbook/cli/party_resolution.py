"""CLI helpers for party resolution."""

from __future__ import annotations

import click
from billbook.cli.error_handling import handle_domain_error
from billbook.domain.errors import DomainError
from billbook.domain.party import PartyService
from billbook.utils.party_resolver import resolve_party


def resolve_party_or_exit(ctx: click.Context, party_service: PartyService, party: str | int) -> int:
    """Resolve party name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_party(party_service, party)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
