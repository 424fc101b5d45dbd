"""Utility for resolving party names to IDs."""

from billbook.domain.errors import NotFoundError, party_name_not_found, party_not_found
from billbook.domain.party import PartyService


def resolve_party(party_service: PartyService, party: str | int) -> int:
    """Resolve party name or ID to party ID.

    Args:
        party_service: PartyService instance
        party: Party name (str) or ID (int or string representation of int)

    Returns:
        Party ID

    Raises:
        NotFoundError: If party is not found
    """
    if isinstance(party, str):
        try:
            party = int(party)
        except ValueError:
            # Not a number, treat as name
            found = party_service.find_party_by_name(party.strip())
            if found is None:
                raise NotFoundError(party_name_not_found(party))
            return found.id

    if party_service.get_party(party) is None:
        raise NotFoundError(party_not_found(party))
    return party
