"""Party domain service."""

import logging
from typing import Optional
from billbook.database.base import Database
from billbook.domain.audit import SYSTEM_USER
from billbook.domain.entities import Party as PartyEntity
from billbook.domain.errors import (
    ConflictError,
    FieldError,
    NotFoundError,
    duplicate_gstin,
    party_not_found,
)
from billbook.domain import validation

logger = logging.getLogger(__name__)

_UNSET = object()


class PartyService:
    """Service for managing parties."""

    def __init__(self, db: Database):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_gstin_unique(self, gstin: Optional[str], party_id: Optional[int] = None) -> None:
        if gstin is None:
            return
        for party in self.db.list_parties():
            if party.id != party_id and party.gstin == gstin:
                raise ConflictError(duplicate_gstin(gstin))

    def create_party(
        self,
        name: str,
        description: Optional[str] = None,
        gstin: Optional[str] = None,
        performed_by: str = SYSTEM_USER,
    ) -> PartyEntity:
        """Create a new party with a zero balance.

        Args:
            name: Party name
            description: Optional description
            gstin: Optional GSTIN tax identifier, unique across parties
            performed_by: Username recorded in the activity log

        Returns:
            The created party

        Raises:
            ValidationError: If the name is missing or the GSTIN is malformed
            ConflictError: If another party already uses the GSTIN
        """
        errors: list[FieldError] = []
        name = validation.required_text(name, "name", errors)
        gstin = validation.gstin(gstin, errors)
        validation.raise_if_errors(errors, "Invalid party data")

        self._check_gstin_unique(gstin)

        party = self.db.create_party(
            name=name,
            description=validation.optional_text(description),
            gstin=gstin,
            performed_by=performed_by,
        )
        logger.info(f"Created party {party.id} '{party.name}'")
        return party

    def get_party(self, party_id: int) -> Optional[PartyEntity]:
        """Get party by ID, or None if not found."""
        return self.db.get_party(party_id)

    def require_party(self, party_id: int) -> PartyEntity:
        """Get party by ID.

        Raises:
            NotFoundError: If the party does not exist
        """
        party = self.db.get_party(party_id)
        if party is None:
            raise NotFoundError(party_not_found(party_id))
        return party

    def list_parties(self) -> list[PartyEntity]:
        """List all parties sorted by name."""
        return sorted(self.db.list_parties(), key=lambda p: (p.name.lower(), p.id))

    def find_party_by_name(self, name: str) -> Optional[PartyEntity]:
        """Find a party by exact name."""
        for party in self.db.list_parties():
            if party.name == name:
                return party
        return None

    def update_party(
        self,
        party_id: int,
        name: Optional[str] = None,
        description=_UNSET,
        gstin=_UNSET,
        performed_by: str = SYSTEM_USER,
    ) -> PartyEntity:
        """Update party details.

        Only the given fields change. Pass ``description=None`` or
        ``gstin=None`` to clear them. The balance cannot be changed here; it
        only moves through ledger entries.

        Raises:
            NotFoundError: If the party does not exist
            ValidationError: If a field is invalid
            ConflictError: If another party already uses the GSTIN
        """
        self.require_party(party_id)

        errors: list[FieldError] = []
        changes = {}
        if name is not None:
            changes["name"] = validation.required_text(name, "name", errors)
        if description is not _UNSET:
            changes["description"] = validation.optional_text(description)
        if gstin is not _UNSET:
            changes["gstin"] = validation.gstin(gstin, errors)
        validation.raise_if_errors(errors, "Invalid party data")

        if "gstin" in changes:
            self._check_gstin_unique(changes["gstin"], party_id)

        party = self.db.update_party(party_id, changes, performed_by=performed_by)
        if party is None:
            raise NotFoundError(party_not_found(party_id))
        logger.info(f"Updated party {party_id}")
        return party
