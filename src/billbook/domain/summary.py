"""Dashboard summary domain service."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from billbook.database.base import Database
from billbook.domain.entities import Party as PartyEntity, Transaction as TransactionEntity
from billbook.domain.errors import FieldError, ValidationError

TOP_PARTIES_LIMIT = 5
RECENT_LIMIT = 7


@dataclass(frozen=True)
class DashboardSummary:
    """Headline figures across all parties."""

    total_outstanding: Decimal
    party_count: int
    recent_transactions: tuple[TransactionEntity, ...]
    top_parties: tuple[PartyEntity, ...]

    @property
    def recent_count(self) -> int:
        return len(self.recent_transactions)


def _check_limit(value: int, field: str) -> None:
    if value <= 0:
        raise ValidationError("Invalid limit", [FieldError(field, "must be greater than zero")])


class SummaryService:
    """Service for building the overview of outstanding balances."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def total_outstanding(self, parties: Optional[Sequence[PartyEntity]] = None) -> Decimal:
        """Sum of all party balances."""
        if parties is None:
            parties = self.db.list_parties()
        return sum((p.balance for p in parties), Decimal("0"))

    def top_parties_by_balance(
        self,
        limit: int = TOP_PARTIES_LIMIT,
        parties: Optional[Sequence[PartyEntity]] = None,
    ) -> list[PartyEntity]:
        """Parties owing the most, highest balance first.

        Ties are broken by name so the order is stable.

        Raises:
            ValidationError: If limit is not positive
        """
        _check_limit(limit, "top")
        if parties is None:
            parties = self.db.list_parties()
        ordered = sorted(parties, key=lambda p: (-p.balance, p.name.lower(), p.id))
        return ordered[:limit]

    def build_summary(
        self, top_limit: int = TOP_PARTIES_LIMIT, recent_limit: int = RECENT_LIMIT
    ) -> DashboardSummary:
        """Build the dashboard overview.

        Args:
            top_limit: How many parties to rank by balance
            recent_limit: How many of the latest entries to include

        Returns:
            DashboardSummary with totals, counts and rankings

        Raises:
            ValidationError: If a limit is not positive
        """
        _check_limit(recent_limit, "recent")
        parties = self.db.list_parties()
        return DashboardSummary(
            total_outstanding=self.total_outstanding(parties),
            party_count=len(parties),
            recent_transactions=tuple(self.db.list_recent_transactions(recent_limit)),
            top_parties=tuple(self.top_parties_by_balance(top_limit, parties)),
        )
