"""Audit record builders.

Each function returns the keyword arguments for ``Database.create_activity``
describing one mutation. Backends call these so every store writes the same
text.
"""

from decimal import Decimal
from typing import Any, Optional

from billbook.domain.entities import Bill, EntityType, Party, Transaction

SYSTEM_USER = "system"


def format_amount(amount: Decimal) -> str:
    """Render an amount the way activity details show it."""
    return f"₹{amount:,.2f}"


def _party_label(party: Optional[Party]) -> str:
    return party.name if party is not None else "unknown party"


def party_created(party: Party, performed_by: str = SYSTEM_USER) -> dict[str, Any]:
    return {
        "performed_by": performed_by,
        "description": "Created new party",
        "entity_type": EntityType.PARTY,
        "entity_id": party.id,
        "entity_name": party.name,
        "details": f"Created party: {party.name}",
    }


def party_updated(party: Party, performed_by: str = SYSTEM_USER) -> dict[str, Any]:
    return {
        "performed_by": performed_by,
        "description": "Updated party",
        "entity_type": EntityType.PARTY,
        "entity_id": party.id,
        "entity_name": party.name,
        "details": f"Updated party: {party.name}",
    }


def transaction_created(
    transaction: Transaction, party: Optional[Party], performed_by: str = SYSTEM_USER
) -> dict[str, Any]:
    kind = transaction.type.value.lower()
    label = _party_label(party)
    return {
        "performed_by": performed_by,
        "description": f"Created {kind} entry",
        "entity_type": EntityType.TRANSACTION,
        "entity_id": transaction.id,
        "entity_name": f"{transaction.type.value} for {label}",
        "details": f"Created {kind} entry of {format_amount(transaction.amount)} for {label}",
    }


def transaction_updated(
    transaction: Transaction, party: Optional[Party], performed_by: str = SYSTEM_USER
) -> dict[str, Any]:
    return {
        "performed_by": performed_by,
        "description": "Updated transaction",
        "entity_type": EntityType.TRANSACTION,
        "entity_id": transaction.id,
        "entity_name": f"Transaction for {_party_label(party)}",
        "details": f"Transaction {transaction.id} updated by {performed_by}",
    }


def bill_uploaded(bill: Bill, party: Optional[Party], performed_by: str = SYSTEM_USER) -> dict[str, Any]:
    label = _party_label(party)
    return {
        "performed_by": performed_by,
        "description": "Uploaded bill",
        "entity_type": EntityType.BILL,
        "entity_id": bill.id,
        "entity_name": f"Bill for {label}",
        "details": f"Uploaded bill: {bill.filename} for {label}",
    }
