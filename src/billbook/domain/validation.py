"""Field validation helpers shared by the domain services.

Each helper either returns the normalized value or appends a FieldError to
the ``errors`` list it is given, so a service can report every bad field at
once.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from billbook.domain.entities import TransactionType
from billbook.domain.errors import FieldError, ValidationError

# State code, PAN, entity number, a literal Z, check character
GSTIN_PATTERN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][0-9A-Z]Z[0-9A-Z]$")

# Amounts are stored with two decimal places
MAX_AMOUNT_PLACES = 2


def raise_if_errors(errors: list[FieldError], message: str) -> None:
    """Raise a ValidationError carrying ``errors`` if there are any."""
    if errors:
        raise ValidationError(message, errors)


def required_text(value: Any, field: str, errors: list[FieldError]) -> Optional[str]:
    """Return the stripped text, or record an error if it is empty."""
    if not isinstance(value, str) or not value.strip():
        errors.append(FieldError(field, "is required"))
        return None
    return value.strip()


def optional_text(value: Optional[str]) -> Optional[str]:
    """Strip text and turn blank strings into None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def gstin(value: Optional[str], errors: list[FieldError]) -> Optional[str]:
    """Normalize a GSTIN to upper case and check its shape."""
    value = optional_text(value)
    if value is None:
        return None
    value = value.upper()
    if not GSTIN_PATTERN.match(value):
        errors.append(
            FieldError("gstin", "invalid format: expected state code, PAN, entity number, 'Z' and check character")
        )
        return None
    return value


def positive_amount(value: Any, errors: list[FieldError], field: str = "amount") -> Optional[Decimal]:
    """Coerce a value to a positive Decimal with at most two decimal places."""
    if value is None or isinstance(value, bool):
        errors.append(FieldError(field, "is required"))
        return None
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        errors.append(FieldError(field, f"'{value}' is not a number"))
        return None
    if not amount.is_finite() or amount <= 0:
        errors.append(FieldError(field, "must be greater than zero"))
        return None
    # 10.50 and 10.500 are fine, 10.005 is not
    if -amount.normalize().as_tuple().exponent > MAX_AMOUNT_PLACES:
        errors.append(FieldError(field, f"must have at most {MAX_AMOUNT_PLACES} decimal places"))
        return None
    return amount


def transaction_type(value: Any, errors: list[FieldError]) -> Optional[TransactionType]:
    """Coerce a value to a TransactionType (case-insensitive)."""
    if isinstance(value, TransactionType):
        return value
    if isinstance(value, str):
        try:
            return TransactionType(value.strip().upper())
        except ValueError:
            pass
    allowed = ", ".join(t.value for t in TransactionType)
    errors.append(FieldError("type", f"must be one of {allowed}"))
    return None
