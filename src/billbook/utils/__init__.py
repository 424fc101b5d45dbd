"""Utility functions for billbook."""

from billbook.utils.date_parser import parse_date
from billbook.utils.amount_parser import parse_amount

__all__ = ["parse_date", "parse_amount"]
