"""Utility functions for bankbook."""

from bankbook.utils.date_parser import normalize_date, parse_date, is_date_value
from bankbook.utils.amount_parser import parse_amount, parse_amount_strict, is_amount_value, to_cents

__all__ = [
    "normalize_date",
    "parse_date",
    "is_date_value",
    "parse_amount",
    "parse_amount_strict",
    "is_amount_value",
    "to_cents",
]
