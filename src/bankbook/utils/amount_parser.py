"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

CENT = Decimal("0.01")

_STRIP_PATTERN = re.compile(r"[$,\s]")
_AMOUNT_LIKE_PATTERN = re.compile(r"^-?\d+\.?\d{0,2}$")


def _clean(amount_str: str) -> str:
    cleaned = _STRIP_PATTERN.sub("", amount_str)
    # Accounting notation: (123.45) is a negative amount
    if cleaned.startswith("(") and cleaned.endswith(")"):
        cleaned = "-" + cleaned[1:-1]
    return cleaned


def parse_amount(amount_str: str | None) -> Decimal:
    """Parse a bank export amount into a Decimal, leniently.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Anything that does not parse as a finite number (including an empty
    cell) yields ``Decimal("0")``.

    Args:
        amount_str: Raw cell text

    Returns:
        Decimal amount
    """
    if not amount_str:
        return Decimal("0")

    try:
        amount = Decimal(_clean(amount_str))
    except InvalidOperation:
        return Decimal("0")

    if not amount.is_finite():
        return Decimal("0")
    return amount


def parse_amount_strict(amount_str: str) -> Decimal:
    """Parse a user-entered amount string into a Decimal.

    Accepts the same notations as :func:`parse_amount`.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = _clean(amount_str.strip())
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def is_amount_value(value: str) -> bool:
    """Return True if a cell looks like a currency amount.

    Currency symbols, thousands separators and whitespace are ignored.
    """
    return bool(_AMOUNT_LIKE_PATTERN.match(_STRIP_PATTERN.sub("", value)))


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to whole cents, halves away from zero."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
