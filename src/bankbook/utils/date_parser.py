"""Date parsing utilities."""

import re
from datetime import date, timedelta, timezone
from dateutil import parser as date_parser

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DATE_PATTERNS = [
    re.compile(r"^\d{1,2}/\d{1,2}/\d{2,4}$"),  # MM/DD/YYYY or M/D/YY
    ISO_DATE_PATTERN,  # YYYY-MM-DD
    re.compile(r"^\d{1,2}-\d{1,2}-\d{2,4}$"),  # MM-DD-YYYY
    re.compile(r"^\d{1,2}\.\d{1,2}\.\d{2,4}$"),  # MM.DD.YYYY
    re.compile(r"^[A-Z][a-z]{2}\s+\d{1,2},?\s+\d{4}$"),  # Jan 15, 2024
]


def is_date_value(value: str) -> bool:
    """Return True if a cell looks like one of the common bank date formats."""
    value = value.strip()
    return any(pattern.match(value) for pattern in DATE_PATTERNS)


def normalize_date(value: str | None) -> str:
    """Normalize a bank export date cell to ``YYYY-MM-DD``.

    ISO dates pass through untouched. Anything else goes through dateutil;
    timezone-aware results are converted to UTC before taking the calendar
    date. A value dateutil cannot read is returned trimmed but otherwise
    unchanged, so the row is still imported with the raw text as its date.

    Args:
        value: Raw cell text

    Returns:
        ISO calendar date string, the trimmed input, or "" for empty input
    """
    if not value:
        return ""
    trimmed = value.strip()
    if not trimmed:
        return ""

    if ISO_DATE_PATTERN.match(trimmed):
        return trimmed

    try:
        dt = date_parser.parse(trimmed)
    except (ValueError, OverflowError):
        return trimmed

    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.date().isoformat()


def parse_date(date_str: str) -> date:
    """Parse a user-entered date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024", ...) and the
    relative words "today", "yesterday" and "tomorrow".

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    try:
        dt = date_parser.parse(date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
