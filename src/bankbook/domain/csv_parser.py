"""Generic CSV parser for bank statement exports.

Banks do not agree on a CSV layout, so nothing here relies on a declared
schema. The text is tokenized into a header row and raw rows, then each
header is matched to a transaction field: first by known column names, then,
for whatever is still missing, by looking at what the column actually
contains.
"""

import re
from dataclasses import dataclass, field, fields
from typing import Any, Optional

from bankbook.domain.errors import ValidationError
from bankbook.utils.amount_parser import is_amount_value
from bankbook.utils.date_parser import is_date_value

SAMPLE_ROW_COUNT = 10

DATE_LIKE_THRESHOLD = 0.7
AMOUNT_LIKE_THRESHOLD = 0.7
LONG_TEXT_THRESHOLD = 0.5
LONG_TEXT_MIN_LENGTH = 5

EXACT_NAME_CONFIDENCE = 1.0
PARTIAL_NAME_CONFIDENCE = 0.9

COLUMN_NAMES: dict[str, tuple[str, ...]] = {
    "date": ("date", "transaction date", "trans date", "posting date", "post date", "effective date"),
    "description": (
        "description",
        "memo",
        "narrative",
        "details",
        "payee",
        "transaction description",
        "name",
    ),
    "amount": ("amount", "transaction amount", "trans amount"),
    "debit": ("debit", "withdrawal", "withdrawals", "debit amount", "money out"),
    "credit": ("credit", "deposit", "deposits", "credit amount", "money in"),
    "reference": ("reference", "ref", "reference number", "ref no", "confirmation", "transaction id"),
    "check_number": ("check number", "check no", "check #", "cheque number"),
    "category": ("category", "type", "transaction type"),
}

# debit/credit go before amount so "Debit Amount" is not taken as a signed amount column
NAME_PASS_ORDER = (
    "date",
    "description",
    "debit",
    "credit",
    "amount",
    "reference",
    "check_number",
    "category",
)

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass
class ColumnMapping:
    """Which CSV header feeds which transaction field."""

    date: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None
    reference: Optional[str] = None
    check_number: Optional[str] = None
    category: Optional[str] = None

    def is_usable(self) -> bool:
        """True if rows can be turned into transactions with this mapping."""
        return bool(self.date and self.description and (self.amount or self.debit or self.credit))

    def to_dict(self) -> dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ColumnMapping":
        """Build a mapping from caller-supplied field/header pairs.

        ``checkNumber`` is accepted as an alias for ``check_number``. Empty
        values are treated as unmapped.

        Raises:
            ValidationError: If an unknown field name is given
        """
        known = {f.name for f in fields(cls)}
        values: dict[str, Optional[str]] = {}
        for key, header in data.items():
            name = "check_number" if key == "checkNumber" else key
            if name not in known:
                raise ValidationError(
                    f"Unknown mapping field '{key}'. Must be one of: {', '.join(sorted(known))}"
                )
            values[name] = header or None
        return cls(**values)


@dataclass(frozen=True)
class CSVParseResult:
    """Headers, raw rows and the inferred column mapping of one CSV text."""

    headers: list[str]
    rows: list[dict[str, str]]
    detected_mapping: ColumnMapping
    confidence: dict[str, float] = field(default_factory=dict)


def parse_line(line: str) -> list[str]:
    """Split one CSV line into trimmed fields, honouring double quotes."""
    result: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    result.append("".join(current).strip())
    return result


def _name_match_score(header: str, candidates: tuple[str, ...]) -> float:
    normalized = header.lower().strip()
    if normalized in candidates:
        return EXACT_NAME_CONFIDENCE
    if any(candidate in normalized for candidate in candidates):
        return PARTIAL_NAME_CONFIDENCE
    return 0.0


def _match_ratio(values: list[str], test) -> float:
    if not values:
        return 0.0
    return sum(1 for value in values if test(value.strip())) / len(values)


def detect_mapping(
    headers: list[str], sample_rows: list[dict[str, str]]
) -> tuple[ColumnMapping, dict[str, float]]:
    """Infer the column mapping for a set of headers.

    Args:
        headers: Header names in file order
        sample_rows: Leading data rows used for content detection

    Returns:
        Tuple of (mapping, per-field confidence between 0 and 1)
    """
    mapping = ColumnMapping()
    confidence: dict[str, float] = {}
    assigned: set[str] = set()

    # Name pass
    for field_name in NAME_PASS_ORDER:
        for header in headers:
            if header in assigned:
                continue
            score = _name_match_score(header, COLUMN_NAMES[field_name])
            if score:
                setattr(mapping, field_name, header)
                confidence[field_name] = score
                assigned.add(header)
                break

    # Content pass
    if mapping.date and mapping.description and (mapping.amount or mapping.debit):
        return mapping, confidence

    for header in headers:
        if header in assigned:
            continue

        values = [row.get(header, "") for row in sample_rows]
        non_empty = [value for value in values if value.strip()]

        if not mapping.date:
            ratio = _match_ratio(non_empty, is_date_value)
            if ratio >= DATE_LIKE_THRESHOLD:
                mapping.date = header
                confidence["date"] = ratio
                assigned.add(header)
                continue

        if not mapping.amount and not mapping.debit:
            ratio = _match_ratio(non_empty, is_amount_value)
            if ratio >= AMOUNT_LIKE_THRESHOLD:
                mapping.amount = header
                confidence["amount"] = ratio
                assigned.add(header)
                continue

        if not mapping.description and values:
            long_values = sum(1 for value in values if len(value) > LONG_TEXT_MIN_LENGTH)
            if long_values > len(values) * LONG_TEXT_THRESHOLD:
                mapping.description = header
                confidence["description"] = long_values / len(values)
                assigned.add(header)

    return mapping, confidence


def parse_csv(csv_text: str) -> CSVParseResult:
    """Parse CSV text into headers, rows and a detected column mapping.

    Never raises for malformed input; the worst case is misaligned columns
    that the mapping detection fails to resolve.

    Args:
        csv_text: Full CSV text with ``\\n`` or ``\\r\\n`` line endings

    Returns:
        CSVParseResult
    """
    lines = [line for line in _LINE_SPLIT.split(csv_text.lstrip("\ufeff")) if line.strip()]
    if not lines:
        return CSVParseResult(headers=[], rows=[], detected_mapping=ColumnMapping())

    headers = parse_line(lines[0])
    rows: list[dict[str, str]] = []
    for line in lines[1:]:
        values = parse_line(line)
        if len(values) == 1 and not values[0]:
            continue
        rows.append(
            {header: values[j] if j < len(values) else "" for j, header in enumerate(headers)}
        )

    mapping, confidence = detect_mapping(headers, rows[:SAMPLE_ROW_COUNT])
    return CSVParseResult(
        headers=headers, rows=rows, detected_mapping=mapping, confidence=confidence
    )
