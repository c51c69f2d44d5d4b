"""Domain model entities for bankbook.

These are pure data classes representing business concepts, independent of
database schema. The services hand these out and the database layer maps its
rows into them.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

DEBIT = "debit"
CREDIT = "credit"

STATUS_UNREVIEWED = "unreviewed"
TRANSACTION_STATUSES = (STATUS_UNREVIEWED, "reviewed", "matched", "excluded")

RECONCILIATION_IN_PROGRESS = "in_progress"
RECONCILIATION_COMPLETED = "completed"


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: int
    name: str
    institution: Optional[str]
    account_type: str
    current_balance: Decimal
    last_reconciled_balance: Optional[Decimal]
    last_reconciled_date: Optional[date]
    created_at: datetime


@dataclass(frozen=True)
class BankTransaction:
    """Bank transaction domain entity.

    ``amount`` is always non-negative; the direction lives in ``type``.
    ``date`` is an ISO calendar date string as produced by the importer.
    """

    id: int
    bank_account_id: int
    date: str
    description: str
    amount: Decimal
    type: str
    payee: Optional[str]
    reference: Optional[str]
    check_number: Optional[str]
    memo: Optional[str]
    status: str
    import_id: Optional[str]
    reconciliation_id: Optional[int]
    is_reconciled: bool
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with credits positive and debits negative."""
        return self.amount if self.type == CREDIT else -self.amount


@dataclass(frozen=True)
class NormalizedTransaction:
    """Candidate transaction produced from one CSV row, before persistence."""

    date: str
    description: str
    amount: Decimal
    type: str
    payee: Optional[str] = None
    reference: Optional[str] = None
    check_number: Optional[str] = None
    memo: Optional[str] = None
    status: str = STATUS_UNREVIEWED
    import_id: Optional[str] = None


@dataclass(frozen=True)
class Reconciliation:
    """Reconciliation session domain entity."""

    id: int
    bank_account_id: int
    statement_date: date
    statement_balance: Decimal
    opening_balance: Decimal
    cleared_balance: Decimal
    difference: Decimal
    status: str
    completed_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class ImportResult:
    """Counters returned by a CSV import."""

    import_id: str
    imported: int
    skipped: int
    total: int


@dataclass(frozen=True)
class ToggleResult:
    """Recomputed balances after a reconciliation toggle."""

    cleared_balance: Decimal
    difference: Decimal
