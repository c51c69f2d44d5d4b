"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Any, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or is out of scope."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class MappingRequiredError(ValidationError):
    """No usable column mapping could be resolved for a CSV import.

    Carries the detected headers, the best-effort mapping and a few sample
    rows so the caller can build an explicit mapping and retry.
    """

    def __init__(
        self,
        headers: list[str],
        detected_mapping: dict[str, Optional[str]],
        sample_rows: list[dict[str, str]],
    ):
        super().__init__(
            "Could not detect required columns (date, description, amount). "
            "Please provide column mapping."
        )
        self.headers = headers
        self.detected_mapping = detected_mapping
        self.sample_rows = sample_rows

    def to_dict(self) -> dict[str, Any]:
        """Structured payload for API callers."""
        return {
            "error": str(self),
            "headers": self.headers,
            "detected_mapping": self.detected_mapping,
            "sample_rows": self.sample_rows,
        }


class ReconciliationBlockedError(ValidationError):
    """Completion refused because the difference is outside tolerance."""

    def __init__(self, difference: Decimal):
        super().__init__(f"Cannot complete: difference of ${difference:.2f} remains")
        self.difference = difference


def bank_account_not_found(account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing bank transaction."""
    return f"Transaction {transaction_id} not found"


def reconciliation_not_found(reconciliation_id: int) -> str:
    """Return message for missing reconciliation."""
    return f"Reconciliation {reconciliation_id} not found"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account still has transactions."""
    return (
        f"Cannot delete bank account {account_id}: it has "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Please delete them first."
    )
