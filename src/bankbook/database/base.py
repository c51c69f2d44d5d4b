"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly; the domain package resolves its services lazily
from bankbook.domain.entities import (
    BankAccount,
    BankTransaction,
    NormalizedTransaction,
    Reconciliation,
)


class Database(ABC):
    """Abstract database interface for bankbook.

    Every write commits on its own; the interface offers no cross-call
    transaction.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        name: str,
        institution: Optional[str] = None,
        account_type: str = "checking",
        current_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self) -> list[BankAccount]:
        """List all bank accounts."""
        pass

    @abstractmethod
    def delete_bank_account(self, account_id: int) -> None:
        """Delete a bank account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, account_id: int) -> int:
        """Get count of transactions belonging to a bank account."""
        pass

    @abstractmethod
    def adjust_account_balance(self, account_id: int, delta: Decimal) -> None:
        """Add delta to the account's current balance in a single statement."""
        pass

    @abstractmethod
    def set_last_reconciled(self, account_id: int, reconciled_date: date, balance: Decimal) -> None:
        """Record the statement date and balance of the last completed reconciliation."""
        pass

    # Bank transaction operations
    @abstractmethod
    def insert_bank_transactions(
        self, bank_account_id: int, transactions: list[NormalizedTransaction]
    ) -> list[int]:
        """Insert transactions in one commit. Returns the new IDs in input order.

        Nothing from the call is kept if any row fails.
        """
        pass

    @abstractmethod
    def get_bank_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get bank transaction by ID."""
        pass

    @abstractmethod
    def list_bank_transactions(
        self,
        bank_account_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        reconciliation_id: Optional[int] = None,
        import_id: Optional[str] = None,
    ) -> list[BankTransaction]:
        """List bank transactions with optional filters, newest date first.

        Args:
            bank_account_id: Optional bank account filter
            status: Optional review status filter
            start_date: Optional inclusive ISO start date
            end_date: Optional inclusive ISO end date
            reconciliation_id: Only transactions claimed by this reconciliation
            import_id: Only transactions from this import batch
        """
        pass

    @abstractmethod
    def update_transaction_status(self, transaction_id: int, status: str) -> None:
        """Update transaction review status."""
        pass

    @abstractmethod
    def set_transaction_reconciliation(
        self, transaction_id: int, reconciliation_id: Optional[int]
    ) -> None:
        """Claim (or release, with None) a transaction for a reconciliation."""
        pass

    @abstractmethod
    def mark_reconciliation_transactions_reconciled(self, reconciliation_id: int) -> int:
        """Set is_reconciled on every transaction claimed by a reconciliation. Returns count."""
        pass

    @abstractmethod
    def unlink_reconciliation_transactions(self, reconciliation_id: int) -> int:
        """Release and un-reconcile every transaction of a reconciliation. Returns count."""
        pass

    @abstractmethod
    def delete_transactions_by_import(self, import_id: str) -> int:
        """Delete all transactions of an import batch. Returns count."""
        pass

    # Reconciliation operations
    @abstractmethod
    def create_reconciliation(
        self,
        bank_account_id: int,
        statement_date: date,
        statement_balance: Decimal,
        opening_balance: Decimal,
        cleared_balance: Decimal,
        difference: Decimal,
        status: str,
    ) -> int:
        """Create a reconciliation. Returns reconciliation ID."""
        pass

    @abstractmethod
    def get_reconciliation(self, reconciliation_id: int) -> Optional[Reconciliation]:
        """Get reconciliation by ID."""
        pass

    @abstractmethod
    def list_reconciliations(self, bank_account_id: Optional[int] = None) -> list[Reconciliation]:
        """List reconciliations, latest statement date first."""
        pass

    @abstractmethod
    def update_reconciliation(
        self,
        reconciliation_id: int,
        cleared_balance: Optional[Decimal] = None,
        difference: Optional[Decimal] = None,
        status: Optional[str] = None,
        completed_at: Optional[datetime] = None,
    ) -> None:
        """Update reconciliation fields. Only non-None values are written."""
        pass

    @abstractmethod
    def delete_reconciliation(self, reconciliation_id: int) -> None:
        """Delete a reconciliation record."""
        pass
