"""Bank transaction domain service."""

import logging
from decimal import Decimal
from typing import Optional

from bankbook.database.base import Database
from bankbook.domain.entities import (
    BankTransaction as BankTransactionEntity,
    CREDIT,
    DEBIT,
    NormalizedTransaction,
    TRANSACTION_STATUSES,
)
from bankbook.domain.errors import (
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    transaction_not_found,
)
from bankbook.utils.amount_parser import to_cents

logger = logging.getLogger(__name__)


def net_change(transactions) -> Decimal:
    """Sum of credits minus sum of debits."""
    return sum(
        (txn.amount if txn.type == CREDIT else -txn.amount for txn in transactions),
        Decimal("0"),
    )


class BankTransactionService:
    """Service for managing bank transactions."""

    def __init__(self, db: Database):
        """Initialize bank transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        bank_account_id: int,
        date: str,
        description: str,
        amount: Decimal,
        type: Optional[str] = None,
        payee: Optional[str] = None,
        reference: Optional[str] = None,
        check_number: Optional[str] = None,
        memo: Optional[str] = None,
    ) -> int:
        """Create a single transaction by hand and apply it to the account balance.

        Args:
            bank_account_id: Bank account ID
            date: ISO transaction date
            description: Description
            amount: Amount; when type is omitted a negative amount means debit
            type: Optional explicit "debit" or "credit"
            payee: Optional payee
            reference: Optional reference
            check_number: Optional check number
            memo: Optional memo

        Returns:
            Transaction ID

        Raises:
            NotFoundError: If the bank account doesn't exist
            ValidationError: If required fields are missing or type is invalid
        """
        if self.db.get_bank_account(bank_account_id) is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))
        if not date or not description:
            raise ValidationError("date and description are required")
        if type is None:
            type = DEBIT if amount < 0 else CREDIT
        if type not in (DEBIT, CREDIT):
            raise ValidationError(f"Invalid transaction type '{type}'. Must be debit or credit")

        txn = NormalizedTransaction(
            date=date,
            description=description,
            amount=to_cents(abs(amount)),
            type=type,
            payee=payee,
            reference=reference,
            check_number=check_number,
            memo=memo,
        )
        [transaction_id] = self.db.insert_bank_transactions(bank_account_id, [txn])
        self.db.adjust_account_balance(bank_account_id, net_change([txn]))
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[BankTransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_bank_transaction(transaction_id)

    def list_transactions(
        self,
        bank_account_id: Optional[int] = None,
        status: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        reconciliation_id: Optional[int] = None,
    ) -> list[BankTransactionEntity]:
        """List transactions with optional filters, newest first."""
        return self.db.list_bank_transactions(
            bank_account_id=bank_account_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
            reconciliation_id=reconciliation_id,
        )

    def update_status(self, transaction_id: int, status: str) -> None:
        """Update the review status of a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If status is unknown
        """
        if status not in TRANSACTION_STATUSES:
            raise ValidationError(
                f"Invalid status '{status}'. Must be one of: {', '.join(TRANSACTION_STATUSES)}"
            )
        if self.db.get_bank_transaction(transaction_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        self.db.update_transaction_status(transaction_id, status)

    def delete_import(self, import_id: str) -> int:
        """Remove every transaction of an import batch and undo its balance change.

        Gives a clean retry path for an import that failed half way.

        Args:
            import_id: Batch identifier returned by the import

        Returns:
            Number of transactions deleted

        Raises:
            NotFoundError: If no transactions carry this import ID
            ValidationError: If any of them is claimed by a reconciliation
        """
        transactions = self.db.list_bank_transactions(import_id=import_id)
        if not transactions:
            raise NotFoundError(f"Import {import_id} not found")
        if any(txn.reconciliation_id is not None for txn in transactions):
            raise ValidationError(
                f"Cannot delete import {import_id}: some transactions are part of a reconciliation"
            )

        per_account: dict[int, list[BankTransactionEntity]] = {}
        for txn in transactions:
            per_account.setdefault(txn.bank_account_id, []).append(txn)

        deleted = self.db.delete_transactions_by_import(import_id)
        for account_id, account_transactions in per_account.items():
            self.db.adjust_account_balance(account_id, -net_change(account_transactions))

        logger.info("Deleted import %s (%d transactions)", import_id, deleted)
        return deleted
