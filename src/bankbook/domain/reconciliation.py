"""Bank statement reconciliation domain service.

A reconciliation session compares a bank statement's ending balance with the
transactions a user ticks off ("clears") against it. Cleared transactions are
claimed by pointing their ``reconciliation_id`` at the session; they only
become ``is_reconciled`` when the session is completed, so during a session
the claim itself is the only marker of a cleared transaction.
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional, Sequence

from bankbook.database.base import Database
from bankbook.domain.entities import (
    BankTransaction as BankTransactionEntity,
    RECONCILIATION_COMPLETED,
    RECONCILIATION_IN_PROGRESS,
    Reconciliation as ReconciliationEntity,
    ToggleResult,
)
from bankbook.domain.errors import (
    NotFoundError,
    ReconciliationBlockedError,
    ValidationError,
    bank_account_not_found,
    reconciliation_not_found,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

RECONCILIATION_TOLERANCE = Decimal("0.01")


class ReconciliationService:
    """Service for running reconciliation sessions."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, reconciliation_id: int) -> ReconciliationEntity:
        reconciliation = self.db.get_reconciliation(reconciliation_id)
        if reconciliation is None:
            raise NotFoundError(reconciliation_not_found(reconciliation_id))
        return reconciliation

    def _require_open(self, reconciliation_id: int) -> ReconciliationEntity:
        reconciliation = self._require(reconciliation_id)
        if reconciliation.status == RECONCILIATION_COMPLETED:
            raise ValidationError(f"Reconciliation {reconciliation_id} is already completed")
        return reconciliation

    def start(
        self, bank_account_id: int, statement_date: date, statement_balance: Decimal
    ) -> ReconciliationEntity:
        """Start a reconciliation against a bank statement.

        The opening balance is the account's last reconciled balance (0 if the
        account was never reconciled); nothing is cleared yet.

        Args:
            bank_account_id: Bank account ID
            statement_date: Closing date of the statement
            statement_balance: Ending balance on the statement

        Returns:
            The new in-progress reconciliation

        Raises:
            NotFoundError: If the bank account doesn't exist
        """
        account = self.db.get_bank_account(bank_account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))

        opening_balance = account.last_reconciled_balance or Decimal("0")
        reconciliation_id = self.db.create_reconciliation(
            bank_account_id=bank_account_id,
            statement_date=statement_date,
            statement_balance=statement_balance,
            opening_balance=opening_balance,
            cleared_balance=opening_balance,
            difference=statement_balance - opening_balance,
            status=RECONCILIATION_IN_PROGRESS,
        )
        logger.info(
            "Started reconciliation %s for bank account %s (statement %s, balance %s)",
            reconciliation_id,
            bank_account_id,
            statement_date,
            statement_balance,
        )
        return self._require(reconciliation_id)

    def get(self, reconciliation_id: int) -> Optional[ReconciliationEntity]:
        """Get reconciliation by ID."""
        return self.db.get_reconciliation(reconciliation_id)

    def list_reconciliations(
        self, bank_account_id: Optional[int] = None
    ) -> list[ReconciliationEntity]:
        """List reconciliations, latest statement first."""
        return self.db.list_reconciliations(bank_account_id=bank_account_id)

    def list_cleared_transactions(self, reconciliation_id: int) -> list[BankTransactionEntity]:
        """List the transactions currently claimed by a reconciliation."""
        reconciliation = self._require(reconciliation_id)
        return self.db.list_bank_transactions(
            bank_account_id=reconciliation.bank_account_id,
            reconciliation_id=reconciliation_id,
        )

    def _require_transaction(
        self, reconciliation: ReconciliationEntity, transaction_id: int
    ) -> BankTransactionEntity:
        txn = self.db.get_bank_transaction(transaction_id)
        if txn is None or txn.bank_account_id != reconciliation.bank_account_id:
            raise NotFoundError(transaction_not_found(transaction_id))
        # Reconciled rows belong to a completed statement
        if txn.is_reconciled:
            raise ValidationError(
                f"Transaction {transaction_id} is already reconciled in reconciliation "
                f"{txn.reconciliation_id}"
            )
        return txn

    def toggle_transaction(self, reconciliation_id: int, transaction_id: int) -> ToggleResult:
        """Clear or un-clear a transaction and recompute the session balances.

        A transaction not claimed by this session (unclaimed, or claimed by
        another open one) is claimed; one already claimed by it is released.

        Returns:
            ToggleResult with the new cleared balance and difference

        Raises:
            NotFoundError: If the reconciliation or transaction doesn't exist,
                or the transaction belongs to another bank account
            ValidationError: If the reconciliation is already completed, or the
                transaction was reconciled by a completed one
        """
        return self.toggle_transactions(reconciliation_id, [transaction_id])

    def toggle_transactions(
        self, reconciliation_id: int, transaction_ids: Sequence[int]
    ) -> ToggleResult:
        """Toggle several transactions in order.

        Every ID is checked before any of them is toggled, so a bad ID
        leaves the session untouched. Toggling the same ID twice releases it
        again.

        Raises:
            Same as :meth:`toggle_transaction`
        """
        reconciliation = self._require_open(reconciliation_id)
        for transaction_id in transaction_ids:
            self._require_transaction(reconciliation, transaction_id)

        claimed = {
            txn.id
            for txn in self.db.list_bank_transactions(
                bank_account_id=reconciliation.bank_account_id,
                reconciliation_id=reconciliation_id,
            )
        }
        for transaction_id in transaction_ids:
            is_clearing = transaction_id not in claimed
            self.db.set_transaction_reconciliation(
                transaction_id, reconciliation_id if is_clearing else None
            )
            claimed ^= {transaction_id}
            logger.debug(
                "Reconciliation %s: %s transaction %s",
                reconciliation_id,
                "cleared" if is_clearing else "released",
                transaction_id,
            )
        return self._recompute(reconciliation)

    def _recompute(self, reconciliation: ReconciliationEntity) -> ToggleResult:
        # Always from scratch over the current claimed set
        cleared = self.db.list_bank_transactions(
            bank_account_id=reconciliation.bank_account_id,
            reconciliation_id=reconciliation.id,
        )
        cleared_total = sum((txn.signed_amount for txn in cleared), Decimal("0"))
        cleared_balance = reconciliation.opening_balance + cleared_total
        difference = reconciliation.statement_balance - cleared_balance

        self.db.update_reconciliation(
            reconciliation.id, cleared_balance=cleared_balance, difference=difference
        )
        return ToggleResult(cleared_balance=cleared_balance, difference=difference)

    def complete(self, reconciliation_id: int) -> dict[str, str]:
        """Complete a reconciliation whose difference is within one cent.

        Every cleared transaction is marked reconciled and the bank account's
        last reconciled date and balance move to this statement.

        Returns:
            {"status": "completed"}

        Raises:
            NotFoundError: If the reconciliation doesn't exist
            ReconciliationBlockedError: If the difference exceeds the tolerance
            ValidationError: If the reconciliation is already completed
        """
        reconciliation = self._require_open(reconciliation_id)

        if abs(reconciliation.difference) > RECONCILIATION_TOLERANCE:
            raise ReconciliationBlockedError(reconciliation.difference)

        count = self.db.mark_reconciliation_transactions_reconciled(reconciliation_id)
        self.db.update_reconciliation(
            reconciliation_id,
            status=RECONCILIATION_COMPLETED,
            completed_at=datetime.now(UTC),
            difference=Decimal("0"),
        )
        self.db.set_last_reconciled(
            reconciliation.bank_account_id,
            reconciliation.statement_date,
            reconciliation.statement_balance,
        )
        logger.info(
            "Completed reconciliation %s (%d transactions reconciled)", reconciliation_id, count
        )
        return {"status": RECONCILIATION_COMPLETED}

    def delete(self, reconciliation_id: int) -> None:
        """Delete (cancel) a reconciliation in any state.

        Claimed transactions are released and un-reconciled first. The bank
        account's last reconciled date and balance are left as they are.

        Raises:
            NotFoundError: If the reconciliation doesn't exist
        """
        self._require(reconciliation_id)
        released = self.db.unlink_reconciliation_transactions(reconciliation_id)
        self.db.delete_reconciliation(reconciliation_id)
        logger.info("Deleted reconciliation %s (%d transactions released)", reconciliation_id, released)
