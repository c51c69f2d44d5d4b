"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from bankbook.database.models import (
    BankAccount as ORMBankAccount,
    BankTransaction as ORMBankTransaction,
    Reconciliation as ORMReconciliation,
)
from bankbook.database.mappers import (
    bank_account_to_domain,
    bank_transaction_to_domain,
    reconciliation_to_domain,
)
from bankbook.domain.entities import BankAccount, BankTransaction, Reconciliation


class TestBankAccountMapper:
    """Tests for BankAccount mapper."""

    def test_bank_account_to_domain(self):
        """Test converting ORM BankAccount to domain BankAccount."""
        orm_account = ORMBankAccount(
            id=1,
            name="Checking",
            institution="Test Bank",
            account_type="checking",
            current_balance=Decimal("250.10"),
            last_reconciled_balance=None,
            last_reconciled_date=None,
            created_at=datetime.now(UTC),
        )
        domain_account = bank_account_to_domain(orm_account)

        assert isinstance(domain_account, BankAccount)
        assert domain_account.id == 1
        assert domain_account.name == "Checking"
        assert domain_account.current_balance == Decimal("250.10")
        assert domain_account.last_reconciled_balance is None
        assert domain_account.created_at == orm_account.created_at

    def test_float_balances_become_decimals(self):
        """Test that float values read back from SQLite are converted."""
        orm_account = ORMBankAccount(
            id=2,
            name="Savings",
            account_type="savings",
            current_balance=12.5,
            last_reconciled_balance=0.1,
            last_reconciled_date=date(2024, 1, 31),
            created_at=datetime.now(UTC),
        )
        domain_account = bank_account_to_domain(orm_account)

        assert domain_account.current_balance == Decimal("12.5")
        assert domain_account.last_reconciled_balance == Decimal("0.1")
        assert domain_account.last_reconciled_date == date(2024, 1, 31)


class TestBankTransactionMapper:
    """Tests for BankTransaction mapper."""

    def test_bank_transaction_to_domain(self):
        """Test converting ORM BankTransaction to domain BankTransaction."""
        orm_txn = ORMBankTransaction(
            id=7,
            bank_account_id=1,
            date="2024-01-15",
            description="Coffee Shop",
            amount=Decimal("4.50"),
            type="debit",
            payee="Coffee Shop",
            reference=None,
            check_number=None,
            memo=None,
            status="unreviewed",
            import_id="abc123",
            reconciliation_id=None,
            created_at=datetime.now(UTC),
        )
        domain_txn = bank_transaction_to_domain(orm_txn)

        assert isinstance(domain_txn, BankTransaction)
        assert domain_txn.id == 7
        assert domain_txn.date == "2024-01-15"
        assert domain_txn.amount == Decimal("4.50")
        assert domain_txn.signed_amount == Decimal("-4.50")
        assert domain_txn.import_id == "abc123"
        # Column default is only applied on flush
        assert domain_txn.is_reconciled is False


class TestReconciliationMapper:
    """Tests for Reconciliation mapper."""

    def test_reconciliation_to_domain(self):
        """Test converting ORM Reconciliation to domain Reconciliation."""
        orm_rec = ORMReconciliation(
            id=3,
            bank_account_id=1,
            statement_date=date(2024, 1, 31),
            statement_balance=Decimal("100.00"),
            opening_balance=Decimal("0"),
            cleared_balance=Decimal("60.00"),
            difference=Decimal("40.00"),
            status="in_progress",
            completed_at=None,
            created_at=datetime.now(UTC),
        )
        domain_rec = reconciliation_to_domain(orm_rec)

        assert isinstance(domain_rec, Reconciliation)
        assert domain_rec.statement_date == date(2024, 1, 31)
        assert domain_rec.cleared_balance == Decimal("60.00")
        assert domain_rec.difference == Decimal("40.00")
        assert domain_rec.completed_at is None
