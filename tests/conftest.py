"""Shared pytest fixtures for bankbook tests."""

import tempfile
import os
from decimal import Decimal
from pathlib import Path
import pytest

from bankbook.database.factories import create_sqlite_database
from bankbook.domain.account import BankAccountService
from bankbook.domain.csv_import import CSVImportService
from bankbook.domain.reconciliation import ReconciliationService
from bankbook.domain.transaction import BankTransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a BankTransactionService with a temporary database."""
    return BankTransactionService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample checking account holding 100.00."""
    account_id = account_service.create_account(
        name="Test Checking", institution="Test Bank", current_balance=Decimal("100.00")
    )
    return account_service.get_account(account_id)


@pytest.fixture
def other_account(account_service):
    """Create a second, empty account."""
    account_id = account_service.create_account(name="Other Savings", account_type="savings")
    return account_service.get_account(account_id)


@pytest.fixture
def make_transaction(transaction_service, sample_account):
    """Factory creating transactions on the sample account."""

    def _make(amount: str, description: str = "Test", date: str = "2024-01-15", account_id=None):
        return transaction_service.create_transaction(
            bank_account_id=account_id or sample_account.id,
            date=date,
            description=description,
            amount=Decimal(amount),
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
