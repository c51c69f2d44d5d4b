"""Tests for bank account service and commands."""

from decimal import Decimal

import pytest
from bankbook.cli.main import cli
from bankbook.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from bankbook.utils.account_resolver import resolve_account


def test_create_account(account_service):
    account_id = account_service.create_account(
        name="Joint", institution="Credit Union", account_type="savings", current_balance=Decimal("12.34")
    )

    account = account_service.get_account(account_id)
    assert account.name == "Joint"
    assert account.institution == "Credit Union"
    assert account.account_type == "savings"
    assert account.current_balance == Decimal("12.34")
    assert account.last_reconciled_balance is None
    assert account.last_reconciled_date is None


def test_create_account_duplicate(account_service, sample_account):
    with pytest.raises(ConflictError):
        account_service.create_account(name=sample_account.name)


@pytest.mark.parametrize("kwargs", [{"name": "  "}, {"name": "Loan", "account_type": "mortgage"}])
def test_create_account_invalid(account_service, kwargs):
    with pytest.raises(ValidationError):
        account_service.create_account(**kwargs)


def test_delete_account_blocked_by_transactions(account_service, sample_account, make_transaction):
    make_transaction("5.00")
    with pytest.raises(DependencyError) as excinfo:
        account_service.delete_account(sample_account.id)
    assert "1 transaction." in str(excinfo.value)


def test_delete_account(account_service, other_account):
    account_service.delete_account(other_account.id)
    assert account_service.get_account(other_account.id) is None


def test_delete_unknown_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.delete_account(999)


def test_resolve_account_by_id_and_name(account_service, sample_account):
    assert resolve_account(account_service, sample_account.id) == sample_account.id
    assert resolve_account(account_service, str(sample_account.id)) == sample_account.id
    assert resolve_account(account_service, "Test Checking") == sample_account.id


def test_resolve_account_numeric_name(account_service):
    account_id = account_service.create_account(name="2024")
    assert resolve_account(account_service, "2024") == account_id


@pytest.mark.parametrize("account", [999, "999", "Nope"])
def test_resolve_account_unknown(account_service, account):
    with pytest.raises(NotFoundError):
        resolve_account(account_service, account)


def test_account_create_cli(cli_runner, temp_db):
    """Test creating an account from the command line."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "account",
            "create",
            "Checking",
            "--institution",
            "Chase",
            "--balance",
            "1,500.00",
        ],
    )

    assert result.exit_code == 0
    assert "Created bank account 'Checking'" in result.output
    [account] = temp_db.list_bank_accounts()
    assert account.current_balance == Decimal("1500.00")


def test_account_create_duplicate_cli(cli_runner, temp_db, sample_account):
    """Test creating duplicate account name fails."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Test Checking"]
    )

    assert result.exit_code == 1
    assert "already exists" in result.output.lower()


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No bank accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_account):
    """Test listing accounts with data."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "Test Checking" in result.output
    assert "100.00" in result.output
    assert "never" in result.output


def test_account_delete_cli(cli_runner, temp_db, other_account):
    """Test deleting an account by name."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Other Savings", "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted bank account 'Other Savings'" in result.output
    assert temp_db.get_bank_account(other_account.id) is None


def test_account_delete_cancelled(cli_runner, temp_db, other_account):
    """Test declining the delete confirmation."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Other Savings"], input="n\n"
    )

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output
    assert temp_db.get_bank_account(other_account.id) is not None


def test_account_delete_with_transactions_cli(cli_runner, temp_db, sample_account, make_transaction):
    """Test that an account with transactions cannot be deleted."""
    make_transaction("5.00")

    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", str(sample_account.id), "--yes"]
    )

    assert result.exit_code == 1
    assert "Please delete them first" in result.output


def test_account_delete_unknown_cli(cli_runner, temp_db):
    """Test deleting an account that does not exist."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", "Nope", "--yes"]
    )

    assert result.exit_code == 1
    assert "not found" in result.output
