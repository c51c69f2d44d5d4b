"""Tests for Database interface returning domain models."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from bankbook.database.factories import (
    DB_PATH_ENV_VAR,
    create_sqlite_database,
    resolve_database_path,
)
from bankbook.domain import entities
from bankbook.domain.entities import NormalizedTransaction


def _txn(description: str, amount: str, type: str = "credit", **kwargs) -> NormalizedTransaction:
    return NormalizedTransaction(
        date=kwargs.pop("date", "2024-01-15"),
        description=description,
        amount=Decimal(amount),
        type=type,
        **kwargs,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_bank_account_returns_domain_model(self, temp_db):
        """Test that get_bank_account returns a domain BankAccount entity."""
        account_id = temp_db.create_bank_account(name="Checking", institution="Test Bank")

        account = temp_db.get_bank_account(account_id)

        assert isinstance(account, entities.BankAccount)
        assert account.id == account_id
        assert account.institution == "Test Bank"
        assert account.current_balance == Decimal("0")
        assert isinstance(account.created_at, datetime)

    def test_get_missing_returns_none(self, temp_db):
        assert temp_db.get_bank_account(1) is None
        assert temp_db.get_bank_transaction(1) is None
        assert temp_db.get_reconciliation(1) is None

    def test_insert_returns_ids_in_order(self, temp_db):
        account_id = temp_db.create_bank_account(name="Checking")

        ids = temp_db.insert_bank_transactions(
            account_id,
            [_txn("First", "1.00"), _txn("Second", "2.00", type="debit", import_id="imp")],
        )

        assert len(ids) == 2
        first = temp_db.get_bank_transaction(ids[0])
        second = temp_db.get_bank_transaction(ids[1])
        assert isinstance(first, entities.BankTransaction)
        assert first.description == "First"
        assert second.type == "debit"
        assert second.import_id == "imp"
        assert second.status == "unreviewed"
        assert second.is_reconciled is False

    def test_adjust_account_balance(self, temp_db):
        account_id = temp_db.create_bank_account(name="Checking", current_balance=Decimal("10.00"))

        temp_db.adjust_account_balance(account_id, Decimal("-2.50"))
        temp_db.adjust_account_balance(account_id, Decimal("0.75"))

        assert temp_db.get_bank_account(account_id).current_balance == Decimal("8.25")

    def test_adjust_balance_seen_by_second_connection(self, temp_db):
        """Test that balance updates go to the stored value, not a cached copy."""
        account_id = temp_db.create_bank_account(name="Checking", current_balance=Decimal("10.00"))
        other = create_sqlite_database(database_path=temp_db.database_path)
        try:
            temp_db.get_bank_account(account_id)
            other.adjust_account_balance(account_id, Decimal("5.00"))
            temp_db.adjust_account_balance(account_id, Decimal("1.00"))

            assert temp_db.get_bank_account(account_id).current_balance == Decimal("16.00")
            assert other.get_bank_account(account_id).current_balance == Decimal("16.00")
        finally:
            other.disconnect()

    def test_list_transactions_newest_first(self, temp_db):
        account_id = temp_db.create_bank_account(name="Checking")
        temp_db.insert_bank_transactions(
            account_id,
            [
                _txn("Old", "1.00", date="2024-01-01"),
                _txn("New", "1.00", date="2024-03-01"),
                _txn("Mid", "1.00", date="2024-02-01"),
            ],
        )

        descriptions = [txn.description for txn in temp_db.list_bank_transactions()]

        assert descriptions == ["New", "Mid", "Old"]

    def test_reconciliation_links(self, temp_db):
        account_id = temp_db.create_bank_account(name="Checking")
        [txn_id] = temp_db.insert_bank_transactions(account_id, [_txn("Deposit", "5.00")])
        rec_id = temp_db.create_reconciliation(
            bank_account_id=account_id,
            statement_date=date(2024, 1, 31),
            statement_balance=Decimal("5.00"),
            opening_balance=Decimal("0"),
            cleared_balance=Decimal("0"),
            difference=Decimal("5.00"),
            status="in_progress",
        )

        temp_db.set_transaction_reconciliation(txn_id, rec_id)
        assert [txn.id for txn in temp_db.list_bank_transactions(reconciliation_id=rec_id)] == [
            txn_id
        ]

        assert temp_db.mark_reconciliation_transactions_reconciled(rec_id) == 1
        assert temp_db.get_bank_transaction(txn_id).is_reconciled is True

        assert temp_db.unlink_reconciliation_transactions(rec_id) == 1
        txn = temp_db.get_bank_transaction(txn_id)
        assert txn.reconciliation_id is None
        assert txn.is_reconciled is False

    def test_update_reconciliation_writes_given_fields(self, temp_db):
        account_id = temp_db.create_bank_account(name="Checking")
        rec_id = temp_db.create_reconciliation(
            bank_account_id=account_id,
            statement_date=date(2024, 1, 31),
            statement_balance=Decimal("5.00"),
            opening_balance=Decimal("0"),
            cleared_balance=Decimal("0"),
            difference=Decimal("5.00"),
            status="in_progress",
        )

        temp_db.update_reconciliation(rec_id, cleared_balance=Decimal("5.00"), difference=Decimal("0"))

        rec = temp_db.get_reconciliation(rec_id)
        assert isinstance(rec, entities.Reconciliation)
        assert rec.cleared_balance == Decimal("5.00")
        assert rec.difference == Decimal("0")
        assert rec.status == "in_progress"

    def test_delete_transactions_by_import(self, temp_db):
        account_id = temp_db.create_bank_account(name="Checking")
        temp_db.insert_bank_transactions(
            account_id, [_txn("A", "1.00", import_id="one"), _txn("B", "1.00", import_id="two")]
        )

        assert temp_db.delete_transactions_by_import("one") == 1
        assert [txn.description for txn in temp_db.list_bank_transactions()] == ["B"]

    @pytest.mark.parametrize(
        "method,args",
        [
            ("update_transaction_status", (1, "reviewed")),
            ("set_transaction_reconciliation", (1, None)),
            ("delete_reconciliation", (1,)),
            ("delete_bank_account", (1,)),
        ],
    )
    def test_missing_rows_raise(self, temp_db, method, args):
        with pytest.raises(ValueError):
            getattr(temp_db, method)(*args)


def test_database_path_from_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv(DB_PATH_ENV_VAR, str(db_path))

    db = create_sqlite_database()
    try:
        db.create_bank_account(name="Checking")
    finally:
        db.disconnect()

    assert db_path.exists()


def test_explicit_path_beats_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(DB_PATH_ENV_VAR, str(tmp_path / "env.db"))

    assert resolve_database_path(str(tmp_path / "cli.db")) == tmp_path / "cli.db"
    assert resolve_database_path() == tmp_path / "env.db"


def test_default_path_under_home(tmp_path, monkeypatch):
    monkeypatch.delenv(DB_PATH_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    assert resolve_database_path() == tmp_path / ".bankbook" / "bankbook.db"


def test_create_database_makes_parent_directories(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "books.db"

    db = create_sqlite_database(str(db_path))
    try:
        db.create_bank_account(name="Checking")
    finally:
        db.disconnect()

    assert db_path.exists()
