"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, so the services never see ORM
objects and the schema can change without touching them.
"""

from decimal import Decimal

from bankbook.domain import entities as domain
from bankbook.database.models import (
    BankAccount as ORMBankAccount,
    BankTransaction as ORMBankTransaction,
    Reconciliation as ORMReconciliation,
)


def _decimal(value) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        institution=orm_account.institution,
        account_type=orm_account.account_type,
        current_balance=_decimal(orm_account.current_balance),
        last_reconciled_balance=(
            None
            if orm_account.last_reconciled_balance is None
            else _decimal(orm_account.last_reconciled_balance)
        ),
        last_reconciled_date=orm_account.last_reconciled_date,
        created_at=orm_account.created_at,
    )


def bank_transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_transaction.id,
        bank_account_id=orm_transaction.bank_account_id,
        date=orm_transaction.date,
        description=orm_transaction.description,
        amount=_decimal(orm_transaction.amount),
        type=orm_transaction.type,
        payee=orm_transaction.payee,
        reference=orm_transaction.reference,
        check_number=orm_transaction.check_number,
        memo=orm_transaction.memo,
        status=orm_transaction.status,
        import_id=orm_transaction.import_id,
        reconciliation_id=orm_transaction.reconciliation_id,
        is_reconciled=bool(orm_transaction.is_reconciled),
        created_at=orm_transaction.created_at,
    )


def reconciliation_to_domain(orm_reconciliation: ORMReconciliation) -> domain.Reconciliation:
    """Convert SQLAlchemy Reconciliation model to domain Reconciliation entity."""
    return domain.Reconciliation(
        id=orm_reconciliation.id,
        bank_account_id=orm_reconciliation.bank_account_id,
        statement_date=orm_reconciliation.statement_date,
        statement_balance=_decimal(orm_reconciliation.statement_balance),
        opening_balance=_decimal(orm_reconciliation.opening_balance),
        cleared_balance=_decimal(orm_reconciliation.cleared_balance),
        difference=_decimal(orm_reconciliation.difference),
        status=orm_reconciliation.status,
        completed_at=orm_reconciliation.completed_at,
        created_at=orm_reconciliation.created_at,
    )
