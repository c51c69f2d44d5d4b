"""Bank transaction commands."""

import click
from bankbook.cli.account_resolution import resolve_account_or_exit
from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.account import BankAccountService
from bankbook.domain.entities import TRANSACTION_STATUSES
from bankbook.domain.errors import DomainError
from bankbook.domain.transaction import BankTransactionService
from bankbook.utils.amount_parser import parse_amount_strict
from bankbook.utils.date_parser import parse_date


@click.group()
def transaction_group():
    """Manage bank transactions."""
    pass


@transaction_group.command("add")
@click.argument("account", metavar="ACCOUNT")
@click.option("--date", "date_str", required=True, help="Transaction date (e.g. 2024-01-15, today)")
@click.option("--description", required=True, help="Description")
@click.option("--amount", required=True, help="Amount; negative for money out")
@click.option("--type", "txn_type", type=click.Choice(["debit", "credit"]), help="Override direction")
@click.option("--reference", help="Reference number")
@click.option("--check-number", help="Check number")
@click.option("--memo", help="Memo")
@click.pass_context
def add_transaction(
    ctx,
    account: str,
    date_str: str,
    description: str,
    amount: str,
    txn_type: str | None,
    reference: str | None,
    check_number: str | None,
    memo: str | None,
):
    """Add a transaction by hand.

    Examples:
        bankbook transaction add Checking --date today --description "ATM" --amount -40
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)
    service = BankTransactionService(db)

    try:
        transaction_id = service.create_transaction(
            bank_account_id=account_id,
            date=parse_date(date_str).isoformat(),
            description=description,
            amount=parse_amount_strict(amount),
            type=txn_type,
            payee=description,
            reference=reference,
            check_number=check_number,
            memo=memo,
        )
        click.echo(f"Created transaction {transaction_id}")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@transaction_group.command("list")
@click.option("--account", help="Bank account name or ID")
@click.option("--status", type=click.Choice(TRANSACTION_STATUSES), help="Review status")
@click.option("--start-date", help="Only on or after this date")
@click.option("--end-date", help="Only on or before this date")
@click.option("--reconciliation", type=int, help="Only transactions cleared in this reconciliation")
@click.pass_context
def list_transactions(
    ctx,
    account: str | None,
    status: str | None,
    start_date: str | None,
    end_date: str | None,
    reconciliation: int | None,
):
    """List bank transactions, newest first."""
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)

    try:
        start = parse_date(start_date).isoformat() if start_date else None
        end = parse_date(end_date).isoformat() if end_date else None
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    transactions = BankTransactionService(db).list_transactions(
        bank_account_id=account_id,
        status=status,
        start_date=start,
        end_date=end,
        reconciliation_id=reconciliation,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        cleared = "R" if txn.is_reconciled else ("C" if txn.reconciliation_id else " ")
        click.echo(
            f"{txn.id:5d} {cleared} {txn.date:10s} {txn.signed_amount:>12,.2f}  "
            f"{txn.status:10s} {txn.description}"
        )


@transaction_group.command("status")
@click.argument("transaction_id", type=int)
@click.argument("status", type=click.Choice(TRANSACTION_STATUSES))
@click.pass_context
def set_status(ctx, transaction_id: int, status: str):
    """Set the review status of a transaction."""
    try:
        BankTransactionService(ctx.obj["db"]).update_status(transaction_id, status)
        click.echo(f"Transaction {transaction_id} marked {status}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete-import")
@click.argument("import_id")
@click.pass_context
def delete_import(ctx, import_id: str):
    """Delete every transaction of one CSV import and undo its balance change."""
    try:
        deleted = BankTransactionService(ctx.obj["db"]).delete_import(import_id)
        click.echo(f"Deleted {deleted} transactions from import {import_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
