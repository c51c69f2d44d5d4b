"""Reconciliation commands."""

import click
from bankbook.cli.account_resolution import resolve_account_or_exit
from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.account import BankAccountService
from bankbook.domain.errors import DomainError
from bankbook.domain.reconciliation import ReconciliationService
from bankbook.utils.amount_parser import parse_amount_strict
from bankbook.utils.date_parser import parse_date


@click.group()
def reconcile_group():
    """Reconcile bank accounts against statements."""
    pass


@reconcile_group.command("start")
@click.argument("account", metavar="ACCOUNT")
@click.option("--statement-date", required=True, help="Statement closing date")
@click.option("--balance", required=True, help="Statement ending balance")
@click.pass_context
def start_reconciliation(ctx, account: str, statement_date: str, balance: str):
    """Start reconciling ACCOUNT against a statement.

    Examples:
        bankbook reconcile start Checking --statement-date 2024-01-31 --balance 2095.50
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)

    try:
        reconciliation = ReconciliationService(db).start(
            account_id, parse_date(statement_date), parse_amount_strict(balance)
        )
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Started reconciliation {reconciliation.id}")
    click.echo(f"  Opening balance: {reconciliation.opening_balance:,.2f}")
    click.echo(f"  Difference: {reconciliation.difference:,.2f}")


@reconcile_group.command("toggle")
@click.argument("reconciliation_id", type=int)
@click.argument("transaction_ids", type=int, nargs=-1, required=True)
@click.pass_context
def toggle_transactions(ctx, reconciliation_id: int, transaction_ids: tuple[int, ...]):
    """Clear or un-clear transactions in a reconciliation.

    All IDs are checked first; if any is unknown or already reconciled,
    nothing is toggled.
    """
    service = ReconciliationService(ctx.obj["db"])

    try:
        result = service.toggle_transactions(reconciliation_id, transaction_ids)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Cleared balance: {result.cleared_balance:,.2f}")
    click.echo(f"Difference: {result.difference:,.2f}")


@reconcile_group.command("complete")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def complete_reconciliation(ctx, reconciliation_id: int):
    """Complete a reconciliation once the difference is zero."""
    try:
        ReconciliationService(ctx.obj["db"]).complete(reconciliation_id)
        click.echo(f"Reconciliation {reconciliation_id} completed")
    except DomainError as e:
        handle_domain_error(ctx, e)


@reconcile_group.command("delete")
@click.argument("reconciliation_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_reconciliation(ctx, reconciliation_id: int, yes: bool):
    """Delete a reconciliation and release its transactions."""
    if not yes and not click.confirm(f"Delete reconciliation {reconciliation_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        ReconciliationService(ctx.obj["db"]).delete(reconciliation_id)
        click.echo(f"Deleted reconciliation {reconciliation_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@reconcile_group.command("list")
@click.option("--account", help="Bank account name or ID")
@click.pass_context
def list_reconciliations(ctx, account: str | None):
    """List reconciliations, latest statement first."""
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)

    reconciliations = ReconciliationService(db).list_reconciliations(bank_account_id=account_id)
    if not reconciliations:
        click.echo("No reconciliations found.")
        return

    for rec in reconciliations:
        click.echo(
            f"{rec.id:4d} | account {rec.bank_account_id:3d} | {rec.statement_date} "
            f"| statement {rec.statement_balance:>12,.2f} | difference {rec.difference:>10,.2f} "
            f"| {rec.status}"
        )


@reconcile_group.command("show")
@click.argument("reconciliation_id", type=int)
@click.pass_context
def show_reconciliation(ctx, reconciliation_id: int):
    """Show a reconciliation and its cleared transactions."""
    service = ReconciliationService(ctx.obj["db"])

    try:
        cleared = service.list_cleared_transactions(reconciliation_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    rec = service.get(reconciliation_id)

    click.echo(f"Reconciliation {rec.id} ({rec.status})")
    click.echo(f"  Statement date: {rec.statement_date}")
    click.echo(f"  Statement balance: {rec.statement_balance:,.2f}")
    click.echo(f"  Opening balance: {rec.opening_balance:,.2f}")
    click.echo(f"  Cleared balance: {rec.cleared_balance:,.2f}")
    click.echo(f"  Difference: {rec.difference:,.2f}")
    click.echo(f"  Cleared transactions: {len(cleared)}")
    for txn in cleared:
        click.echo(f"    {txn.id:5d} {txn.date:10s} {txn.signed_amount:>12,.2f}  {txn.description}")


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
