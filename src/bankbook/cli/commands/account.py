"""Bank account management commands."""

import click
from bankbook.cli.account_resolution import resolve_account_or_exit
from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.account import ACCOUNT_TYPES, BankAccountService
from bankbook.domain.errors import DomainError
from bankbook.utils.amount_parser import parse_amount_strict


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--institution", help="Bank or institution name")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES),
    default="checking",
    show_default=True,
    help="Account type",
)
@click.option("--balance", default="0", help="Opening balance")
@click.pass_context
def create_account(ctx, name: str, institution: str | None, account_type: str, balance: str):
    """Create a new bank account.

    Examples:
        bankbook account create "Checking" --institution "Chase"
        bankbook account create "Savings" --type savings --balance 1500.00
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    try:
        opening_balance = parse_amount_strict(balance)
        account_id = service.create_account(
            name=name,
            institution=institution,
            account_type=account_type,
            current_balance=opening_balance,
        )
        click.echo(f"Created bank account '{name}' (ID: {account_id})")
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all bank accounts."""
    db = ctx.obj["db"]
    service = BankAccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No bank accounts found.")
        return

    click.echo("\nBank accounts:")
    click.echo("-" * 78)
    for acc in accounts:
        reconciled = (
            f"{acc.last_reconciled_date} ({acc.last_reconciled_balance:,.2f})"
            if acc.last_reconciled_date
            else "never"
        )
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | Balance: {acc.current_balance:>12,.2f} "
            f"| Reconciled: {reconciled}"
        )


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete a bank account.

    ACCOUNT can be an account name or ID. The account can only be deleted
    if it has no transactions.

    Examples:
        bankbook account delete "Checking"
        bankbook account delete 1 --yes
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete bank account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted bank account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
