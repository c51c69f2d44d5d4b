"""CLI helpers for account resolution and error handling."""

from __future__ import annotations

import click
from bankbook.cli.error_handling import handle_domain_error
from bankbook.domain.account import BankAccountService
from bankbook.domain.errors import DomainError
from bankbook.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: BankAccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
