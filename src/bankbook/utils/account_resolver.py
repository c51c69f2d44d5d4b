"""Utility for resolving bank account names to IDs."""

from bankbook.domain.account import BankAccountService
from bankbook.domain.errors import NotFoundError


def resolve_account(account_service: BankAccountService, account: str | int) -> int:
    """Resolve bank account name or ID to account ID.

    Args:
        account_service: BankAccountService instance
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
    """
    if isinstance(account, int):
        if account_service.get_account(account) is None:
            raise NotFoundError(f"Bank account ID {account} not found")
        return account

    # Numeric strings are treated as IDs first, then as names
    try:
        account_id = int(account)
    except (ValueError, TypeError):
        account_id = None

    if account_id is not None and account_service.get_account(account_id) is not None:
        return account_id

    for acc in account_service.list_accounts():
        if acc.name == account:
            return acc.id

    raise NotFoundError(f"Bank account '{account}' not found")
