"""Bank account domain service."""

import logging
from decimal import Decimal
from typing import Optional

from bankbook.database.base import Database
from bankbook.domain.entities import BankAccount as BankAccountEntity
from bankbook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    bank_account_not_found,
)

logger = logging.getLogger(__name__)

ACCOUNT_TYPES = ("checking", "savings", "credit_card", "money_market")


class BankAccountService:
    """Service for managing bank accounts."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        institution: Optional[str] = None,
        account_type: str = "checking",
        current_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new bank account.

        Args:
            name: Account name
            institution: Optional bank or institution name
            account_type: One of ACCOUNT_TYPES
            current_balance: Opening balance

        Returns:
            Account ID

        Raises:
            ValidationError: If name is empty or account type is unknown
            ConflictError: If account name already exists
        """
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        if account_type not in ACCOUNT_TYPES:
            raise ValidationError(
                f"Invalid account type '{account_type}'. Must be one of: {', '.join(ACCOUNT_TYPES)}"
            )

        for acc in self.db.list_bank_accounts():
            if acc.name == name:
                raise ConflictError(f"Bank account with name '{name}' already exists")

        account_id = self.db.create_bank_account(
            name=name,
            institution=institution,
            account_type=account_type,
            current_balance=current_balance,
        )
        logger.info("Created bank account %s (%s)", account_id, name)
        return account_id

    def get_account(self, account_id: int) -> Optional[BankAccountEntity]:
        """Get bank account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_bank_account(account_id)

    def require_account(self, account_id: int) -> BankAccountEntity:
        """Get bank account by ID or raise NotFoundError."""
        account = self.db.get_bank_account(account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(account_id))
        return account

    def list_accounts(self) -> list[BankAccountEntity]:
        """List all bank accounts.

        Returns:
            List of account entities
        """
        return self.db.list_bank_accounts()

    def delete_account(self, account_id: int) -> None:
        """Delete a bank account.

        Args:
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account not found
            DependencyError: If account still has transactions
        """
        self.require_account(account_id)

        transaction_count = self.db.get_account_transaction_count(account_id)
        if transaction_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transaction_count))

        self.db.delete_bank_account(account_id)
        logger.info("Deleted bank account %s", account_id)
