"""Domain layer for bankbook application."""

# Services are resolved lazily; the database layer imports domain.entities
_SERVICES = {
    "BankAccountService": "bankbook.domain.account",
    "BankTransactionService": "bankbook.domain.transaction",
    "CSVImportService": "bankbook.domain.csv_import",
    "ReconciliationService": "bankbook.domain.reconciliation",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
