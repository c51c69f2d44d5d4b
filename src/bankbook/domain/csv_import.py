"""CSV import domain service."""

import logging
import uuid
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

from bankbook.database.base import Database
from bankbook.domain.csv_parser import ColumnMapping, CSVParseResult, parse_csv
from bankbook.domain.entities import (
    CREDIT,
    DEBIT,
    ImportResult,
    NormalizedTransaction,
)
from bankbook.domain.errors import (
    MappingRequiredError,
    NotFoundError,
    ValidationError,
    bank_account_not_found,
)
from bankbook.domain.transaction import net_change
from bankbook.utils.amount_parser import parse_amount, to_cents
from bankbook.utils.date_parser import normalize_date

logger = logging.getLogger(__name__)

IMPORT_BATCH_SIZE = 50
SAMPLE_ROWS_ON_ERROR = 5

MappingArg = Optional[Union[ColumnMapping, dict[str, Any]]]


def read_csv_file(csv_file_path: str) -> str:
    """Read a CSV export as text, dropping a leading byte order mark.

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValidationError: If the file is not UTF-8 text
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    try:
        return csv_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise ValidationError(f"CSV file is not valid UTF-8: {e}") from e


def normalize_row(
    row: dict[str, str], mapping: ColumnMapping, import_id: Optional[str] = None
) -> Optional[NormalizedTransaction]:
    """Turn one raw CSV row into a candidate transaction.

    Returns None when the row has to be skipped: no date, no description,
    or (with separate debit/credit columns) no positive value on either side.
    """
    date_str = normalize_date(row.get(mapping.date, "")) if mapping.date else ""
    description = row.get(mapping.description, "") if mapping.description else ""

    if not date_str or not description:
        return None

    if mapping.amount:
        # Single signed column: negative is money out
        amount = to_cents(parse_amount(row.get(mapping.amount, "")))
        txn_type = DEBIT if amount < 0 else CREDIT
        amount = abs(amount)
    else:
        debit_amount = Decimal("0")
        credit_amount = Decimal("0")
        if mapping.debit:
            debit_amount = to_cents(parse_amount(row.get(mapping.debit, "")))
        if mapping.credit:
            credit_amount = to_cents(parse_amount(row.get(mapping.credit, "")))
        if debit_amount > 0:
            amount, txn_type = debit_amount, DEBIT
        elif credit_amount > 0:
            amount, txn_type = credit_amount, CREDIT
        else:
            return None

    return NormalizedTransaction(
        date=date_str,
        description=description,
        amount=amount,
        type=txn_type,
        payee=description,
        reference=(row.get(mapping.reference) or None) if mapping.reference else None,
        check_number=(row.get(mapping.check_number) or None) if mapping.check_number else None,
        memo=None,
        import_id=import_id,
    )


class CSVImportService:
    """Service for importing bank statement CSV exports."""

    def __init__(self, db: Database):
        """Initialize CSV import service.

        Args:
            db: Database instance
        """
        self.db = db

    def preview(self, csv_text: str) -> CSVParseResult:
        """Parse a CSV text and report the detected mapping without importing."""
        return parse_csv(csv_text)

    def preview_file(self, csv_file_path: str) -> CSVParseResult:
        """Parse a CSV file and report the detected mapping without importing."""
        return parse_csv(read_csv_file(csv_file_path))

    def import_file(
        self, csv_file_path: str, bank_account_id: int, mapping: MappingArg = None
    ) -> ImportResult:
        """Import transactions from a CSV file.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ValidationError: If the file is not UTF-8 text
        """
        return self.import_text(read_csv_file(csv_file_path), bank_account_id, mapping=mapping)

    def import_text(
        self, csv_text: str, bank_account_id: int, mapping: MappingArg = None
    ) -> ImportResult:
        """Import transactions from CSV text into a bank account.

        Rows without a date or description, and debit/credit rows with
        nothing on either side, are counted as skipped. Accepted rows are
        written in batches of IMPORT_BATCH_SIZE, each committed on its own;
        if a batch fails the error propagates and earlier batches stay
        written (remove them with ``BankTransactionService.delete_import``).

        Args:
            csv_text: Full CSV text
            bank_account_id: Target bank account ID
            mapping: Optional explicit column mapping, overriding detection

        Returns:
            ImportResult with import_id, imported, skipped and total

        Raises:
            NotFoundError: If the bank account doesn't exist
            MappingRequiredError: If no usable column mapping is available
            ValidationError: If an explicit mapping names unknown fields or columns
        """
        if self.db.get_bank_account(bank_account_id) is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))

        parsed = parse_csv(csv_text)

        if mapping is None:
            mapping = parsed.detected_mapping
        else:
            if isinstance(mapping, dict):
                mapping = ColumnMapping.from_dict(mapping)
            missing = [
                header
                for header in mapping.to_dict().values()
                if header and header not in parsed.headers
            ]
            if missing:
                raise ValidationError(f"CSV file missing mapped columns: {', '.join(missing)}")

        if not mapping.is_usable():
            raise MappingRequiredError(
                headers=parsed.headers,
                detected_mapping=parsed.detected_mapping.to_dict(),
                sample_rows=parsed.rows[:SAMPLE_ROWS_ON_ERROR],
            )

        import_id = uuid.uuid4().hex
        accepted: list[NormalizedTransaction] = []
        skipped = 0

        for row in parsed.rows:
            txn = normalize_row(row, mapping, import_id=import_id)
            if txn is None:
                skipped += 1
                continue
            accepted.append(txn)

        logger.info(
            "Importing %d of %d rows into bank account %s (import %s)",
            len(accepted),
            len(parsed.rows),
            bank_account_id,
            import_id,
        )

        for start in range(0, len(accepted), IMPORT_BATCH_SIZE):
            batch = accepted[start : start + IMPORT_BATCH_SIZE]
            try:
                self.db.insert_bank_transactions(bank_account_id, batch)
            except Exception:
                logger.exception(
                    "Import %s failed after %d of %d rows", import_id, start, len(accepted)
                )
                raise
            logger.debug("Import %s: wrote rows %d-%d", import_id, start, start + len(batch) - 1)

        if accepted:
            self.db.adjust_account_balance(bank_account_id, net_change(accepted))

        return ImportResult(
            import_id=import_id,
            imported=len(accepted),
            skipped=skipped,
            total=len(parsed.rows),
        )
