"""CSV import of Finanza exports and compatible files.

Expected layout (header line first, then one row per transaction)::

    fecha,categoria,nombre,cantidad,tipo
    2024-03-01,Food,"Lunch, quick",-50.00,gasto

Import is best-effort: a bad row is skipped and counted, never fatal. Only
empty content is an error.
"""

import csv
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from finanza.constants import DEFAULT_CATEGORY, DEFAULT_DESCRIPTION
from finanza.models.transaction import Transaction, TransactionType
from finanza.parsers.base import ParseError
from finanza.utils.date_utils import date_to_iso, safe_parse_date
from finanza.utils.decimal_utils import parse_amount
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

# Maximum file size accepted by parse_file (10 MB)
MAX_CSV_FILE_SIZE = 10 * 1024 * 1024

# Minimum number of fields: fecha, categoria, nombre, cantidad
MIN_FIELDS = 4

DATE_COL = 0
CATEGORY_COL = 1
DESCRIPTION_COL = 2
AMOUNT_COL = 3


@dataclass
class ImportResult:
    """Outcome of decoding a file.

    Attributes:
        transactions: Transactions recovered, in file order.
        skipped: Number of non-blank data lines that could not be used.
        errors: Reason per skipped line, prefixed with its line number.
    """

    transactions: list[Transaction] = field(default_factory=list)
    skipped: int = 0
    errors: list[str] = field(default_factory=list)


def split_line(line: str) -> list[str]:
    """Split one CSV line on commas, respecting quoted fields.

    A comma inside quotes does not split, and a doubled quote inside quotes
    is one literal quote. Whitespace around each field is removed, but
    whitespace inside the quotes of a quoted field is kept.

    Raises:
        csv.Error: If the line is malformed beyond what the reader tolerates.
    """
    cells = []
    start = 0
    in_quotes = False
    for pos, ch in enumerate(line):
        if ch == '"':
            in_quotes = not in_quotes
        elif ch == "," and not in_quotes:
            cells.append(line[start:pos])
            start = pos + 1
    cells.append(line[start:])
    return [_unquote_cell(cell.strip()) for cell in cells]


def _unquote_cell(cell: str) -> str:
    if not cell.startswith('"'):
        return cell
    reader = csv.reader([cell], strict=False)
    row = next(reader, [""])
    return row[0] if row else ""


class TransactionCSVParser:
    """Decodes CSV text into transactions."""

    def __init__(self, amount_locale: str = "EU"):
        """Initialize parser.

        Args:
            amount_locale: How an ambiguous "1,234" is read ("EU" or "US").
        """
        self.amount_locale = amount_locale

    def decode(self, text: Optional[str], today: Optional[date] = None) -> list[Transaction]:
        """Decode CSV text into transactions.

        Args:
            text: Full file content.
            today: Date given to rows without a date (default: today).

        Returns:
            Decoded transactions in file order, each with a new ID.

        Raises:
            ParseError: If the content is empty.
        """
        return self.decode_with_report(text, today).transactions

    def decode_with_report(self, text: Optional[str], today: Optional[date] = None) -> ImportResult:
        """Decode CSV text, also reporting the lines that were skipped.

        Raises:
            ParseError: If the content is empty.
        """
        if not text:
            raise ParseError("File is empty")

        today = today or date.today()
        result = ImportResult()
        lines = text.split("\n")

        # Line 1 is the header
        for line_num, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if not line:
                continue

            try:
                txn, reason = self._parse_line(line, today)
            except csv.Error as e:
                txn, reason = None, f"malformed quoting ({e})"

            if txn is None:
                result.skipped += 1
                result.errors.append(f"Line {line_num}: {reason}")
                logger.debug(f"Skipping line {line_num}: {reason}")
                continue
            result.transactions.append(txn)

        logger.info(
            f"Decoded {len(result.transactions)} transactions "
            f"({result.skipped} lines skipped)"
        )
        if result.skipped:
            logger.warning(f"{result.skipped} lines could not be imported")
        return result

    def parse_file(self, file_path: Path, today: Optional[date] = None) -> ImportResult:
        """Read a UTF-8 file and decode it.

        Raises:
            FileNotFoundError: If the file does not exist.
            ParseError: If the file is too large or empty.
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        file_size = file_path.stat().st_size
        if file_size > MAX_CSV_FILE_SIZE:
            raise ParseError(
                f"File too large ({file_size / 1024 / 1024:.1f} MB). "
                f"Maximum allowed is {MAX_CSV_FILE_SIZE / 1024 / 1024:.0f} MB",
                file_path,
            )

        # utf-8-sig drops the BOM spreadsheet tools put in front of the header
        text = file_path.read_text(encoding="utf-8-sig", errors="replace")
        try:
            return self.decode_with_report(text, today)
        except ParseError as e:
            raise ParseError(str(e), file_path) from e

    def _parse_line(self, line: str, today: date) -> tuple[Optional[Transaction], str]:
        """Parse one data line.

        Returns:
            (transaction, "") on success, (None, reason) when skipped.
        """
        cols = split_line(line)
        if len(cols) < MIN_FIELDS:
            return None, f"expected at least {MIN_FIELDS} fields, got {len(cols)}"

        try:
            magnitude, is_negative = parse_amount(cols[AMOUNT_COL], locale=self.amount_locale)
        except ValueError:
            return None, f"unparseable amount '{cols[AMOUNT_COL]}'"

        # The sign decides the type; the tipo column is informational only
        txn_type = TransactionType.EXPENSE if is_negative else TransactionType.INCOME

        return (
            Transaction(
                description=cols[DESCRIPTION_COL] or DEFAULT_DESCRIPTION,
                amount=magnitude,
                type=txn_type,
                category=cols[CATEGORY_COL] or DEFAULT_CATEGORY,
                date=self._normalize_date(cols[DATE_COL], today),
            ),
            "",
        )

    def _normalize_date(self, raw_date: str, today: date) -> str:
        """Return the date as ISO text.

        Empty dates become today. Recognized layouts (2024/03/01,
        01/03/2024, ...) are rewritten as ISO; anything else is kept as-is
        so it survives the import and is only excluded from range views.
        """
        if not raw_date:
            return date_to_iso(today)
        parsed = safe_parse_date(raw_date)
        if parsed is None:
            logger.debug(f"Keeping unparseable date verbatim: {raw_date!r}")
            return raw_date
        return date_to_iso(parsed)


def decode_transactions(
    text: Optional[str],
    today: Optional[date] = None,
    amount_locale: str = "EU",
) -> list[Transaction]:
    """Convenience function to decode CSV text.

    Args:
        text: Full file content.
        today: Date given to rows without a date.
        amount_locale: How an ambiguous "1,234" is read.

    Returns:
        Decoded transactions.

    Raises:
        ParseError: If the content is empty.
    """
    return TransactionCSVParser(amount_locale).decode(text, today)
