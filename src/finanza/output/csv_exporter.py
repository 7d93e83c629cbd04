"""CSV export of the transaction list for backup and migration."""

from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from finanza.models.transaction import Transaction, TransactionType
from finanza.utils.date_utils import date_to_iso
from finanza.utils.decimal_utils import format_machine_amount
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

HEADERS = ["fecha", "categoria", "nombre", "cantidad", "tipo"]

TYPE_LABELS = {
    TransactionType.INCOME: "ingreso",
    TransactionType.EXPENSE: "gasto",
}

LINE_TERMINATOR = "\n"

# Characters that force a field to be quoted
_SPECIAL_CHARS = (",", '"', "\n", "\r")


def quote(value: str) -> str:
    """Wrap a value in double quotes, doubling any quote inside it."""
    return '"' + value.replace('"', '""') + '"'


def quote_if_needed(value: str) -> str:
    """Quote a value only when it would otherwise break the row or lose
    surrounding whitespace on import."""
    if any(ch in value for ch in _SPECIAL_CHARS) or value != value.strip():
        return quote(value)
    return value


def encode_row(txn: Transaction) -> str:
    """Encode one transaction as a CSV line (without terminator).

    A 50.00 expense "Lunch, quick" in Food on 2024-03-01 encodes as
    ``2024-03-01,Food,"Lunch, quick",-50.00,gasto``.
    """
    # A zero-amount expense keeps its sign ("-0.00") so the type survives import
    signed = -txn.amount if txn.is_expense else txn.amount
    amount = format_machine_amount(signed)
    if txn.is_expense and not amount.startswith("-"):
        amount = "-" + amount

    return ",".join([
        quote_if_needed(txn.date),
        quote_if_needed(txn.category),
        quote(txn.description),
        amount,
        TYPE_LABELS[txn.type],
    ])


def encode_transactions(transactions: Iterable[Transaction]) -> str:
    """Encode transactions as CSV text, in input order.

    Args:
        transactions: Transactions to encode.

    Returns:
        Header line plus one line per transaction, joined by newlines.
    """
    lines = [",".join(HEADERS)]
    lines.extend(encode_row(txn) for txn in transactions)
    return LINE_TERMINATOR.join(lines)


def export_filename(today: date) -> str:
    """Suggested download name, e.g. finanza_export_2024-03-01.csv."""
    return f"finanza_export_{date_to_iso(today)}.csv"


class CSVExporter:
    """Writes the transaction list to a dated CSV file."""

    def export(
        self,
        output_dir: Path,
        transactions: list[Transaction],
        today: Optional[date] = None,
    ) -> Path:
        """Export all transactions to ``output_dir``.

        Args:
            output_dir: Directory for the file (created if missing).
            transactions: Transactions to export.
            today: Date used in the file name (default: today).

        Returns:
            Path to the created file.
        """
        today = today or date.today()
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / export_filename(today)

        with open(output_path, "w", encoding="utf-8", newline="") as f:
            f.write(encode_transactions(transactions))

        logger.info(f"Exported {len(transactions)} transactions to {output_path}")
        return output_path
