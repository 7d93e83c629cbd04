"""Parsers for imported transaction files."""

from finanza.parsers.base import ParseError
from finanza.parsers.csv_parser import (
    ImportResult,
    TransactionCSVParser,
    decode_transactions,
    split_line,
)

__all__ = [
    "ParseError",
    "ImportResult",
    "TransactionCSVParser",
    "decode_transactions",
    "split_line",
]
