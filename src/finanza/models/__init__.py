"""Data models for transactions, date windows and reports."""

from finanza.models.report import CategoryTotal, DashboardMetrics, MonthlyTotal, Summary
from finanza.models.transaction import RecurringItem, Transaction, TransactionType
from finanza.models.window import DateWindow, RangeSelector, ResolvedRange

__all__ = [
    "Transaction",
    "TransactionType",
    "RecurringItem",
    "DateWindow",
    "RangeSelector",
    "ResolvedRange",
    "Summary",
    "CategoryTotal",
    "MonthlyTotal",
    "DashboardMetrics",
]
