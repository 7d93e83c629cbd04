"""Aggregate transactions into dashboard and analytics metrics."""

from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

from finanza.config import PaycheckConfig
from finanza.models.report import CategoryTotal, DashboardMetrics, MonthlyTotal, Summary
from finanza.models.transaction import Transaction
from finanza.models.window import DateWindow, RangeSelector
from finanza.processing.range_resolver import RangeResolver
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Savings-rate badges shown on the dashboard, checked top to bottom
PERFORMANCE_TIERS = [
    (Decimal("70"), False, "excellent"),
    (Decimal("50"), True, "great"),
    (Decimal("20"), True, "good"),
]


def filter_transactions(
    transactions: Iterable[Transaction],
    window: DateWindow,
) -> list[Transaction]:
    """Keep the transactions dated inside a window.

    Transactions whose date does not parse match no window and are dropped
    from the result (they stay in the caller's list).

    Args:
        transactions: Transactions to filter.
        window: Inclusive date window.

    Returns:
        Matching transactions in input order.
    """
    matched = []
    dropped = 0
    for txn in transactions:
        parsed = txn.parsed_date
        if parsed is None:
            dropped += 1
            continue
        if window.contains(parsed):
            matched.append(txn)

    if dropped:
        logger.debug(f"Excluded {dropped} transactions with unparseable dates from {window}")
    return matched


def savings_rate(income: Decimal, expense: Decimal) -> Decimal:
    """Percentage of income retained; exactly 0 when there is no income."""
    if income <= 0:
        return ZERO
    return (income - expense) / income * HUNDRED


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """Total income and expense, balance and savings rate.

    Args:
        transactions: Transactions to aggregate (typically already filtered).

    Returns:
        Summary of the transactions.
    """
    income = ZERO
    expense = ZERO
    count = 0
    for txn in transactions:
        count += 1
        if txn.is_income:
            income += txn.amount
        else:
            expense += txn.amount

    return Summary(
        income=income,
        expense=expense,
        balance=income - expense,
        savings_rate=savings_rate(income, expense),
        count=count,
    )


def category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryTotal]:
    """Sum expenses per category, largest first.

    The sort is stable, so categories with equal totals keep the order in
    which they were first encountered; chart legends stay deterministic.

    Args:
        transactions: Transactions to aggregate; income is ignored.

    Returns:
        Category totals sorted by value descending.
    """
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if not txn.is_expense:
            continue
        totals[txn.category] = totals.get(txn.category, ZERO) + txn.amount

    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategoryTotal(name=name, value=value) for name, value in ordered]


def monthly_breakdown(transactions: Iterable[Transaction]) -> list[MonthlyTotal]:
    """Sum income and expense per calendar month, oldest first.

    Args:
        transactions: Transactions to aggregate. Unparseable dates are skipped.

    Returns:
        Monthly totals sorted by (year, month).
    """
    income: dict[tuple[int, int], Decimal] = {}
    expense: dict[tuple[int, int], Decimal] = {}
    for txn in transactions:
        parsed = txn.parsed_date
        if parsed is None:
            continue
        key = (parsed.year, parsed.month)
        income.setdefault(key, ZERO)
        expense.setdefault(key, ZERO)
        if txn.is_income:
            income[key] += txn.amount
        else:
            expense[key] += txn.amount

    return [
        MonthlyTotal(year=year, month=month, income=income[(year, month)], expense=expense[(year, month)])
        for year, month in sorted(income)
    ]


def performance_tier(rate: Decimal) -> str:
    """Dashboard badge for a savings rate.

    Returns:
        "excellent" above 70%, "great" from 50%, "good" from 20%,
        otherwise "improvable".
    """
    for threshold, inclusive, tier in PERFORMANCE_TIERS:
        if rate > threshold or (inclusive and rate == threshold):
            return tier
    return "improvable"


def build_dashboard(
    selector: RangeSelector | str,
    transactions: list[Transaction],
    now: date | datetime,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
    paycheck: Optional[PaycheckConfig] = None,
) -> DashboardMetrics:
    """Resolve a range and compute every metric the dashboard shows.

    Args:
        selector: The named range.
        transactions: The full transaction list.
        now: Current instant.
        custom_start: Start for the custom range.
        custom_end: End for the custom range.
        paycheck: Salary detection settings for the lastPaycheck range.

    Returns:
        DashboardMetrics for the current (and previous) window.
    """
    selector = RangeSelector.from_value(selector)
    resolved = RangeResolver(paycheck).resolve(
        selector, now, transactions, custom_start, custom_end
    )

    current_txns = filter_transactions(transactions, resolved.current)
    previous_summary = None
    if resolved.previous is not None:
        previous_summary = summarize(filter_transactions(transactions, resolved.previous))

    metrics = DashboardMetrics(
        selector=selector,
        range=resolved,
        current=summarize(current_txns),
        previous=previous_summary,
        categories=category_breakdown(current_txns),
        monthly=monthly_breakdown(current_txns),
    )
    logger.debug(
        f"Dashboard {selector.value}: {resolved.current}, "
        f"{metrics.current.count}/{len(transactions)} transactions"
    )
    return metrics
