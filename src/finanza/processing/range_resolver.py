"""Resolve named range selectors into concrete date windows."""

import unicodedata
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from finanza.config import PaycheckConfig
from finanza.models.transaction import Transaction
from finanza.models.window import DateWindow, RangeSelector, ResolvedRange
from finanza.utils.date_utils import EPOCH, add_months, month_bounds, to_day
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

ONE_DAY = timedelta(days=1)


def fold_text(text: str) -> str:
    """Lowercase and strip accents so "Nómina" compares equal to "nomina"."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def days_before(d: date, days: int) -> date:
    """Step back ``days`` days, stopping at ``date.min``."""
    try:
        return d - timedelta(days=days)
    except OverflowError:
        return date.min


def trailing_window(end: date, days: int) -> DateWindow:
    """Window ending on ``end`` and starting ``days`` days earlier."""
    return DateWindow(start=days_before(end, days), end=end)


class RangeResolver:
    """Maps a RangeSelector and "now" to one or two date windows.

    The resolver is a pure function of its inputs: the selector, the current
    instant, the transaction list (only read for paycheck detection) and the
    paycheck settings. It never raises on transaction data; records whose
    date does not parse are ignored. Windows that would reach before
    ``date.min`` are cut off there.
    """

    def __init__(self, paycheck: Optional[PaycheckConfig] = None):
        """Initialize resolver.

        Args:
            paycheck: Salary detection settings for the lastPaycheck range.
        """
        self.paycheck = paycheck or PaycheckConfig()
        self._salary_category = fold_text(self.paycheck.salary_category)
        self._keywords = [fold_text(k) for k in self.paycheck.keywords if k]

    def resolve(
        self,
        selector: RangeSelector | str,
        now: date | datetime,
        transactions: Iterable[Transaction] = (),
        custom_start: Optional[date] = None,
        custom_end: Optional[date] = None,
    ) -> ResolvedRange:
        """Resolve a selector into a current and optional previous window.

        Args:
            selector: The named range (enum member or its value).
            now: Current instant; only its calendar day matters.
            transactions: Transactions scanned for paychecks.
            custom_start: Start for the custom range (default epoch).
            custom_end: End for the custom range (default today).

        Returns:
            ResolvedRange with inclusive windows.
        """
        selector = RangeSelector.from_value(selector)
        today = to_day(now)

        if selector is RangeSelector.ANNUAL:
            return self._annual(today)
        if selector is RangeSelector.LAST_15_DAYS:
            return self._last_days(today, 15)
        if selector is RangeSelector.LAST_30_DAYS:
            return self._last_days(today, 30)
        if selector is RangeSelector.LAST_PAYCHECK:
            return self._last_paycheck(today, transactions)
        if selector is RangeSelector.THIS_MONTH:
            start, end = month_bounds(today.year, today.month)
            return ResolvedRange(current=DateWindow(start, end))
        if selector is RangeSelector.LAST_MONTH:
            first = today.replace(day=1)
            previous_month = add_months(first, -1) if first > date.min else first
            start, end = month_bounds(previous_month.year, previous_month.month)
            return ResolvedRange(current=DateWindow(start, end))
        if selector is RangeSelector.YEAR_TO_DATE:
            return ResolvedRange(current=DateWindow(date(today.year, 1, 1), today))
        if selector is RangeSelector.CUSTOM:
            return self._custom(today, custom_start, custom_end)
        return ResolvedRange(current=DateWindow(EPOCH, today))

    def _annual(self, today: date) -> ResolvedRange:
        year = today.year
        current = DateWindow(date(year, 1, 1), date(year, 12, 31))
        if year == date.min.year:
            return ResolvedRange(current=current)
        return ResolvedRange(
            current=current,
            previous=DateWindow(date(year - 1, 1, 1), date(year - 1, 12, 31)),
        )

    def _last_days(self, today: date, days: int) -> ResolvedRange:
        current = trailing_window(today, days)
        previous = trailing_window(days_before(current.start, 1), days)
        return ResolvedRange(current=current, previous=previous)

    def _last_paycheck(self, today: date, transactions: Iterable[Transaction]) -> ResolvedRange:
        paydays = self.find_paydays(transactions, until=today)
        if not paydays:
            logger.debug("No paycheck found, falling back to last 30 days")
            return self._last_days(today, 30)

        latest = paydays[0]
        current = DateWindow(start=latest, end=today)

        if len(paydays) > 1:
            previous = DateWindow(start=paydays[1], end=latest - ONE_DAY)
        else:
            previous = trailing_window(days_before(current.start, 1), self.paycheck.fallback_days)

        logger.debug(f"Paycheck range: current={current}, previous={previous}")
        return ResolvedRange(current=current, previous=previous)

    def _custom(
        self,
        today: date,
        custom_start: Optional[date],
        custom_end: Optional[date],
    ) -> ResolvedRange:
        start = to_day(custom_start) if custom_start is not None else EPOCH
        end = to_day(custom_end) if custom_end is not None else today
        if start > end:
            logger.debug(f"Custom range {start} > {end}, swapping bounds")
            start, end = end, start
        return ResolvedRange(current=DateWindow(start, end))

    def is_paycheck(self, txn: Transaction) -> bool:
        """Check whether an income transaction looks like a salary payment."""
        if not txn.is_income:
            return False
        if fold_text(txn.category) == self._salary_category:
            return True
        description = fold_text(txn.description)
        return any(keyword in description for keyword in self._keywords)

    def find_paydays(
        self,
        transactions: Iterable[Transaction],
        until: Optional[date] = None,
    ) -> list[date]:
        """Return the distinct dates of paycheck transactions, newest first.

        Paychecks dated after ``until`` (scheduled, not yet received) are ignored.

        Two paychecks on the same day count once, so the previous window is
        never empty because of a split payment.
        """
        paydays = set()
        for txn in transactions:
            if not self.is_paycheck(txn):
                continue
            parsed = txn.parsed_date
            if parsed is None:
                logger.debug(f"Ignoring paycheck with unparseable date: {txn.date!r}")
                continue
            if until is not None and parsed > until:
                continue
            paydays.add(parsed)
        return sorted(paydays, reverse=True)


def resolve(
    selector: RangeSelector | str,
    now: date | datetime,
    transactions: Iterable[Transaction] = (),
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
    paycheck: Optional[PaycheckConfig] = None,
) -> ResolvedRange:
    """Convenience function to resolve a range selector.

    Args:
        selector: The named range.
        now: Current instant.
        transactions: Transactions scanned for paychecks.
        custom_start: Start for the custom range.
        custom_end: End for the custom range.
        paycheck: Salary detection settings.

    Returns:
        ResolvedRange with inclusive windows.
    """
    resolver = RangeResolver(paycheck)
    return resolver.resolve(selector, now, transactions, custom_start, custom_end)
