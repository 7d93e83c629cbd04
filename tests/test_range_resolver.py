"""Tests for range selector resolution."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from finanza.config import PaycheckConfig
from finanza.models.transaction import Transaction, TransactionType
from finanza.models.window import DateWindow, RangeSelector
from finanza.processing.range_resolver import RangeResolver, fold_text, resolve

NOW = date(2024, 3, 20)


def create_transaction(
    txn_date: str,
    amount: str = "100",
    txn_type: TransactionType = TransactionType.EXPENSE,
    category: str = "Comida",
    description: str = "Test Transaction",
) -> Transaction:
    """Helper to create a Transaction for testing."""
    return Transaction(
        description=description,
        amount=Decimal(amount),
        type=txn_type,
        category=category,
        date=txn_date,
    )


def paycheck(txn_date: str, description: str = "Nómina empresa", category: str = "Freelance") -> Transaction:
    """Helper to create an income transaction that looks like a salary."""
    return create_transaction(
        txn_date, "1800", TransactionType.INCOME, category=category, description=description
    )


class TestRangeSelector:
    """Tests for RangeSelector lookup."""

    def test_from_value(self) -> None:
        """Test lookup by value, name and case-insensitive value."""
        assert RangeSelector.from_value("last30Days") is RangeSelector.LAST_30_DAYS
        assert RangeSelector.from_value("last_30_days") is RangeSelector.LAST_30_DAYS
        assert RangeSelector.from_value("THISMONTH") is RangeSelector.THIS_MONTH
        assert RangeSelector.from_value(RangeSelector.ALL) is RangeSelector.ALL

    def test_unknown_value_raises(self) -> None:
        """Test unknown selector is rejected."""
        with pytest.raises(ValueError, match="Unknown range selector"):
            RangeSelector.from_value("fortnight")

    def test_has_previous(self) -> None:
        """Test only comparative selectors report a previous window."""
        assert RangeSelector.ANNUAL.has_previous
        assert RangeSelector.LAST_PAYCHECK.has_previous
        assert not RangeSelector.THIS_MONTH.has_previous
        assert not RangeSelector.ALL.has_previous


class TestCalendarSelectors:
    """Tests for selectors that depend only on the current date."""

    def test_annual(self) -> None:
        """Test annual covers the calendar year and the year before."""
        result = resolve(RangeSelector.ANNUAL, NOW)
        assert result.current == DateWindow(date(2024, 1, 1), date(2024, 12, 31))
        assert result.previous == DateWindow(date(2023, 1, 1), date(2023, 12, 31))

    def test_annual_year_boundary(self) -> None:
        """Test a transaction on the last day of last year lands in previous."""
        result = resolve("annual", NOW)
        new_years_eve = date(2023, 12, 31)
        assert not result.current.contains(new_years_eve)
        assert result.previous is not None
        assert result.previous.contains(new_years_eve)

    def test_this_month(self) -> None:
        """Test thisMonth spans the whole calendar month."""
        result = resolve(RangeSelector.THIS_MONTH, NOW)
        assert result.current == DateWindow(date(2024, 3, 1), date(2024, 3, 31))
        assert result.previous is None

    def test_this_month_leap_february(self) -> None:
        """Test month end in a leap-year February."""
        result = resolve(RangeSelector.THIS_MONTH, date(2024, 2, 10))
        assert result.current.end == date(2024, 2, 29)

    def test_last_month_in_january(self) -> None:
        """Test lastMonth crosses the year boundary."""
        result = resolve(RangeSelector.LAST_MONTH, date(2024, 1, 15))
        assert result.current == DateWindow(date(2023, 12, 1), date(2023, 12, 31))
        assert result.previous is None

    def test_last_month_from_month_end(self) -> None:
        """Test lastMonth from the 31st does not skip a short month."""
        result = resolve(RangeSelector.LAST_MONTH, date(2024, 3, 31))
        assert result.current == DateWindow(date(2024, 2, 1), date(2024, 2, 29))

    def test_year_to_date(self) -> None:
        """Test yearToDate runs from Jan 1 to today."""
        result = resolve(RangeSelector.YEAR_TO_DATE, NOW)
        assert result.current == DateWindow(date(2024, 1, 1), NOW)

    def test_all(self) -> None:
        """Test all runs from the epoch to today."""
        result = resolve(RangeSelector.ALL, NOW)
        assert result.current == DateWindow(date(1970, 1, 1), NOW)
        assert result.previous is None

    def test_datetime_now_uses_calendar_day(self) -> None:
        """Test the time of day does not shift the windows."""
        late = resolve(RangeSelector.LAST_30_DAYS, datetime(2024, 3, 20, 23, 59))
        early = resolve(RangeSelector.LAST_30_DAYS, datetime(2024, 3, 20, 0, 1))
        assert late == early
        assert late.current.end == NOW


class TestTrailingSelectors:
    """Tests for last15Days and last30Days."""

    def test_last_30_days(self) -> None:
        """Test last30Days spans 30 days and previous ends the day before."""
        result = resolve(RangeSelector.LAST_30_DAYS, NOW)
        assert result.current.end == NOW
        assert result.current.days == timedelta(days=30)
        assert result.previous is not None
        assert result.previous.end == result.current.start - timedelta(days=1)
        assert result.previous.days == timedelta(days=30)

    def test_last_15_days(self) -> None:
        """Test last15Days window and its previous window."""
        result = resolve(RangeSelector.LAST_15_DAYS, NOW)
        assert result.current == DateWindow(date(2024, 3, 5), NOW)
        assert result.previous == DateWindow(date(2024, 2, 18), date(2024, 3, 4))

    def test_windows_do_not_overlap(self) -> None:
        """Test current and previous never share a day."""
        result = resolve(RangeSelector.LAST_30_DAYS, NOW)
        assert result.previous is not None
        assert result.previous.end < result.current.start


class TestLastPaycheck:
    """Tests for the lastPaycheck selector."""

    def test_no_paycheck_falls_back_to_last_30_days(self) -> None:
        """Test zero matches produce exactly the last30Days result."""
        transactions = [
            create_transaction("2024-03-10"),
            create_transaction("2024-03-01", "50", TransactionType.INCOME, "Regalos", "Cumpleaños"),
        ]
        assert resolve(RangeSelector.LAST_PAYCHECK, NOW, transactions) == resolve(
            RangeSelector.LAST_30_DAYS, NOW
        )

    def test_two_paychecks(self) -> None:
        """Test previous window spans between the two most recent paychecks."""
        transactions = [
            paycheck("2024-01-01"),
            paycheck("2024-03-01"),
            paycheck("2024-02-01"),
            create_transaction("2024-03-05"),
        ]
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, transactions)
        assert result.current == DateWindow(date(2024, 3, 1), NOW)
        assert result.previous == DateWindow(date(2024, 2, 1), date(2024, 2, 29))

    def test_single_paycheck(self) -> None:
        """Test previous is the 30 days before the only paycheck."""
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, [paycheck("2024-03-01")])
        assert result.current == DateWindow(date(2024, 3, 1), NOW)
        assert result.previous == DateWindow(date(2024, 1, 30), date(2024, 2, 29))

    def test_accent_and_case_insensitive_keywords(self) -> None:
        """Test "NOMINA" in the description matches the "nómina" keyword."""
        config = PaycheckConfig(keywords=["nómina"])
        transactions = [paycheck("2024-03-01", description="NOMINA MARZO")]
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, transactions, paycheck=config)
        assert result.current.start == date(2024, 3, 1)

    def test_salary_category_matches_without_keyword(self) -> None:
        """Test the salary category alone marks a paycheck."""
        transactions = [paycheck("2024-03-02", description="Transferencia", category="salario")]
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, transactions)
        assert result.current.start == date(2024, 3, 2)

    def test_expense_with_keyword_is_not_paycheck(self) -> None:
        """Test only income transactions count as paychecks."""
        resolver = RangeResolver()
        assert not resolver.is_paycheck(create_transaction("2024-03-01", description="Nómina gestor"))

    def test_future_and_unparseable_paychecks_ignored(self) -> None:
        """Test scheduled paychecks and bad dates do not move the window."""
        transactions = [
            paycheck("2024-04-01"),
            paycheck("not a date"),
            paycheck("2024-03-01"),
        ]
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, transactions)
        assert result.current == DateWindow(date(2024, 3, 1), NOW)

    def test_same_day_paychecks_count_once(self) -> None:
        """Test split payments on one day do not produce an empty previous window."""
        transactions = [paycheck("2024-03-01"), paycheck("2024-03-01"), paycheck("2024-02-01")]
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, transactions)
        assert result.previous == DateWindow(date(2024, 2, 1), date(2024, 2, 29))

    def test_paycheck_today(self) -> None:
        """Test a paycheck received today gives a one-day current window."""
        result = resolve(RangeSelector.LAST_PAYCHECK, NOW, [paycheck(NOW.isoformat())])
        assert result.current == DateWindow(NOW, NOW)


class TestCustomRange:
    """Tests for the custom selector."""

    def test_explicit_bounds(self) -> None:
        """Test given bounds are used as-is."""
        result = resolve(RangeSelector.CUSTOM, NOW, custom_start=date(2024, 1, 10), custom_end=date(2024, 2, 5))
        assert result.current == DateWindow(date(2024, 1, 10), date(2024, 2, 5))
        assert result.previous is None

    def test_missing_bounds_default(self) -> None:
        """Test missing bounds default to the epoch and today."""
        result = resolve(RangeSelector.CUSTOM, NOW)
        assert result.current == DateWindow(date(1970, 1, 1), NOW)

    def test_inverted_bounds_are_swapped(self) -> None:
        """Test start after end is normalized."""
        result = resolve(RangeSelector.CUSTOM, NOW, custom_start=date(2024, 3, 1), custom_end=date(2024, 1, 1))
        assert result.current == DateWindow(date(2024, 1, 1), date(2024, 3, 1))


class TestEarliestDates:
    """Tests that windows stop at date.min instead of failing."""

    def test_trailing_window_clamped(self) -> None:
        resolved = resolve(RangeSelector.LAST_30_DAYS, date(1, 1, 5))
        assert resolved.current == DateWindow(date.min, date(1, 1, 5))
        assert resolved.previous == DateWindow(date.min, date.min)

    def test_annual_in_first_year_has_no_previous(self) -> None:
        resolved = resolve(RangeSelector.ANNUAL, date(1, 6, 1))
        assert resolved.current == DateWindow(date(1, 1, 1), date(1, 12, 31))
        assert resolved.previous is None

    def test_last_month_in_first_month(self) -> None:
        resolved = resolve(RangeSelector.LAST_MONTH, date(1, 1, 10))
        assert resolved.current == DateWindow(date(1, 1, 1), date(1, 1, 31))

    def test_single_paycheck_on_first_day(self) -> None:
        payday = create_transaction("0001-01-01", "900", TransactionType.INCOME, "Salario", "Nómina")
        resolved = resolve(RangeSelector.LAST_PAYCHECK, date(1, 1, 20), [payday])
        assert resolved.current == DateWindow(date.min, date(1, 1, 20))
        assert resolved.previous == DateWindow(date.min, date.min)


class TestWindowOrdering:
    """Tests that hold for every selector."""

    @pytest.mark.parametrize("selector", list(RangeSelector))
    @pytest.mark.parametrize("now", [date(2024, 1, 1), date(2024, 2, 29), date(2023, 12, 31)])
    def test_start_not_after_end(self, selector: RangeSelector, now: date) -> None:
        """Test every resolved window is well ordered."""
        transactions = [paycheck("2023-12-01"), paycheck("2023-11-01")]
        result = resolve(selector, now, transactions)
        assert result.current.start <= result.current.end
        if result.previous is not None:
            assert result.previous.start <= result.previous.end
        assert (result.previous is not None) == selector.has_previous


class TestFoldText:
    """Tests for fold_text."""

    def test_strips_accents_and_case(self) -> None:
        """Test accented and unaccented spellings fold together."""
        assert fold_text("Nómina") == fold_text("NOMINA") == "nomina"
        assert fold_text("Año") == "ano"
