"""Tests for dashboard and analytics aggregation."""

from datetime import date
from decimal import Decimal

import pytest

from finanza.models.transaction import Transaction, TransactionType
from finanza.models.window import DateWindow, RangeSelector
from finanza.processing.aggregator import (
    build_dashboard,
    category_breakdown,
    filter_transactions,
    monthly_breakdown,
    performance_tier,
    savings_rate,
    summarize,
)


def create_transaction(
    amount: str,
    txn_type: TransactionType = TransactionType.EXPENSE,
    category: str = "Comida",
    txn_date: str = "2024-02-10",
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


class TestSummarize:
    """Tests for summarize and savings_rate."""

    def test_empty(self) -> None:
        """Test empty list yields all zeros."""
        result = summarize([])
        assert result.income == Decimal("0")
        assert result.expense == Decimal("0")
        assert result.balance == Decimal("0")
        assert result.savings_rate == Decimal("0")
        assert result.count == 0

    def test_totals(self) -> None:
        """Test income, expense and balance."""
        result = summarize([
            create_transaction("1000", TransactionType.INCOME, "Salario"),
            create_transaction("250.50"),
            create_transaction("49.50", category="Ocio"),
        ])
        assert result.income == Decimal("1000")
        assert result.expense == Decimal("300.00")
        assert result.balance == Decimal("700.00")
        assert result.savings_rate == Decimal("70")
        assert result.count == 3

    def test_savings_rate_zero_without_income(self) -> None:
        """Test savings rate is exactly zero when there is no income."""
        result = summarize([create_transaction("80")])
        assert result.savings_rate == Decimal("0")
        assert savings_rate(Decimal("0"), Decimal("0")) == Decimal("0")

    @pytest.mark.parametrize("expense", ["0", "10", "999.99", "5000"])
    def test_savings_rate_at_most_100(self, expense: str) -> None:
        """Test savings rate never exceeds 100 with positive income."""
        rate = savings_rate(Decimal("1000"), Decimal(expense))
        assert rate <= 100

    def test_savings_rate_negative_when_overspending(self) -> None:
        """Test spending more than earned gives a negative rate."""
        assert savings_rate(Decimal("100"), Decimal("150")) == Decimal("-50")


class TestCategoryBreakdown:
    """Tests for category_breakdown."""

    def test_sorted_descending(self) -> None:
        """Test categories are ordered by total, largest first."""
        result = category_breakdown([
            create_transaction("20", category="Ocio"),
            create_transaction("100", category="Vivienda"),
            create_transaction("30", category="Ocio"),
        ])
        assert [(c.name, c.value) for c in result] == [
            ("Vivienda", Decimal("100")),
            ("Ocio", Decimal("50")),
        ]

    def test_ties_keep_first_seen_order(self) -> None:
        """Test equal totals keep their first-encountered order."""
        result = category_breakdown([
            create_transaction("10", category="Transporte"),
            create_transaction("10", category="Comida"),
            create_transaction("10", category="Ocio"),
        ])
        assert [c.name for c in result] == ["Transporte", "Comida", "Ocio"]

    def test_income_ignored(self) -> None:
        """Test income does not appear in the breakdown."""
        result = category_breakdown([create_transaction("500", TransactionType.INCOME, "Salario")])
        assert result == []

    def test_totals_match_expense(self) -> None:
        """Test category totals add up to the total expense."""
        transactions = [
            create_transaction("12.34", category="Comida"),
            create_transaction("56.78", category="Ocio"),
            create_transaction("90", category="Comida"),
            create_transaction("1000", TransactionType.INCOME, "Salario"),
        ]
        total = sum((c.value for c in category_breakdown(transactions)), Decimal("0"))
        assert total == summarize(transactions).expense


class TestMonthlyBreakdown:
    """Tests for monthly_breakdown."""

    def test_sorted_chronologically_across_years(self) -> None:
        """Test months are ordered by year then month."""
        result = monthly_breakdown([
            create_transaction("10", txn_date="2024-02-01"),
            create_transaction("20", txn_date="2023-12-15"),
            create_transaction("300", TransactionType.INCOME, "Salario", txn_date="2024-01-01"),
            create_transaction("5", txn_date="2024-02-20"),
        ])
        assert [m.name for m in result] == ["12/2023", "1/2024", "2/2024"]
        assert result[0].expense == Decimal("20")
        assert result[1].income == Decimal("300")
        assert result[1].expense == Decimal("0")
        assert result[2].expense == Decimal("15")
        assert result[2].net == Decimal("-15")

    def test_unparseable_dates_skipped(self) -> None:
        """Test records with bad dates do not create a month."""
        result = monthly_breakdown([create_transaction("10", txn_date="someday")])
        assert result == []


class TestFilterTransactions:
    """Tests for filter_transactions."""

    def test_inclusive_bounds(self) -> None:
        """Test both window ends are included."""
        window = DateWindow(date(2024, 2, 1), date(2024, 2, 29))
        transactions = [
            create_transaction("1", txn_date="2024-01-31"),
            create_transaction("2", txn_date="2024-02-01"),
            create_transaction("3", txn_date="2024-02-29"),
            create_transaction("4", txn_date="2024-03-01"),
        ]
        result = filter_transactions(transactions, window)
        assert [t.amount for t in result] == [Decimal("2"), Decimal("3")]

    def test_malformed_dates_excluded(self) -> None:
        """Test unparseable dates match no window, even "all"."""
        window = DateWindow(date(1970, 1, 1), date(2100, 1, 1))
        transactions = [
            create_transaction("1", txn_date="31/02/2024x"),
            create_transaction("2", txn_date=""),
            create_transaction("3", txn_date="2024-02-10"),
        ]
        result = filter_transactions(transactions, window)
        assert len(result) == 1
        assert result[0].amount == Decimal("3")


class TestPerformanceTier:
    """Tests for performance_tier thresholds."""

    @pytest.mark.parametrize(
        "rate,expected",
        [
            ("85", "excellent"),
            ("70.01", "excellent"),
            ("70", "great"),
            ("50", "great"),
            ("49.99", "good"),
            ("20", "good"),
            ("19.99", "improvable"),
            ("0", "improvable"),
            ("-40", "improvable"),
        ],
    )
    def test_tiers(self, rate: str, expected: str) -> None:
        """Test each tier boundary."""
        assert performance_tier(Decimal(rate)) == expected


class TestBuildDashboard:
    """Tests for build_dashboard."""

    def test_this_month_scenario(self) -> None:
        """Test only the current month's transactions are aggregated."""
        transactions = [
            create_transaction("100", txn_date="2024-01-05"),
            create_transaction("200", TransactionType.INCOME, "Salario", txn_date="2024-02-10"),
        ]
        metrics = build_dashboard(RangeSelector.THIS_MONTH, transactions, date(2024, 2, 15))
        assert metrics.current.income == Decimal("200")
        assert metrics.current.expense == Decimal("0")
        assert metrics.current.balance == Decimal("200")
        assert metrics.previous is None
        assert metrics.expense_change is None

    def test_annual_previous_year(self) -> None:
        """Test the previous window totals feed the expense change."""
        transactions = [
            create_transaction("100", txn_date="2023-12-31"),
            create_transaction("150", txn_date="2024-01-01"),
        ]
        metrics = build_dashboard("annual", transactions, date(2024, 6, 1))
        assert metrics.current.expense == Decimal("150")
        assert metrics.previous is not None
        assert metrics.previous.expense == Decimal("100")
        assert metrics.expense_change == Decimal("50")

    def test_breakdowns_use_current_window(self) -> None:
        """Test category and monthly breakdowns cover only the current window."""
        transactions = [
            create_transaction("40", category="Ocio", txn_date="2024-02-03"),
            create_transaction("60", category="Vivienda", txn_date="2024-02-04"),
            create_transaction("999", category="Capricho", txn_date="2023-02-04"),
        ]
        metrics = build_dashboard(RangeSelector.YEAR_TO_DATE, transactions, date(2024, 2, 15))
        assert [c.name for c in metrics.categories] == ["Vivienda", "Ocio"]
        assert metrics.categories_total == metrics.current.expense
        assert [m.name for m in metrics.monthly] == ["2/2024"]

    def test_custom_bounds(self) -> None:
        """Test custom bounds are passed through to the resolver."""
        transactions = [
            create_transaction("10", txn_date="2024-01-10"),
            create_transaction("20", txn_date="2024-01-20"),
        ]
        metrics = build_dashboard(
            RangeSelector.CUSTOM,
            transactions,
            date(2024, 2, 15),
            custom_start=date(2024, 1, 15),
            custom_end=date(2024, 1, 31),
        )
        assert metrics.current.expense == Decimal("20")
