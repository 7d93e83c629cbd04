"""Report data models for dashboard and analytics views."""

from dataclasses import dataclass, field
from decimal import Decimal

from finanza.models.window import RangeSelector, ResolvedRange


@dataclass(frozen=True)
class Summary:
    """Totals for a set of transactions.

    Attributes:
        income: Sum of income amounts.
        expense: Sum of expense amounts (positive).
        balance: income - expense.
        savings_rate: Percentage of income retained; 0 when there is no income.
        count: Number of transactions aggregated.
    """

    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    savings_rate: Decimal = Decimal("0")
    count: int = 0


@dataclass(frozen=True)
class CategoryTotal:
    """Expense total for one category."""

    name: str
    value: Decimal


@dataclass(frozen=True)
class MonthlyTotal:
    """Income and expense totals for one calendar month."""

    year: int
    month: int
    income: Decimal = Decimal("0")
    expense: Decimal = Decimal("0")

    @property
    def name(self) -> str:
        """Chart label, e.g. "3/2024"."""
        return f"{self.month}/{self.year}"

    @property
    def net(self) -> Decimal:
        return self.income - self.expense


@dataclass
class DashboardMetrics:
    """Everything a dashboard view shows for one range selection.

    Attributes:
        selector: The selected range.
        range: Resolved current (and optional previous) window.
        current: Totals for the current window.
        previous: Totals for the previous window, if the selector compares.
        categories: Expense breakdown for the current window.
        monthly: Month-by-month totals for the current window.
    """

    selector: RangeSelector
    range: ResolvedRange
    current: Summary
    previous: Summary | None = None
    categories: list[CategoryTotal] = field(default_factory=list)
    monthly: list[MonthlyTotal] = field(default_factory=list)

    @property
    def expense_change(self) -> Decimal | None:
        """Percentage change in expense against the previous window.

        None when there is no previous window or it had no expense.
        """
        if self.previous is None or self.previous.expense == 0:
            return None
        return (self.current.expense - self.previous.expense) / self.previous.expense * 100

    @property
    def categories_total(self) -> Decimal:
        return sum((c.value for c in self.categories), Decimal("0"))
