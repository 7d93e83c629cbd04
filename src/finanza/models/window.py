"""Date window models used to bound aggregations."""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum


class RangeSelector(Enum):
    """Named period a dashboard or analytics view is filtered by."""

    ANNUAL = "annual"
    LAST_15_DAYS = "last15Days"
    LAST_30_DAYS = "last30Days"
    LAST_PAYCHECK = "lastPaycheck"
    THIS_MONTH = "thisMonth"
    LAST_MONTH = "lastMonth"
    YEAR_TO_DATE = "yearToDate"
    CUSTOM = "custom"
    ALL = "all"

    @classmethod
    def from_value(cls, value: "str | RangeSelector") -> "RangeSelector":
        """Look up a selector by value ("last30Days") or name ("last_30_days").

        Raises:
            ValueError: If no selector matches.
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for selector in cls:
            if text == selector.value or text.upper() == selector.name:
                return selector
        lowered = text.lower()
        for selector in cls:
            if lowered == selector.value.lower():
                return selector
        raise ValueError(f"Unknown range selector: '{value}'")

    @property
    def has_previous(self) -> bool:
        """Whether this selector yields a period-over-period comparison."""
        return self in _COMPARATIVE


_COMPARATIVE = {
    RangeSelector.ANNUAL,
    RangeSelector.LAST_15_DAYS,
    RangeSelector.LAST_30_DAYS,
    RangeSelector.LAST_PAYCHECK,
}


@dataclass(frozen=True)
class DateWindow:
    """Closed date interval; both ends inclusive."""

    start: date
    end: date

    def contains(self, d: date) -> bool:
        return self.start <= d <= self.end

    @property
    def days(self) -> timedelta:
        """Distance between the bounds (a 31-day inclusive window spans 30 days)."""
        return self.end - self.start

    def __str__(self) -> str:
        return f"{self.start.isoformat()} to {self.end.isoformat()}"


@dataclass(frozen=True)
class ResolvedRange:
    """Current window plus, for comparative selectors, the preceding one."""

    current: DateWindow
    previous: DateWindow | None = None
