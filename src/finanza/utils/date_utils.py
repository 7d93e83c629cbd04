"""Date parsing and calendar arithmetic utilities."""

import calendar
import re
from datetime import date, datetime

# Earliest bound used for open-ended ranges ("all", custom without a start)
EPOCH = date(1970, 1, 1)

# Accepted date layouts, tried in order.
#
# Slash-separated dates with the day first (03/04/2024) are read as
# European DD/MM/YYYY, the convention of the exports this app receives.
# Year-first slash dates (2024/04/03) come from older Finanza exports.
DATE_PATTERNS = [
    (r"^(\d{4})-(\d{1,2})-(\d{1,2})$", "%Y-%m-%d"),
    (r"^(\d{4})/(\d{1,2})/(\d{1,2})$", "%Y/%m/%d"),
    (r"^(\d{1,2})/(\d{1,2})/(\d{4})$", "%d/%m/%Y"),
    (r"^(\d{1,2})-(\d{1,2})-(\d{4})$", "%d-%m-%Y"),
    (r"^(\d{1,2})\.(\d{1,2})\.(\d{4})$", "%d.%m.%Y"),
    (r"^(\d{4})(\d{2})(\d{2})$", "%Y%m%d"),
]

COMPILED_PATTERNS = [(re.compile(pattern), fmt) for pattern, fmt in DATE_PATTERNS]


def parse_date(raw_date: str) -> date:
    """Parse a raw date string into a date object.

    Handles:
    - ISO: 2024-01-15
    - Year-first slashes: 2024/01/15
    - European: 15/01/2024, 15-01-2024, 15.01.2024
    - Compact: 20240115

    Args:
        raw_date: The raw date string to parse.

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date cannot be parsed.
    """
    if not raw_date:
        raise ValueError("Empty date string")

    date_str = raw_date.strip()
    if not date_str:
        raise ValueError("Empty date string after stripping whitespace")

    for pattern, fmt in COMPILED_PATTERNS:
        if pattern.match(date_str):
            try:
                return datetime.strptime(date_str, fmt).date()
            except ValueError:
                # Pattern matched but values are out of range (e.g. month 13)
                continue

    raise ValueError(f"Cannot parse date: '{raw_date}'")


def safe_parse_date(raw_date: str | None, default: date | None = None) -> date | None:
    """Parse a date string, returning default on failure.

    Args:
        raw_date: The raw date string to parse.
        default: Default value if parsing fails.

    Returns:
        Parsed date or default.
    """
    if not raw_date:
        return default

    try:
        return parse_date(raw_date)
    except ValueError:
        return default


def date_to_iso(d: date) -> str:
    """Convert a date to ISO 8601 format (YYYY-MM-DD)."""
    return d.isoformat()


def to_day(value: date | datetime) -> date:
    """Normalize a date or datetime to its calendar day.

    A window ending on this day includes every instant up to 23:59:59.999,
    so "now" at any time of day still includes today.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def last_day_of_month(year: int, month: int) -> int:
    """Return the number of days in the given month."""
    return calendar.monthrange(year, month)[1]


def clamp_day(year: int, month: int, day: int) -> date:
    """Build a date, clamping day overflow to the last day of the month.

    Args:
        year: Calendar year.
        month: Calendar month (1-12).
        day: Requested day; values past the month end are clamped.

    Returns:
        The requested date, or the month's last day on overflow.
    """
    return date(year, month, max(1, min(day, last_day_of_month(year, month))))


def add_months(d: date, months: int) -> date:
    """Shift a date by a number of months, clamping the day of month.

    ``add_months(date(2024, 3, 31), -1)`` is ``date(2024, 2, 29)``.
    """
    index = d.year * 12 + (d.month - 1) + months
    year, month = divmod(index, 12)
    return clamp_day(year, month + 1, d.day)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return the first and last day of a calendar month."""
    return date(year, month, 1), date(year, month, last_day_of_month(year, month))

