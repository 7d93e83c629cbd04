"""Seed a starting history from recurring monthly items."""

import random
from datetime import date
from typing import Iterable, Optional

from finanza.models.transaction import RecurringItem, Transaction
from finanza.utils.date_utils import add_months, clamp_day, date_to_iso
from finanza.utils.logging_config import get_logger

logger = get_logger(__name__)

# Months of history generated, including the current one
SEED_MONTHS = 3

# Days drawn from when an item has no fixed day of month
RANDOM_DAY_RANGE = (1, 20)


def seed_recurring_history(
    items: Iterable[RecurringItem],
    today: date,
    months: int = SEED_MONTHS,
    rng: Optional[random.Random] = None,
) -> list[Transaction]:
    """Generate one transaction per item per month, newest first.

    Items in the current month are included even when their day is still
    ahead, so the user sees the month's plan.

    Args:
        items: Recurring templates.
        today: Reference date; the current month is month 0.
        months: Number of months to generate (current and earlier).
        rng: Random source for items without a day of month.

    Returns:
        Generated transactions sorted by date descending.
    """
    rng = rng or random.Random()
    items = list(items)
    transactions = []

    for offset in range(months):
        month_start = add_months(today.replace(day=1), -offset)
        for item in items:
            day = item.day_of_month or rng.randint(*RANDOM_DAY_RANGE)
            # Day 31 in a 30-day month lands on the 30th, not the 1st of the next
            when = clamp_day(month_start.year, month_start.month, day)
            transactions.append(
                Transaction(
                    description=item.label,
                    amount=item.default_amount,
                    type=item.type,
                    category=item.category,
                    date=date_to_iso(when),
                )
            )

    transactions.sort(key=lambda t: t.date, reverse=True)
    logger.info(f"Seeded {len(transactions)} transactions from {len(items)} recurring items")
    return transactions
