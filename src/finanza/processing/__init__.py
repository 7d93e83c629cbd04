"""Range resolution, aggregation and seeding."""

from finanza.processing.aggregator import (
    build_dashboard,
    category_breakdown,
    filter_transactions,
    monthly_breakdown,
    performance_tier,
    summarize,
)
from finanza.processing.range_resolver import RangeResolver, resolve
from finanza.processing.recurring import seed_recurring_history

__all__ = [
    "RangeResolver",
    "resolve",
    "filter_transactions",
    "summarize",
    "category_breakdown",
    "monthly_breakdown",
    "performance_tier",
    "build_dashboard",
    "seed_recurring_history",
]
