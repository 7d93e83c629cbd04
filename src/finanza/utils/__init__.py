"""Shared utilities for dates, amounts and logging."""
