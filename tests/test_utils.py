"""Tests for date and amount utilities."""

import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from finanza.utils.date_utils import (
    add_months,
    clamp_day,
    month_bounds,
    parse_date,
    safe_parse_date,
    to_day,
)
from finanza.utils.decimal_utils import (
    format_display_amount,
    format_machine_amount,
    parse_amount,
    safe_decimal,
)
from finanza.utils.logging_config import LogContext, get_logger, setup_logging


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("2024-03-01", date(2024, 3, 1)),
            ("2024/03/01", date(2024, 3, 1)),
            ("01/03/2024", date(2024, 3, 1)),
            ("1-3-2024", date(2024, 3, 1)),
            ("01.03.2024", date(2024, 3, 1)),
            ("20240301", date(2024, 3, 1)),
            ("  2024-03-01  ", date(2024, 3, 1)),
        ],
    )
    def test_formats(self, raw: str, expected: date) -> None:
        """Test each accepted layout."""
        assert parse_date(raw) == expected

    @pytest.mark.parametrize("raw", ["", "   ", "2024-13-01", "2023-02-29", "yesterday"])
    def test_invalid(self, raw: str) -> None:
        """Test empty, out-of-range and unknown text is rejected."""
        with pytest.raises(ValueError):
            parse_date(raw)

    def test_safe_parse_date_default(self) -> None:
        """Test safe_parse_date returns the default on failure."""
        assert safe_parse_date("nope") is None
        assert safe_parse_date(None, date(2000, 1, 1)) == date(2000, 1, 1)


class TestCalendarArithmetic:
    """Tests for month arithmetic with day clamping."""

    def test_clamp_day_overflow(self) -> None:
        """Test day 31 in a 30-day month lands on the 30th."""
        assert clamp_day(2024, 4, 31) == date(2024, 4, 30)
        assert clamp_day(2023, 2, 31) == date(2023, 2, 28)
        assert clamp_day(2024, 2, 31) == date(2024, 2, 29)

    def test_add_months_clamps(self) -> None:
        """Test shifting from a month end stays in the target month."""
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_add_months_across_years(self) -> None:
        """Test year rollover in both directions."""
        assert add_months(date(2024, 1, 15), -1) == date(2023, 12, 15)
        assert add_months(date(2023, 12, 15), 1) == date(2024, 1, 15)
        assert add_months(date(2024, 2, 1), -14) == date(2022, 12, 1)

    def test_month_bounds(self) -> None:
        """Test first and last day of a month."""
        assert month_bounds(2023, 2) == (date(2023, 2, 1), date(2023, 2, 28))
        assert month_bounds(2024, 12) == (date(2024, 12, 1), date(2024, 12, 31))

    def test_to_day(self) -> None:
        """Test datetimes are truncated to their day."""
        assert to_day(datetime(2024, 3, 1, 23, 59)) == date(2024, 3, 1)
        assert to_day(date(2024, 3, 1)) == date(2024, 3, 1)


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        "raw,expected,negative",
        [
            ("-50.00", Decimal("50.00"), True),
            ("1800.00", Decimal("1800.00"), False),
            ("+12.5", Decimal("12.5"), False),
            ("-3,60 €", Decimal("3.60"), True),
            ("$1,234.56", Decimal("1234.56"), False),
            ("1.234,56", Decimal("1234.56"), False),
            ("(45.00)", Decimal("45.00"), True),
            ("1 234,50 €", Decimal("1234.50"), False),
            ("-0.00", Decimal("0.00"), True),
        ],
    )
    def test_formats(self, raw: str, expected: Decimal, negative: bool) -> None:
        """Test machine, localized and accounting formats."""
        assert parse_amount(raw) == (expected, negative)

    def test_ambiguous_comma_locale(self) -> None:
        """Test "1,234" follows the locale hint."""
        assert parse_amount("1,234", locale="EU") == (Decimal("1.234"), False)
        assert parse_amount("1,234", locale="US") == (Decimal("1234"), False)

    @pytest.mark.parametrize("raw", ["", "abc", "12abc", "NaN", "Infinity"])
    def test_invalid(self, raw: str) -> None:
        """Test unparseable and non-finite amounts are rejected."""
        with pytest.raises(ValueError):
            parse_amount(raw)


class TestFormatAmount:
    """Tests for amount formatting."""

    def test_machine_format(self) -> None:
        """Test two decimals with a period separator."""
        assert format_machine_amount(Decimal("-50")) == "-50.00"
        assert format_machine_amount(Decimal("0.005")) == "0.01"
        assert format_machine_amount(Decimal("1234.5")) == "1234.50"

    def test_display_format(self) -> None:
        """Test de-DE grouping with the currency after the number."""
        assert format_display_amount(Decimal("-1234.5")) == "-1.234,50 €"
        assert format_display_amount(Decimal("1000000"), "$") == "1.000.000,00 $"
        assert format_display_amount(Decimal("0")) == "0,00 €"

    def test_safe_decimal(self) -> None:
        """Test conversion with fallback."""
        assert safe_decimal("12.30") == Decimal("12.30")
        assert safe_decimal(0.1) == Decimal("0.1")
        assert safe_decimal("bad") == Decimal("0")
        assert safe_decimal(None, Decimal("1")) == Decimal("1")


class TestLogging:
    """Tests for setup_logging, get_logger and LogContext."""

    def test_get_logger_namespace(self) -> None:
        assert get_logger("finanza.cli").name == "finanza.cli"
        assert get_logger("other").name == "finanza.other"

    def test_setup_logging_replaces_handlers(self, tmp_path: Path) -> None:
        """Test repeated setup leaves one set of handlers."""
        log_file = tmp_path / "app.log"
        setup_logging(level="DEBUG", log_file=str(log_file), console_output=True)
        logger = setup_logging(level="warning", log_file="", console_output=False)
        assert logger.handlers == []
        assert logger.level == logging.WARNING

    def test_log_context_reraises(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test a failure inside the context is logged and propagated."""
        logger = get_logger("finanza.tests")
        with caplog.at_level(logging.DEBUG, logger="finanza"):
            with pytest.raises(RuntimeError):
                with LogContext(logger, "chat", transactions=3):
                    raise RuntimeError("boom")
        assert "Starting chat (transactions=3)" in caplog.text
        assert "chat failed after" in caplog.text
