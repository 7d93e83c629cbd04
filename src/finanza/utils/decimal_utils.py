"""Decimal utilities for amounts.

All monetary calculations use Decimal to avoid floating-point drift. Parsing
is lenient (locale formats, currency symbols); the two formatters are strict,
one for files and one for people.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

# Currency symbols to strip
CURRENCY_SYMBOLS = {"€", "$", "£"}

# Regex for parentheses-enclosed negatives: (1.234,56 €) or (1234.56)
PARENS_NEGATIVE_PATTERN = re.compile(r"^\s*\(\s*([^)]+)\s*\)\s*$")

CENT = Decimal("0.01")


def parse_amount(raw_amount: str, locale: str = "EU") -> tuple[Decimal, bool]:
    """Parse a raw amount string into a Decimal.

    Handles:
    - Machine format: 1234.56, -1234.56
    - With currency: -3,60 €, $1,234.56
    - Parentheses for negative: (1234.56)
    - European grouping: 1.234,56

    The ambiguous "1,234" is resolved by ``locale``: "EU" (default) reads
    the comma as a decimal separator, "US" as a thousands separator.

    Args:
        raw_amount: The raw amount string to parse.
        locale: Locale hint for ambiguous formats ("EU" or "US").

    Returns:
        Tuple of (absolute amount as Decimal, is_negative flag). The flag
        follows the text, so "-0.00" reports negative.

    Raises:
        ValueError: If the amount cannot be parsed or is not finite.
    """
    if not raw_amount:
        raise ValueError("Empty amount string")

    original = raw_amount
    amount_str = raw_amount.strip()
    is_negative = False

    parens_match = PARENS_NEGATIVE_PATTERN.match(amount_str)
    if parens_match:
        amount_str = parens_match.group(1).strip()
        is_negative = True

    for symbol in CURRENCY_SYMBOLS:
        amount_str = amount_str.replace(symbol, "")
    amount_str = amount_str.replace(" ", "").replace("\u00a0", "")

    if amount_str.startswith("-"):
        is_negative = True
        amount_str = amount_str[1:]
    elif amount_str.startswith("+"):
        amount_str = amount_str[1:]

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            # European: 1.234,56 -> 1234.56
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            # US: 1,234.56 -> 1234.56
            amount_str = amount_str.replace(",", "")
    elif "," in amount_str:
        if re.search(r",\d{1,2}$", amount_str):
            # Decimal comma: 3,60 -> 3.60
            amount_str = amount_str.replace(",", ".")
        elif locale == "EU" and amount_str.count(",") == 1:
            amount_str = amount_str.replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Cannot parse amount '{original}': {e}") from e

    if not amount.is_finite():
        raise ValueError(f"Amount is not a finite number: '{original}'")

    return abs(amount), is_negative


def format_machine_amount(amount: Decimal) -> str:
    """Format a signed amount for files: two decimals, period separator.

    >>> format_machine_amount(Decimal("-50"))
    '-50.00'
    """
    return str(amount.quantize(CENT, rounding=ROUND_HALF_UP))


def format_display_amount(amount: Decimal, currency: str = "€") -> str:
    """Format an amount for display with de-DE grouping.

    >>> format_display_amount(Decimal("-1234.5"))
    '-1.234,50 €'
    """
    rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    grouped = f"{abs(rounded):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if rounded < 0 else ""
    return f"{sign}{grouped} {currency}".rstrip()


def safe_decimal(value: object | None, default: Decimal = Decimal("0")) -> Decimal:
    """Convert a value to Decimal, returning default on failure.

    Args:
        value: Value to convert (string, int, float, or None).
        default: Default value if conversion fails.

    Returns:
        Decimal value or default.
    """
    if value is None:
        return default

    try:
        if isinstance(value, Decimal):
            return value
        if isinstance(value, (int, str, float)):
            # Route floats through str to keep their shortest representation
            return Decimal(str(value))
        return default
    except (InvalidOperation, ValueError):
        return default

