"""Command-line interface for the finance tracker."""

import argparse
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table

from finanza import __version__
from finanza.assistant import AIClientError, FinancialAssistant
from finanza.config import Config, ConfigError, load_config
from finanza.models.report import DashboardMetrics
from finanza.models.transaction import Transaction, TransactionType
from finanza.models.window import RangeSelector
from finanza.output.csv_exporter import CSVExporter
from finanza.parsers.base import ParseError
from finanza.parsers.csv_parser import TransactionCSVParser
from finanza.processing.aggregator import build_dashboard, performance_tier
from finanza.processing.recurring import seed_recurring_history
from finanza.storage.json_store import JSONTransactionStore, StoreError
from finanza.utils.date_utils import date_to_iso
from finanza.utils.decimal_utils import format_display_amount, parse_amount
from finanza.utils.logging_config import get_logger, setup_logging

# Load environment variables from .env file (if it exists)
load_dotenv()

console = Console()
logger = get_logger(__name__)

# Preference key remembering the last range shown by `summary`
LAST_RANGE_PREFERENCE = "last_range"

TIER_LABELS = {
    "excellent": ("Excelente", "Excellent"),
    "great": ("Muy bien", "Great"),
    "good": ("Bien", "Good"),
    "improvable": ("Mejorable", "Needs work"),
}

LABELS = {
    "income": ("Ingresos", "Income"),
    "expense": ("Gastos", "Expenses"),
    "balance": ("Balance", "Balance"),
    "savings_rate": ("Tasa de ahorro", "Savings rate"),
    "transactions": ("Movimientos", "Transactions"),
    "current": ("Actual", "Current"),
    "previous": ("Anterior", "Previous"),
    "categories": ("Gastos por categoría", "Spending by category"),
    "monthly": ("Evolución mensual", "Monthly trend"),
    "category": ("Categoría", "Category"),
    "month": ("Mes", "Month"),
    "sources": ("Fuentes", "Sources"),
}


def _label(key: str, lang: str) -> str:
    es, en = LABELS.get(key) or TIER_LABELS[key]
    return es if lang == "es" else en


def _iso_date(value: str) -> date:
    """argparse type for YYYY-MM-DD dates."""
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from e


def _range_value(value: str) -> RangeSelector:
    """argparse type for range selectors."""
    try:
        return RangeSelector.from_value(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser.

    Returns:
        Configured ArgumentParser.
    """
    parser = argparse.ArgumentParser(
        prog="finanza",
        description="Track personal income and expenses from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s seed
  %(prog)s add --description "Lunch" --amount 12.50 --type expense --category Comida
  %(prog)s summary --range lastPaycheck
  %(prog)s summary --range custom --start 2024-01-01 --end 2024-03-31
  %(prog)s export --output-dir ./exports
  %(prog)s import finanza_export_2024-03-01.csv
  %(prog)s ask chat "How much did I spend on food?"
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to settings.yaml (default: config/settings.yaml)",
    )

    parser.add_argument(
        "--data",
        type=Path,
        default=None,
        help="Path to the JSON data file (default: from settings)",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for info, -vv for debug)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    summary = subparsers.add_parser("summary", help="Show dashboard totals for a range")
    summary.add_argument(
        "-r", "--range",
        type=_range_value,
        default=None,
        help=(
            "Range: " + ", ".join(s.value for s in RangeSelector)
            + " (default: last range used, then settings)"
        ),
    )
    summary.add_argument("--start", type=_iso_date, default=None, help="Custom range start (YYYY-MM-DD)")
    summary.add_argument("--end", type=_iso_date, default=None, help="Custom range end (YYYY-MM-DD)")

    export = subparsers.add_parser("export", help="Export all transactions to CSV")
    export.add_argument(
        "-o", "--output-dir",
        type=Path,
        default=Path("."),
        help="Directory for the export file (default: current directory)",
    )

    import_ = subparsers.add_parser("import", help="Replace all transactions with a CSV file")
    import_.add_argument("file", type=Path, help="CSV file previously exported")

    add = subparsers.add_parser("add", help="Add a transaction")
    add.add_argument("-d", "--description", required=True, help="Transaction description")
    add.add_argument("-a", "--amount", required=True, help="Positive amount, e.g. 12.50")
    add.add_argument(
        "-t", "--type",
        choices=[t.value for t in TransactionType],
        default=TransactionType.EXPENSE.value,
        help="Transaction type (default: expense)",
    )
    add.add_argument("-c", "--category", default=None, help="Category (default: first of the type's list)")
    add.add_argument("--date", type=_iso_date, default=None, help="Date (default: today)")

    seed = subparsers.add_parser("seed", help="Seed three months of history from recurring items")
    seed.add_argument(
        "--force",
        action="store_true",
        help="Seed even if transactions already exist (seeded items are added)",
    )

    reset = subparsers.add_parser("reset", help="Delete all stored transactions and preferences")
    reset.add_argument("--yes", action="store_true", help="Confirm deletion")

    ask = subparsers.add_parser("ask", help="Ask the financial assistant")
    ask.add_argument("mode", choices=["quick", "chat", "advice", "search"], help="Assistant operation")
    ask.add_argument("text", nargs="?", default="", help="Question (not used by quick)")

    return parser


def get_log_level(verbosity: int) -> str:
    """Convert verbosity count to log level.

    Args:
        verbosity: Number of -v flags.

    Returns:
        Log level string.
    """
    if verbosity >= 2:
        return "DEBUG"
    elif verbosity >= 1:
        return "INFO"
    else:
        return "WARNING"


def display_dashboard(metrics: DashboardMetrics, lang: str, currency: str) -> None:
    """Print dashboard tables for one range."""

    def money(amount: Decimal) -> str:
        return format_display_amount(amount, currency)

    console.print(f"\n[bold]{metrics.selector.value}[/bold]  [dim]{metrics.range.current}[/dim]")

    totals = Table(show_header=metrics.previous is not None)
    totals.add_column("")
    totals.add_column(_label("current", lang), justify="right")
    if metrics.previous is not None:
        totals.add_column(
            f"{_label('previous', lang)} ({metrics.range.previous})", justify="right"
        )

    current, previous = metrics.current, metrics.previous
    rows = [
        ("income", money(current.income), previous and money(previous.income)),
        ("expense", money(current.expense), previous and money(previous.expense)),
        ("balance", money(current.balance), previous and money(previous.balance)),
        ("savings_rate", f"{current.savings_rate:.1f}%", previous and f"{previous.savings_rate:.1f}%"),
        ("transactions", str(current.count), previous and str(previous.count)),
    ]
    for key, now_value, prev_value in rows:
        cells = [_label(key, lang), now_value]
        if previous is not None:
            cells.append(prev_value)
        totals.add_row(*cells)
    console.print(totals)

    tier = performance_tier(current.savings_rate)
    color = "green" if tier in ("excellent", "great") else "yellow" if tier == "good" else "red"
    console.print(f"[{color}]{_label(tier, lang)}[/{color}]")

    change = metrics.expense_change
    if change is not None:
        arrow = "▲" if change > 0 else "▼"
        console.print(f"{_label('expense', lang)}: {arrow} {abs(change):.1f}%")

    if metrics.categories:
        table = Table(title=_label("categories", lang))
        table.add_column(_label("category", lang))
        table.add_column(_label("expense", lang), justify="right")
        table.add_column("%", justify="right")
        total = metrics.categories_total
        for item in metrics.categories:
            share = item.value / total * 100 if total else Decimal("0")
            table.add_row(item.name, money(item.value), f"{share:.1f}")
        console.print(table)

    if metrics.monthly:
        table = Table(title=_label("monthly", lang))
        table.add_column(_label("month", lang))
        table.add_column(_label("income", lang), justify="right")
        table.add_column(_label("expense", lang), justify="right")
        table.add_column(_label("balance", lang), justify="right")
        for month in metrics.monthly:
            table.add_row(month.name, money(month.income), money(month.expense), money(month.net))
        console.print(table)


def run_summary(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    """Show the dashboard and remember the selected range."""
    selector = args.range
    if selector is None:
        stored = store.get_preference(LAST_RANGE_PREFERENCE)
        try:
            selector = RangeSelector.from_value(stored) if stored else config.app.default_range
        except ValueError:
            logger.warning(f"Ignoring unknown stored range '{stored}'")
            selector = config.app.default_range

    metrics = build_dashboard(
        selector,
        store.get(),
        date.today(),
        custom_start=args.start or config.custom_start,
        custom_end=args.end or config.custom_end,
        paycheck=config.paycheck,
    )
    display_dashboard(metrics, config.app.language, config.app.currency)

    store.set_preference(LAST_RANGE_PREFERENCE, selector.value)
    return 0


def run_export(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    transactions = store.get()
    try:
        output_path = CSVExporter().export(args.output_dir, transactions)
    except OSError as e:
        console.print(f"[red]Error: Could not write export: {e}[/red]")
        return 1
    console.print(f"[green]Exported {len(transactions)} transactions to {output_path}[/green]")
    return 0


def run_import(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    """Decode a CSV file and replace the stored list with it."""
    parser = TransactionCSVParser(amount_locale=config.codec.amount_locale)
    try:
        result = parser.parse_file(args.file)
    except (ParseError, FileNotFoundError) as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        return 1

    store.set(result.transactions)
    console.print(f"[green]Imported {len(result.transactions)} transactions from {args.file}[/green]")
    if result.skipped:
        console.print(f"[yellow]Skipped {result.skipped} unreadable lines[/yellow]")
        for error in result.errors[:10]:
            console.print(f"  - {error}")
        if len(result.errors) > 10:
            console.print(f"  ... and {len(result.errors) - 10} more")
    return 0


def run_add(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    txn_type = TransactionType(args.type)
    description = args.description.strip()
    if not description:
        console.print("[red]Error: Description must not be empty[/red]")
        return 1

    try:
        amount, is_negative = parse_amount(args.amount, config.codec.amount_locale)
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    if is_negative or amount == 0:
        console.print("[red]Error: Amount must be greater than zero[/red]")
        return 1

    categories = (
        config.app.income_categories if txn_type == TransactionType.INCOME else config.app.expense_categories
    )
    category = args.category or categories[0]
    if category not in categories:
        console.print(f"[yellow]Note: '{category}' is not a configured {txn_type.value} category[/yellow]")

    txn = Transaction(
        description=description,
        amount=amount,
        type=txn_type,
        category=category,
        date=date_to_iso(args.date or date.today()),
    )
    store.set([txn] + store.get())
    console.print(
        f"[green]Added {txn.type.value} {format_display_amount(txn.amount, config.app.currency)} "
        f"'{txn.description}' ({txn.category}) on {txn.date}[/green]"
    )
    return 0


def run_seed(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    existing = store.get()
    if existing and not args.force:
        console.print(
            f"[yellow]{len(existing)} transactions already stored; use --force to add seeded items[/yellow]"
        )
        return 1

    seeded = seed_recurring_history(config.recurring_items, date.today())
    store.set(seeded + existing)
    console.print(f"[green]Seeded {len(seeded)} transactions from {len(config.recurring_items)} recurring items[/green]")
    return 0


def run_ask(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    """Run one assistant operation and print the answer."""
    if args.mode != "quick" and not args.text.strip():
        console.print(f"[red]Error: '{args.mode}' needs a question[/red]")
        return 1

    assistant = FinancialAssistant.create(config.assistant, config.app.language, config.app.currency)
    if not assistant.is_available:
        console.print(
            f"[yellow]Assistant unavailable: enable it in settings and set "
            f"{config.assistant.api_key_env}[/yellow]"
        )
        return 1

    transactions = store.get()
    sources = []
    with console.status("Thinking..."):
        if args.mode == "quick":
            answer = assistant.quick_analysis(transactions)
        elif args.mode == "chat":
            answer = assistant.chat(args.text, transactions)
        elif args.mode == "advice":
            answer = assistant.complex_advice(args.text, transactions)
        else:
            try:
                response = assistant.search(args.text)
            except AIClientError as e:
                console.print(f"[red]Error: Search failed: {e}[/red]")
                return 1
            answer, sources = response.text, response.sources

    console.print(Markdown(answer))
    if sources:
        console.print(f"\n[bold]{_label('sources', config.app.language)}[/bold]")
        for source in sources:
            console.print(f"  - {source.title}: [link={source.url}]{source.url}[/link]")

    logger.info(assistant.client.get_usage_summary())
    return 0



def run_reset(args: argparse.Namespace, config: Config, store: JSONTransactionStore) -> int:
    if not args.yes:
        console.print(f"[yellow]This deletes all data in {store.path}; rerun with --yes to confirm[/yellow]")
        return 1
    store.clear()
    console.print("[green]All data deleted[/green]")
    return 0

COMMANDS = {
    "summary": run_summary,
    "export": run_export,
    "import": run_import,
    "add": run_add,
    "seed": run_seed,
    "ask": run_ask,
    "reset": run_reset,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Arguments to parse (default: sys.argv).

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    # Console logging first so configuration warnings are visible with -v
    log_level = get_log_level(args.verbose)
    setup_logging(level=log_level, log_file="", console_output=args.verbose > 0)

    try:
        config = load_config(settings_path=args.config)
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    setup_logging(
        level=log_level if args.verbose else config.logging.level,
        log_file=config.logging.file,
        console_output=args.verbose > 0,
    )

    store = JSONTransactionStore(args.data or config.storage.path)
    try:
        return COMMANDS[args.command](args, config, store)
    except StoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
