"""Transaction data models."""

import uuid
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

from finanza.utils.date_utils import safe_parse_date
from finanza.utils.decimal_utils import safe_decimal


class TransactionType(Enum):
    """Direction of a transaction. The amount itself is always non-negative."""

    INCOME = "income"  # Money in
    EXPENSE = "expense"  # Money out


def new_transaction_id() -> str:
    """Generate a fresh, never-reused transaction ID."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Transaction:
    """A recorded income or expense.

    Transactions are immutable: an edit produces a new record through
    ``dataclasses.replace`` which then takes the old one's place in the list.

    Attributes:
        description: Free-text label.
        amount: Non-negative magnitude; the sign lives in ``type``.
        type: Income or expense.
        category: Free-text category label (not restricted to a fixed set).
        date: Calendar date as ``YYYY-MM-DD`` text. Kept as text so an
            unparseable value stays in the list and is only excluded from
            date-bounded views.
        id: Unique identifier (UUID), assigned at creation.
    """

    description: str
    amount: Decimal
    type: TransactionType
    category: str
    date: str
    id: str = field(default_factory=new_transaction_id)

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", safe_decimal(self.amount))
        if self.amount < 0:
            raise ValueError(f"Transaction amount must be non-negative, got {self.amount}")
        if not self.description:
            raise ValueError("Transaction description must not be empty")

    @property
    def is_income(self) -> bool:
        return self.type is TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE

    @property
    def signed_amount(self) -> Decimal:
        """Return the amount signed by type (negative for expenses)."""
        return -self.amount if self.is_expense else self.amount

    @property
    def parsed_date(self) -> date | None:
        """Return the transaction date, or None when the text does not parse."""
        return safe_parse_date(self.date)

    def to_dict(self) -> dict[str, str]:
        """Serialize to a JSON-friendly dict (amount as text to keep precision)."""
        return {
            "id": self.id,
            "description": self.description,
            "amount": str(self.amount),
            "type": self.type.value,
            "category": self.category,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "Transaction":
        """Create from a dict produced by ``to_dict``.

        Raises:
            ValueError: If the type is unknown or the amount is negative.
            KeyError: If a required field is missing.
        """
        return cls(
            id=str(data.get("id") or new_transaction_id()),
            description=str(data["description"]),
            amount=safe_decimal(data["amount"]),
            type=TransactionType(str(data["type"])),
            category=str(data.get("category", "")),
            date=str(data["date"]),
        )

    def __repr__(self) -> str:
        return (
            f"Transaction(date={self.date}, "
            f"description={self.description[:30]!r}, "
            f"amount={self.signed_amount}, "
            f"category={self.category!r})"
        )


@dataclass(frozen=True)
class RecurringItem:
    """Template for a transaction that repeats every month.

    Attributes:
        id: Stable identifier of the template.
        label: Description given to generated transactions.
        type: Income or expense.
        category: Category given to generated transactions.
        default_amount: Amount given to generated transactions.
        day_of_month: Day (1-31) the transaction occurs; None picks a day.
    """

    id: str
    label: str
    type: TransactionType
    category: str
    default_amount: Decimal
    day_of_month: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "RecurringItem":
        """Create from a settings dict."""
        day = data.get("day_of_month")
        return cls(
            id=str(data["id"]),
            label=str(data["label"]),
            type=TransactionType(str(data.get("type", "expense"))),
            category=str(data.get("category", "")),
            default_amount=safe_decimal(data.get("default_amount", data.get("amount"))),
            day_of_month=int(day) if day is not None else None,  # type: ignore[call-overload]
        )
