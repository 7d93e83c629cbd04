"""Default categories, salary keywords and recurring items."""

from decimal import Decimal

from finanza.models.transaction import RecurringItem, TransactionType

INCOME_CATEGORIES = ["Salario", "Freelance", "Inversiones", "Regalos", "Otros"]

EXPENSE_CATEGORIES = [
    "Vivienda",
    "Comida",
    "Transporte",
    "Ocio",
    "Salud",
    "Suscripciones",
    "Capricho",
    "Otros",
]

# Category that marks a paycheck regardless of its description
SALARY_CATEGORY = "Salario"

# Description keywords that mark a paycheck (compared without case or accents)
SALARY_KEYWORDS = ["nomina", "salario", "sueldo", "paga", "salary", "payroll", "paycheck"]

# Fallbacks used when an imported row leaves these fields blank
DEFAULT_CATEGORY = "Otros"
DEFAULT_DESCRIPTION = "Sin nombre"

DEFAULT_RECURRING_ITEMS = [
    RecurringItem(
        id="salary",
        label="Nómina",
        type=TransactionType.INCOME,
        category="Salario",
        default_amount=Decimal("1800"),
        day_of_month=1,
    ),
    RecurringItem(
        id="rent",
        label="Alquiler",
        type=TransactionType.EXPENSE,
        category="Vivienda",
        default_amount=Decimal("750"),
        day_of_month=1,
    ),
    RecurringItem(
        id="utilities",
        label="Luz y agua",
        type=TransactionType.EXPENSE,
        category="Vivienda",
        default_amount=Decimal("80"),
        day_of_month=15,
    ),
    RecurringItem(
        id="gym",
        label="Gimnasio",
        type=TransactionType.EXPENSE,
        category="Salud",
        default_amount=Decimal("35"),
        day_of_month=5,
    ),
    RecurringItem(
        id="streaming",
        label="Streaming",
        type=TransactionType.EXPENSE,
        category="Suscripciones",
        default_amount=Decimal("12.99"),
    ),
]
