"""
User Settings Models

Everything the user configures: theme, currency, reminders, budget limits
and recurring expenses. Stored as a single JSON document.
"""

from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.transaction import Category, Frequency, new_id


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class BudgetPeriod(str, Enum):
    """
    Budget reset period.

    Advisory only: limits are always compared against the summary
    they are evaluated with, nothing is reset automatically.
    """
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class DateFormat(str, Enum):
    US = "MM/DD/YYYY"
    EUROPEAN = "DD/MM/YYYY"
    ISO = "YYYY-MM-DD"


class SuggestionDifficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SuggestionType(str, Enum):
    SUBSCRIPTION = "subscription"
    HABIT = "habit"
    ALTERNATIVE = "alternative"
    OPTIMIZATION = "optimization"


class Currency(BaseModel):
    """A display currency with its rate against USD."""

    code: str = Field(..., min_length=3, max_length=3)
    symbol: str = Field(..., min_length=1)
    name: str
    rate: Decimal = Field(..., gt=0, description="Units per 1 USD")


SUPPORTED_CURRENCIES: list[Currency] = [
    Currency(code="USD", symbol="$", name="US Dollar", rate=Decimal("1")),
    Currency(code="EUR", symbol="€", name="Euro", rate=Decimal("0.85")),
    Currency(code="GBP", symbol="£", name="British Pound", rate=Decimal("0.73")),
    Currency(code="JPY", symbol="¥", name="Japanese Yen", rate=Decimal("110")),
    Currency(code="CAD", symbol="C$", name="Canadian Dollar", rate=Decimal("1.25")),
    Currency(code="AUD", symbol="A$", name="Australian Dollar", rate=Decimal("1.35")),
    Currency(code="CHF", symbol="CHF", name="Swiss Franc", rate=Decimal("0.92")),
    Currency(code="INR", symbol="₹", name="Indian Rupee", rate=Decimal("75")),
    Currency(code="CNY", symbol="¥", name="Chinese Yuan", rate=Decimal("6.45")),
]


def get_currency(code: str) -> Currency:
    """Look up a supported currency by ISO code."""
    for currency in SUPPORTED_CURRENCIES:
        if currency.code == code.upper():
            return currency
    raise ValueError(f"Unsupported currency: {code}")


class BudgetLimit(BaseModel):
    """A user-defined spending limit for one category."""
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id, min_length=1)
    category: Category
    limit: Decimal = Field(
        ...,
        gt=0,
        description="Spending limit for the period"
    )
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    notification_threshold: Decimal = Field(
        default=Decimal("80"),
        ge=0,
        le=1000,
        description="Alert once this percentage of the limit is spent"
    )
    is_active: bool = True


def _default_next_due() -> date:
    return date.today() + timedelta(days=30)


class RecurringExpense(BaseModel):
    """A reminder for a payment that repeats."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: str = Field(default_factory=new_id, min_length=1)
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=200)
    category: Category = Category.UTILITIES
    frequency: Frequency = Frequency.MONTHLY
    next_due: date = Field(default_factory=_default_next_due)
    is_active: bool = True
    last_processed: Optional[date] = None


class UserSettings(BaseModel):
    """The whole settings document."""
    model_config = ConfigDict(validate_assignment=True)

    theme: Theme = Theme.SYSTEM
    currency: Currency = Field(default_factory=lambda: SUPPORTED_CURRENCIES[0])
    budget_reminders: bool = True
    savings_suggestions: bool = True
    recurring_expenses: list[RecurringExpense] = Field(default_factory=list)
    budget_limits: list[BudgetLimit] = Field(default_factory=list)
    language: str = "en"
    date_format: DateFormat = DateFormat.US


class SavingSuggestion(BaseModel):
    """A rule-based hint on where money could be saved."""

    id: str
    title: str
    description: str
    category: str
    potential_saving: Decimal = Field(ge=0)
    difficulty: SuggestionDifficulty
    type: SuggestionType
