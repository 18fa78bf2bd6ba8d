"""
Core Data Models for Expense Tracker

These models define the schemas for everything that is stored or derived:
1. Transaction records (stored)
2. Period summaries and trends (derived on demand)
3. Voice parse results (ephemeral)

DESIGN DECISION: We use Pydantic v2 so that records read back from storage
or imported from a file go through exactly the same validation as records
entered in the UI.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current time, used for every stored timestamp."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate a record identifier."""
    return uuid4().hex


# The record field is called "date", which shadows the type inside model bodies
Date = date


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Category(str, Enum):
    """
    Transaction categories.

    DESIGN DECISION: A closed set keeps the per-category breakdown and the
    budget limits comparable. INCOME is meant for income records, but this
    is a UI convention and not enforced here.
    """
    FOOD = "food"
    TRANSPORTATION = "transportation"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    HEALTHCARE = "healthcare"
    SHOPPING = "shopping"
    EDUCATION = "education"
    TRAVEL = "travel"
    HOUSING = "housing"
    INSURANCE = "insurance"
    SAVINGS = "savings"
    INVESTMENT = "investment"
    INCOME = "income"
    OTHER = "other"


class TransactionKind(str, Enum):
    """Polarity of a transaction."""
    EXPENSE = "expense"
    INCOME = "income"


class Frequency(str, Enum):
    """How often a recurring payment happens."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


# =============================================================================
# TRANSACTION RECORD
# =============================================================================

class TransactionBase(BaseModel):
    """Fields the user supplies when creating a transaction."""
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        gt=0,
        description="Monetary amount, always positive"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Free-text description"
    )
    category: Category = Field(
        ...,
        description="Transaction category"
    )
    kind: TransactionKind = Field(
        default=TransactionKind.EXPENSE,
        description="Expense or income"
    )
    date: Date = Field(
        ...,
        description="When the transaction happened"
    )

    # Optional extras
    tags: list[str] = Field(default_factory=list)
    recurring: bool = False
    recurring_period: Optional[Frequency] = None


class TransactionCreate(TransactionBase):
    """Input for RecordStore.add()."""
    pass


class Transaction(TransactionBase):
    """
    A stored transaction record.

    Identifier and timestamps are assigned by the record store.
    """

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique record identifier"
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        description="When the record was created"
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        description="Last update timestamp"
    )

    @property
    def is_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME


# =============================================================================
# DERIVED MODELS
# =============================================================================

class MonthlyTrendPoint(BaseModel):
    """Expense and income totals for one calendar month."""

    month: str = Field(
        ...,
        description="Month label, e.g. 'Oct 2026'"
    )
    expenses: Decimal = Decimal("0")
    income: Decimal = Decimal("0")


class ExpenseSummary(BaseModel):
    """
    Aggregated view of a period.

    Recomputed from scratch on every request; never stored.
    Categories without spend in the period are simply absent
    from expenses_by_category.
    """

    total_expenses: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    net_amount: Decimal = Decimal("0")
    expenses_by_category: dict[Category, Decimal] = Field(default_factory=dict)
    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)


class MonthlyBudget(BaseModel):
    """Current-month spend against a built-in default limit."""

    category: Category
    limit: Decimal
    spent: Decimal
    percentage: float = Field(ge=0.0)


class VoiceParseResult(BaseModel):
    """
    Structured guess extracted from a spoken transcript.

    CRITICAL: This is a SUGGESTION. Nothing is stored until the user
    adds it explicitly.
    """

    amount: Optional[Decimal] = None
    description: str
    category: Optional[Category] = None
    confidence: float = Field(
        ...,
        ge=0.0,
        le=1.0,
        description="Recognition confidence reported by the speech engine"
    )
    raw_text: str
