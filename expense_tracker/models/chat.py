"""
Chat Assistant Models
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from expense_tracker.models.transaction import new_id, utcnow


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    id: str = Field(default_factory=new_id)
    content: str
    role: ChatRole
    timestamp: datetime = Field(default_factory=utcnow)


class ChatSession(BaseModel):
    """A conversation, persisted with all its messages."""

    id: str = Field(default_factory=new_id)
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    last_activity: datetime = Field(default_factory=utcnow)


class CategoryShare(BaseModel):
    category: str
    amount: Decimal
    percentage: float = Field(ge=0.0, description="Share of total expenses")


class RecentTransaction(BaseModel):
    description: str
    amount: Decimal
    category: str
    date: str


class ExpenseContext(BaseModel):
    """
    Financial context injected into the finance-advisor prompt.

    Built from the current summary and the most recent records.
    """

    total_expenses: Decimal = Decimal("0")
    total_income: Decimal = Decimal("0")
    top_categories: list[CategoryShare] = Field(default_factory=list)
    recent_transactions: list[RecentTransaction] = Field(default_factory=list)
    currency_symbol: str = "$"

    @property
    def net_amount(self) -> Decimal:
        return self.total_income - self.total_expenses
