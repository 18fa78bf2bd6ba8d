"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.transaction import (
    Category,
    ExpenseSummary,
    Frequency,
    MonthlyBudget,
    MonthlyTrendPoint,
    Transaction,
    TransactionCreate,
    TransactionKind,
    VoiceParseResult,
)
from expense_tracker.models.alerts import AlertSeverity, BudgetAlert
from expense_tracker.models.chat import (
    CategoryShare,
    ChatMessage,
    ChatRole,
    ChatSession,
    ExpenseContext,
    RecentTransaction,
)
from expense_tracker.models.user_settings import (
    SUPPORTED_CURRENCIES,
    BudgetLimit,
    BudgetPeriod,
    Currency,
    DateFormat,
    RecurringExpense,
    SavingSuggestion,
    SuggestionDifficulty,
    SuggestionType,
    Theme,
    UserSettings,
    get_currency,
)

__all__ = [
    # Transaction models
    "Category",
    "ExpenseSummary",
    "Frequency",
    "MonthlyBudget",
    "MonthlyTrendPoint",
    "Transaction",
    "TransactionCreate",
    "TransactionKind",
    "VoiceParseResult",
    # Alert models
    "AlertSeverity",
    "BudgetAlert",
    # Chat models
    "CategoryShare",
    "ChatMessage",
    "ChatRole",
    "ChatSession",
    "ExpenseContext",
    "RecentTransaction",
    # Settings models
    "SUPPORTED_CURRENCIES",
    "BudgetLimit",
    "BudgetPeriod",
    "Currency",
    "DateFormat",
    "RecurringExpense",
    "SavingSuggestion",
    "SuggestionDifficulty",
    "SuggestionType",
    "Theme",
    "UserSettings",
    "get_currency",
]
