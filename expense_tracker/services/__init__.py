"""
Services Package

Stateful services over the key-value store: records, aggregation,
budget alerts, user settings, theme and savings suggestions.
"""

from expense_tracker.services.aggregator import DEFAULT_BUDGET_LIMITS, ExpenseAggregator
from expense_tracker.services.budget_alerts import BudgetAlertManager, get_severity
from expense_tracker.services.records import RecordStore
from expense_tracker.services.suggestions import SavingsAdvisor
from expense_tracker.services.theme import ThemeManager, resolve_theme
from expense_tracker.services.user_settings import SettingsService, format_money

__all__ = [
    "DEFAULT_BUDGET_LIMITS",
    "BudgetAlertManager",
    "ExpenseAggregator",
    "RecordStore",
    "SavingsAdvisor",
    "SettingsService",
    "ThemeManager",
    "format_money",
    "get_severity",
    "resolve_theme",
]
