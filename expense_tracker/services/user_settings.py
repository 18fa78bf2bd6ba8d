"""
User Settings Service

Reads and writes the user settings document, including the budget limits
and recurring expense reminders it contains.

DESIGN DECISION: Every mutation validates the WHOLE resulting document
before anything is written. A bad value raises pydantic.ValidationError
(a ValueError subclass) and the stored settings stay as they were.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Optional, Union

from pydantic import BaseModel, ValidationError

from expense_tracker.log import get_logger
from expense_tracker.models.user_settings import (
    BudgetLimit,
    Currency,
    RecurringExpense,
    UserSettings,
    get_currency,
)
from expense_tracker.services.storage import CorruptDataError, KeyValueStore


logger = get_logger(__name__)


def format_money(amount: Decimal, symbol: str = "$") -> str:
    """
    Format an amount with a currency symbol and thousands separators.

    format_money(Decimal("-1234.5"), "€") == "-€1,234.50"
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


class SettingsService:
    """Persistence and helpers for UserSettings."""

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "expense-tracker-settings",
    ):
        self._store = store
        self._key = key

    # -------------------------------------------------------------------------
    # Document
    # -------------------------------------------------------------------------

    def get_settings(self) -> UserSettings:
        """
        Load the settings, writing the defaults on first use.

        Raises:
            CorruptDataError: If the stored document does not validate
        """
        raw = self._store.get(self._key)
        if raw is None:
            settings = UserSettings()
            self.save_settings(settings)
            logger.info("settings_initialized")
            return settings

        try:
            return UserSettings.model_validate_json(raw)
        except ValidationError as e:
            logger.error("settings_decode_failed", key=self._key, errors=e.error_count())
            raise CorruptDataError(self._key, str(e)) from e

    def save_settings(self, settings: UserSettings) -> None:
        self._store.set(self._key, settings.model_dump_json(indent=2))

    def update_setting(self, name: str, value: Any) -> UserSettings:
        """
        Change one top-level setting.

        Raises:
            ValueError: Unknown setting name or invalid value
        """
        if name not in UserSettings.model_fields:
            raise ValueError(f"Unknown setting: {name}")

        current = self.get_settings().model_dump()
        current[name] = value
        updated = UserSettings.model_validate(current)

        self.save_settings(updated)
        logger.info("setting_updated", setting=name)
        return updated

    # -------------------------------------------------------------------------
    # Budget limits
    # -------------------------------------------------------------------------

    def add_budget_limit(self, data: Union[BudgetLimit, dict[str, Any]]) -> BudgetLimit:
        """Validate and append a budget limit. A fresh id is always assigned."""
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude={"id"})
        else:
            data = {k: v for k, v in data.items() if k != "id"}
        limit = BudgetLimit.model_validate(data)

        settings = self.get_settings()
        settings.budget_limits = [*settings.budget_limits, limit]
        self.save_settings(settings)

        logger.info("budget_limit_added", limit_id=limit.id, category=limit.category.value)
        return limit

    def update_budget_limit(
        self,
        limit_id: str,
        changes: dict[str, Any],
    ) -> Optional[BudgetLimit]:
        """Merge changes into a budget limit. Returns None if not found."""
        settings = self.get_settings()
        limits = list(settings.budget_limits)

        for index, limit in enumerate(limits):
            if limit.id != limit_id:
                continue
            merged = {**limit.model_dump(), **changes, "id": limit.id}
            limits[index] = BudgetLimit.model_validate(merged)
            settings.budget_limits = limits
            self.save_settings(settings)
            logger.info("budget_limit_updated", limit_id=limit_id)
            return limits[index]

        return None

    def delete_budget_limit(self, limit_id: str) -> bool:
        settings = self.get_settings()
        remaining = [b for b in settings.budget_limits if b.id != limit_id]
        if len(remaining) == len(settings.budget_limits):
            return False

        settings.budget_limits = remaining
        self.save_settings(settings)
        logger.info("budget_limit_deleted", limit_id=limit_id)
        return True

    # -------------------------------------------------------------------------
    # Recurring expenses
    # -------------------------------------------------------------------------

    def add_recurring_expense(
        self,
        data: Union[RecurringExpense, dict[str, Any]],
    ) -> RecurringExpense:
        """Validate and append a recurring expense. Due date defaults to 30 days out."""
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude={"id"})
        else:
            data = {k: v for k, v in data.items() if k != "id"}
        expense = RecurringExpense.model_validate(data)

        settings = self.get_settings()
        settings.recurring_expenses = [*settings.recurring_expenses, expense]
        self.save_settings(settings)

        logger.info("recurring_expense_added", expense_id=expense.id)
        return expense

    def update_recurring_expense(
        self,
        expense_id: str,
        changes: dict[str, Any],
    ) -> Optional[RecurringExpense]:
        settings = self.get_settings()
        expenses = list(settings.recurring_expenses)

        for index, expense in enumerate(expenses):
            if expense.id != expense_id:
                continue
            merged = {**expense.model_dump(), **changes, "id": expense.id}
            expenses[index] = RecurringExpense.model_validate(merged)
            settings.recurring_expenses = expenses
            self.save_settings(settings)
            logger.info("recurring_expense_updated", expense_id=expense_id)
            return expenses[index]

        return None

    def delete_recurring_expense(self, expense_id: str) -> bool:
        settings = self.get_settings()
        remaining = [r for r in settings.recurring_expenses if r.id != expense_id]
        if len(remaining) == len(settings.recurring_expenses):
            return False

        settings.recurring_expenses = remaining
        self.save_settings(settings)
        logger.info("recurring_expense_deleted", expense_id=expense_id)
        return True

    def upcoming_recurring(
        self,
        limit: int = 3,
        today: Optional[date] = None,
    ) -> list[RecurringExpense]:
        """Active reminders due today or later, soonest first."""
        today = today or date.today()
        upcoming = [
            r for r in self.get_settings().recurring_expenses
            if r.is_active and r.next_due >= today
        ]
        upcoming.sort(key=lambda r: r.next_due)
        return upcoming[:limit]

    # -------------------------------------------------------------------------
    # Currency
    # -------------------------------------------------------------------------

    @staticmethod
    def convert_amount(
        amount: Decimal,
        from_currency: Union[Currency, str],
        to_currency: Union[Currency, str],
    ) -> Decimal:
        """Convert between supported currencies through their USD rates."""
        if isinstance(from_currency, str):
            from_currency = get_currency(from_currency)
        if isinstance(to_currency, str):
            to_currency = get_currency(to_currency)
        return amount / from_currency.rate * to_currency.rate

    def format_currency(
        self,
        amount: Decimal,
        currency: Optional[Currency] = None,
    ) -> str:
        """Format with the given currency, or the user's chosen one."""
        currency = currency or self.get_settings().currency
        return format_money(amount, currency.symbol)
