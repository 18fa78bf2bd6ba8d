"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, parser, services)
2. Integration tests for flows (with an in-memory store)
3. No real API calls in tests (use fakes)
"""

import pytest
from datetime import date
from decimal import Decimal

from expense_tracker.config import get_settings, validate_all_settings
from expense_tracker.models import (
    SUPPORTED_CURRENCIES,
    AlertSeverity,
    BudgetAlert,
    BudgetLimit,
    BudgetPeriod,
    Category,
    ExpenseContext,
    RecurringExpense,
    Transaction,
    TransactionCreate,
    TransactionKind,
    UserSettings,
    VoiceParseResult,
    get_currency,
)
from expense_tracker.models.chat import CategoryShare


class TestTransactionModels:
    """Tests for transaction Pydantic models."""

    def test_transaction_create(self):
        """Test TransactionCreate model creation."""
        data = TransactionCreate(
            amount=Decimal("12.50"),
            description="Coffee",
            category=Category.FOOD,
            date=date(2026, 10, 1),
        )
        assert data.amount == Decimal("12.50")
        assert data.kind == TransactionKind.EXPENSE
        assert data.tags == []

    def test_description_strips_whitespace(self):
        """Test that whitespace is stripped from descriptions."""
        data = TransactionCreate(
            amount=Decimal("1"),
            description="  Coffee  ",
            category=Category.FOOD,
            date=date(2026, 10, 1),
        )
        assert data.description == "Coffee"

    def test_rejects_zero_amount(self):
        """Test that zero amounts are rejected."""
        with pytest.raises(ValueError):
            TransactionCreate(
                amount=Decimal("0"),
                category=Category.FOOD,
                date=date(2026, 10, 1),
            )

    def test_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            TransactionCreate(
                amount=Decimal("-5"),
                category=Category.FOOD,
                date=date(2026, 10, 1),
            )

    def test_rejects_unknown_category(self):
        """Test that categories outside the closed set are rejected."""
        with pytest.raises(ValueError):
            TransactionCreate(
                amount=Decimal("5"),
                category="pets",
                date=date(2026, 10, 1),
            )

    def test_transaction_gets_id_and_timestamps(self):
        """Test that a stored record has an id and timestamps."""
        record = Transaction(
            amount=Decimal("5"),
            category=Category.FOOD,
            date=date(2026, 10, 1),
        )
        assert record.id
        assert record.created_at.tzinfo is not None
        assert record.is_expense is True
        assert record.is_income is False

    def test_income_category_not_enforced(self):
        """Test that the income category is allowed on an expense."""
        record = Transaction(
            amount=Decimal("5"),
            category=Category.INCOME,
            kind=TransactionKind.EXPENSE,
            date=date(2026, 10, 1),
        )
        assert record.is_expense

    def test_json_round_trip_keeps_date(self):
        """Test that dates survive JSON serialization."""
        record = Transaction(
            amount=Decimal("19.99"),
            category=Category.SHOPPING,
            date=date(2026, 2, 28),
        )
        restored = Transaction.model_validate_json(record.model_dump_json())
        assert restored.date == date(2026, 2, 28)
        assert restored.amount == Decimal("19.99")


class TestSettingsModels:
    """Tests for user settings models."""

    def test_default_settings(self):
        """Test the default settings document."""
        settings = UserSettings()
        assert settings.theme.value == "system"
        assert settings.currency.code == "USD"
        assert settings.budget_reminders is True
        assert settings.savings_suggestions is True
        assert settings.budget_limits == []
        assert settings.language == "en"
        assert settings.date_format.value == "MM/DD/YYYY"

    def test_budget_limit_defaults(self):
        """Test BudgetLimit defaults."""
        limit = BudgetLimit(category=Category.FOOD, limit=Decimal("100"))
        assert limit.period == BudgetPeriod.MONTHLY
        assert limit.notification_threshold == Decimal("80")
        assert limit.is_active is True

    def test_budget_limit_must_be_positive(self):
        """Test that a zero limit is rejected."""
        with pytest.raises(ValueError):
            BudgetLimit(category=Category.FOOD, limit=Decimal("0"))

    def test_recurring_expense_requires_description(self):
        """Test that a recurring expense needs a description."""
        with pytest.raises(ValueError):
            RecurringExpense(amount=Decimal("10"), description="   ")

    def test_recurring_expense_due_in_thirty_days(self):
        """Test the default next due date."""
        expense = RecurringExpense(amount=Decimal("10"), description="Internet")
        assert (expense.next_due - date.today()).days == 30

    def test_currency_lookup(self):
        """Test currency lookup by code."""
        assert get_currency("eur").symbol == "€"
        assert SUPPORTED_CURRENCIES[0].code == "USD"

    def test_unknown_currency(self):
        """Test that unsupported codes raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported currency"):
            get_currency("XYZ")


class TestDerivedModels:
    """Tests for alert, voice and chat context models."""

    def test_voice_confidence_bounds(self):
        """Test confidence must be between 0 and 1."""
        with pytest.raises(ValueError):
            VoiceParseResult(description="x", confidence=1.5, raw_text="x")

    def test_budget_alert_percentage_non_negative(self):
        """Test that alert percentages cannot be negative."""
        with pytest.raises(ValueError):
            BudgetAlert(
                id="food-1",
                category=Category.FOOD,
                spent=Decimal("0"),
                limit=Decimal("10"),
                percentage=-1,
                severity=AlertSeverity.WARNING,
                message="",
            )

    def test_expense_context_net_amount(self):
        """Test net amount is income minus expenses."""
        context = ExpenseContext(
            total_expenses=Decimal("300"),
            total_income=Decimal("1000"),
            top_categories=[
                CategoryShare(category="food", amount=Decimal("300"), percentage=100.0),
            ],
        )
        assert context.net_amount == Decimal("700")


class TestCategories:
    """Tests for the category enum."""

    def test_all_categories_exist(self):
        """Test that expected categories exist."""
        expected = [
            "food", "transportation", "entertainment", "utilities",
            "healthcare", "shopping", "education", "travel", "housing",
            "insurance", "savings", "investment", "income", "other",
        ]
        assert [c.value for c in Category] == expected


class TestValidateAllSettings:
    """Tests for the startup configuration check."""

    def test_reports_failures_with_messages(self, monkeypatch, tmp_path):
        """Test that a failing group is False with a message alongside."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        get_settings.cache_clear()
        try:
            status = validate_all_settings()
        finally:
            get_settings.cache_clear()

        assert status["storage"] is True
        assert status["app"] is True
        assert status["gemini"] is False
        assert isinstance(status["gemini_error"], str)
        assert "api_key" in status["gemini_error"]

    def test_all_valid(self, monkeypatch, tmp_path):
        """Test that a configured key leaves no error entries."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GEMINI_API_KEY", "test-key")
        get_settings.cache_clear()
        try:
            status = validate_all_settings()
        finally:
            get_settings.cache_clear()

        assert status == {"storage": True, "gemini": True, "app": True}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
