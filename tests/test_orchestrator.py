"""
Integration tests for the application flows over an in-memory store.
"""

import asyncio

import pytest
from datetime import date
from decimal import Decimal

from expense_tracker.agents import GeminiChatService
from expense_tracker.config import Settings
from expense_tracker.models import AlertSeverity, Category, TransactionKind, VoiceParseResult
from expense_tracker.orchestrator import ExpenseTrackerApp, create_app_components
from expense_tracker.services.storage import InMemoryStore

from conftest import NOW, TODAY, FakeModel, make_record


@pytest.fixture
def services(fake_model):
    return create_app_components(
        store=InMemoryStore(),
        settings=Settings(),
        ai=GeminiChatService(model=fake_model),
        today=lambda: TODAY,
        clock=lambda: NOW,
    )


@pytest.fixture
def app(services):
    return ExpenseTrackerApp(services, today=lambda: TODAY)


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_services_share_one_store(self, services):
        """Test that every namespace lands in the same store."""
        services.records.add(make_record(5))
        services.settings.get_settings()
        services.theme.toggle_theme()
        services.chatbot.current_session()

        for key in (
            "expense-tracker-data",
            "expense-tracker-settings",
            "expense-tracker-theme",
            "expense-chatbot-sessions",
        ):
            assert key in services.store

    def test_file_store_by_default(self, tmp_path, monkeypatch):
        """Test that the configured data directory is used."""
        monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
        services = create_app_components(settings=Settings(), ai=GeminiChatService())

        services.records.add(make_record(5))
        assert (tmp_path / "data" / "expense-tracker-data.json").exists()

    def test_missing_gemini_key_uses_fallbacks(self, monkeypatch):
        """Test that the app starts without a Gemini key."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        services = create_app_components(store=InMemoryStore(), settings=Settings())
        assert services.ai.is_configured is False


class TestRefresh:
    """Tests for the dashboard refresh flow."""

    def test_empty_dashboard(self, app):
        """Test a refresh with no data."""
        snapshot = app.refresh()
        assert snapshot.summary.total_expenses == Decimal("0")
        assert snapshot.alerts == []
        assert len(snapshot.summary.monthly_trend) == 6
        assert snapshot.suggestions == []

    def test_refresh_raises_alerts(self, app, services):
        """Test that refresh evaluates budget limits and notifies."""
        services.settings.add_budget_limit({"category": "food", "limit": Decimal("100")})
        services.records.add(make_record(120, Category.FOOD))
        services.records.add(make_record(2000, Category.INCOME, kind=TransactionKind.INCOME))

        received = []
        services.alerts.subscribe(received.append)
        snapshot = app.refresh()

        assert [a.severity for a in snapshot.alerts] == [AlertSeverity.CRITICAL]
        assert received == [snapshot.alerts]
        assert snapshot.summary.net_amount == Decimal("1880")
        assert snapshot.context.top_categories[0].category == "food"

    def test_dismissed_alert_does_not_hide_escalation(self, app, services):
        """Test that lowering a limit after a dismiss shows the critical alert."""
        limit = services.settings.add_budget_limit({"category": "food", "limit": Decimal("100")})
        services.records.add(make_record(85, Category.FOOD))

        [warning] = app.refresh().alerts
        assert warning.severity == AlertSeverity.WARNING
        assert services.alerts.dismiss(warning.id) is True
        assert services.alerts.active_alerts() == []

        services.settings.update_budget_limit(limit.id, {"limit": Decimal("80")})
        assert [a.severity for a in app.refresh().alerts] == [AlertSeverity.CRITICAL]

    def test_dismissed_alert_returns_on_refresh(self, app, services):
        """Test that a dismissed alert is raised again by the next refresh."""
        services.settings.add_budget_limit({"category": "food", "limit": Decimal("100")})
        services.records.add(make_record(90, Category.FOOD))

        [alert] = app.refresh().alerts
        services.alerts.dismiss(alert.id)
        assert [a.category for a in app.refresh().alerts] == [Category.FOOD]

    def test_clear_all_alerts(self, app, services):
        """Test that clearing empties the current set until the next refresh."""
        services.settings.add_budget_limit({"category": "food", "limit": Decimal("100")})
        services.settings.add_budget_limit({"category": "transportation", "limit": Decimal("50")})
        services.records.add(make_record(120, Category.FOOD))
        services.records.add(make_record(45, Category.TRANSPORTATION))
        assert len(app.refresh().alerts) == 2

        received = []
        services.alerts.subscribe(received.append)
        services.alerts.clear_all()

        assert services.alerts.active_alerts() == []
        assert received == [[]]
        assert len(app.refresh().alerts) == 2

    def test_refresh_lists_upcoming_recurring(self, app, services):
        """Test that reminders due soon are included."""
        services.settings.add_recurring_expense({
            "description": "Rent",
            "amount": Decimal("1200"),
            "next_due": date(2026, 11, 1),
        })
        assert [r.description for r in app.refresh().upcoming_recurring] == ["Rent"]


class TestVoiceFlow:
    """Tests for adding records from voice transcripts."""

    def test_parse_then_add(self, app, services):
        """Test the full transcript-to-record flow."""
        result = app.parse_voice("I spent $25 on lunch at McDonald's", 0.9)
        record = app.add_from_voice(result)

        assert record.amount == Decimal("25")
        assert record.category == Category.FOOD
        assert record.date == TODAY
        assert services.records.get_all() == [record]

    def test_missing_category_becomes_other(self, app):
        """Test the category default."""
        result = VoiceParseResult(
            amount=Decimal("9"), description="thing", confidence=1.0, raw_text="9 on thing",
        )
        record = app.add_from_voice(result, kind=TransactionKind.INCOME, on=date(2026, 10, 2))
        assert record.category == Category.OTHER
        assert record.is_income
        assert record.date == date(2026, 10, 2)

    def test_rejects_missing_amount(self, app, services):
        """Test that a parse without an amount is not stored."""
        result = app.parse_voice("bought coffee", 0.9)
        with pytest.raises(ValueError, match="No amount"):
            app.add_from_voice(result)
        assert services.records.get_all() == []


class TestChatFlow:
    """Tests for asking the assistant."""

    def test_finance_question_includes_context(self, app, services, fake_model):
        """Test that finance mode sends the current numbers."""
        services.records.add(make_record(40, Category.FOOD, description="Groceries"))
        reply = asyncio.run(app.ask("How am I doing?"))

        assert reply.content == "Sure, here is some advice."
        assert "- food: $40.00 (100.0%)" in fake_model.calls[0][0]["parts"][0]

    def test_general_question_has_no_context(self, app, fake_model):
        """Test that general mode uses the general persona."""
        asyncio.run(app.ask("Why is the sky blue?", general=True))
        assert fake_model.calls[0][0]["parts"][0].startswith("You are a helpful AI assistant")

    def test_failed_completion_still_answers(self):
        """Test the fallback reply through the full flow."""
        services = create_app_components(
            store=InMemoryStore(),
            settings=Settings(),
            ai=GeminiChatService(model=FakeModel(error=TimeoutError())),
        )
        app = ExpenseTrackerApp(services, today=lambda: TODAY)

        reply = asyncio.run(app.ask("budget tips?"))
        assert "50/30/20" in reply.content
