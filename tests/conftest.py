"""
Shared test fixtures.

Everything runs against an in-memory store with fixed clocks. No test
talks to Gemini; the chat tests use FakeModel below.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from expense_tracker.agents import ChatbotService, GeminiChatService
from expense_tracker.models import Category, TransactionCreate, TransactionKind
from expense_tracker.services import (
    BudgetAlertManager,
    ExpenseAggregator,
    RecordStore,
    SettingsService,
)
from expense_tracker.services.storage import InMemoryStore


TODAY = date(2026, 10, 19)
NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


class FakeModel:
    """Stands in for genai.GenerativeModel; records every request."""

    def __init__(self, reply="Sure, here is some advice.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate_content_async(self, contents):
        self.calls.append(contents)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.reply)


def make_record(
    amount,
    category=Category.FOOD,
    kind=TransactionKind.EXPENSE,
    on=TODAY,
    description="",
):
    return TransactionCreate(
        amount=Decimal(str(amount)),
        category=category,
        kind=kind,
        date=on,
        description=description,
    )


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def records(store):
    return RecordStore(store)


@pytest.fixture
def aggregator(records):
    return ExpenseAggregator(records, today=lambda: TODAY)


@pytest.fixture
def settings_service(store):
    return SettingsService(store)


@pytest.fixture
def alert_manager(settings_service):
    return BudgetAlertManager(settings_service, clock=lambda: NOW)


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def ai_service(fake_model):
    return GeminiChatService(model=fake_model)


@pytest.fixture
def chatbot(store, ai_service):
    return ChatbotService(store, ai_service)
