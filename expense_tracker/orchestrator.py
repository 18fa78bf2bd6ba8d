"""
Application Orchestrator for Expense Tracker

This module wires the services together and defines the end-to-end flows:
1. Refresh (records → summary → budget alerts → dashboard snapshot)
2. Voice entry (transcript → parse → user confirms → record)
3. Chat (question + current financial context → assistant reply)

DESIGN DECISION: There are no module-level service instances.
create_app_components() builds every service exactly once and the
application passes them around explicitly. Tests build their own set over
an in-memory store.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from pydantic import BaseModel, Field, ValidationError

from expense_tracker.agents import ChatbotService, GeminiChatService
from expense_tracker.config import Settings, get_settings
from expense_tracker.log import get_logger
from expense_tracker.models import (
    BudgetAlert,
    Category,
    ChatMessage,
    ExpenseContext,
    ExpenseSummary,
    MonthlyBudget,
    RecurringExpense,
    SavingSuggestion,
    Transaction,
    TransactionCreate,
    TransactionKind,
    VoiceParseResult,
)
from expense_tracker.models.transaction import utcnow
from expense_tracker.services import (
    BudgetAlertManager,
    ExpenseAggregator,
    RecordStore,
    SavingsAdvisor,
    SettingsService,
    ThemeManager,
)
from expense_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    StorageError,
)
from expense_tracker.speech import VoiceTextParser


logger = get_logger(__name__)


@dataclass
class AppServices:
    """Every long-lived service, built once at startup."""

    store: KeyValueStore
    records: RecordStore
    aggregator: ExpenseAggregator
    settings: SettingsService
    alerts: BudgetAlertManager
    theme: ThemeManager
    advisor: SavingsAdvisor
    parser: VoiceTextParser
    ai: GeminiChatService
    chatbot: ChatbotService


class DashboardSnapshot(BaseModel):
    """Everything the dashboard shows, computed in one refresh."""

    summary: ExpenseSummary
    alerts: list[BudgetAlert] = Field(default_factory=list)
    monthly_budgets: list[MonthlyBudget] = Field(default_factory=list)
    context: ExpenseContext
    suggestions: list[SavingSuggestion] = Field(default_factory=list)
    upcoming_recurring: list[RecurringExpense] = Field(default_factory=list)


class ExpenseTrackerApp:
    """
    The flows the front end drives.

    Flow (refresh):
    1. Aggregate the current month
    2. Evaluate budget limits against it (notifies alert subscribers)
    3. Compute default monthly budgets, chat context and suggestions
    """

    def __init__(
        self,
        services: AppServices,
        today: Callable[[], date] = date.today,
    ):
        self.services = services
        self._today = today

    def refresh(self) -> DashboardSnapshot:
        s = self.services

        summary = s.aggregator.summarize()
        alerts = s.alerts.evaluate(summary)
        user_settings = s.settings.get_settings()

        snapshot = DashboardSnapshot(
            summary=summary,
            alerts=alerts,
            monthly_budgets=s.aggregator.monthly_budgets(),
            context=s.aggregator.expense_context(
                summary, currency_symbol=user_settings.currency.symbol
            ),
            suggestions=s.advisor.suggest(s.records.get_all()),
            upcoming_recurring=s.settings.upcoming_recurring(today=self._today()),
        )

        logger.info(
            "dashboard_refreshed",
            total_expenses=str(summary.total_expenses),
            total_income=str(summary.total_income),
            alerts=len(alerts),
        )
        return snapshot

    def parse_voice(self, transcript: str, confidence: float = 1.0) -> VoiceParseResult:
        return self.services.parser.parse(transcript, confidence)

    def add_from_voice(
        self,
        result: VoiceParseResult,
        kind: TransactionKind = TransactionKind.EXPENSE,
        on: Optional[date] = None,
    ) -> Transaction:
        """
        Store a confirmed voice parse as a record.

        A missing category becomes OTHER; a missing date becomes today.

        Raises:
            ValueError: If no amount was recognised
        """
        if result.amount is None:
            raise ValueError("No amount was recognised in the transcript")

        record = self.services.records.add(TransactionCreate(
            amount=result.amount,
            description=result.description,
            category=result.category or Category.OTHER,
            kind=kind,
            date=on or self._today(),
        ))

        logger.info("voice_record_added", record_id=record.id, confidence=result.confidence)
        return record

    async def ask(self, content: str, general: bool = False) -> ChatMessage:
        """Send a chat message with the current month's context attached."""
        context = None
        if not general:
            symbol = self.services.settings.get_settings().currency.symbol
            context = self.services.aggregator.expense_context(currency_symbol=symbol)
        return await self.services.chatbot.send_message(content, context=context, general=general)


def _build_store(settings: Settings) -> KeyValueStore:
    try:
        return JsonFileStore(settings.storage.data_dir)
    except StorageError as e:
        # No writable data directory - keep the data in memory for this run
        logger.warning("file_storage_unavailable", error=str(e))
        return InMemoryStore()


def _build_ai(settings: Settings) -> GeminiChatService:
    try:
        return GeminiChatService(settings.gemini)
    except ValidationError as e:
        logger.warning("gemini_not_configured", errors=e.error_count())
        return GeminiChatService()


def create_app_components(
    store: Optional[KeyValueStore] = None,
    settings: Optional[Settings] = None,
    ai: Optional[GeminiChatService] = None,
    today: Callable[[], date] = date.today,
    clock: Callable[[], datetime] = utcnow,
) -> AppServices:
    """
    Factory function to create all application components.

    Args:
        store: Key-value store to use. Defaults to files under the
               configured data directory.
        settings: Configuration. Defaults to get_settings().
        ai: Chat completion service. Defaults to Gemini when an API key is
            configured, otherwise fallback replies only.
        today: Date clock for summaries
        clock: Time clock for alert ids and timestamps

    Returns:
        AppServices with every service wired to the same store
    """
    settings = settings or get_settings()
    keys = settings.storage

    store = store if store is not None else _build_store(settings)
    ai = ai if ai is not None else _build_ai(settings)

    records = RecordStore(store, keys.records_key)
    settings_service = SettingsService(store, keys.settings_key)

    return AppServices(
        store=store,
        records=records,
        aggregator=ExpenseAggregator(records, today=today),
        settings=settings_service,
        alerts=BudgetAlertManager(settings_service, clock=clock),
        theme=ThemeManager(store, keys.theme_key),
        advisor=SavingsAdvisor(settings_service),
        parser=VoiceTextParser(),
        ai=ai,
        chatbot=ChatbotService(store, ai, keys.chat_key),
    )
