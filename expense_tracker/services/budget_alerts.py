"""
Budget Alert Evaluation

Compares per-category spending in a summary against the user's budget
limits and keeps the resulting set of alerts.

DESIGN DECISION: The alert set is TRANSIENT and REPLACED wholesale.
Each evaluate() call discards the previous alerts and builds a new set
from scratch, then notifies every subscriber. A dismissed alert comes
back on the next evaluation if the category is still over threshold.

Severity tiers depend only on the percentage of the limit spent:
    >= 100  CRITICAL
    >= 90   DANGER
    else    WARNING (only reachable once the threshold is met)
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Optional, Union

from expense_tracker.log import get_logger
from expense_tracker.models.alerts import AlertSeverity, BudgetAlert
from expense_tracker.models.transaction import ExpenseSummary, utcnow
from expense_tracker.models.user_settings import BudgetLimit
from expense_tracker.services.user_settings import SettingsService, format_money


logger = get_logger(__name__)

AlertCallback = Callable[[list[BudgetAlert]], None]

DANGER_PERCENT = Decimal("90")
CRITICAL_PERCENT = Decimal("100")


def get_severity(percentage: Union[Decimal, float, int]) -> AlertSeverity:
    """Severity tier for a percentage of limit spent."""
    percentage = Decimal(str(percentage))
    if percentage >= CRITICAL_PERCENT:
        return AlertSeverity.CRITICAL
    if percentage >= DANGER_PERCENT:
        return AlertSeverity.DANGER
    return AlertSeverity.WARNING


def percent_of_limit(spent: Decimal, limit: Decimal) -> Decimal:
    """Unrounded percentage; a zero limit counts as 0%."""
    if limit <= 0:
        return Decimal("0")
    return spent / limit * 100


def build_alert_message(
    category: str,
    severity: AlertSeverity,
    spent: Decimal,
    limit: Decimal,
    percentage: int,
    symbol: str = "$",
) -> str:
    remaining = max(Decimal("0"), limit - spent)

    if severity == AlertSeverity.CRITICAL:
        return (
            f"⚠️ You've exceeded your {category} budget by "
            f"{format_money(spent - limit, symbol)}!"
        )
    if severity == AlertSeverity.DANGER:
        return (
            f"🚨 Almost at your {category} budget limit! Only "
            f"{format_money(remaining, symbol)} remaining."
        )
    return (
        f"⚡ You've used {percentage}% of your {category} budget. "
        f"{format_money(remaining, symbol)} remaining."
    )


class BudgetAlertManager:
    """
    Evaluates budget limits and broadcasts the active alert set.

    Args:
        settings_service: Source of budget limits, the reminders flag and
            the display currency
        clock: Returns the current time; used for alert ids and timestamps
    """

    def __init__(
        self,
        settings_service: SettingsService,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._settings = settings_service
        self._clock = clock
        self._alerts: list[BudgetAlert] = []
        self._subscribers: list[AlertCallback] = []

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, callback: AlertCallback) -> Callable[[], None]:
        """
        Register a callback for alert-set changes.

        Returns:
            A function that removes this subscription
        """
        self._subscribers.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: AlertCallback) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(list(self._alerts))

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def evaluate(self, summary: ExpenseSummary) -> list[BudgetAlert]:
        """
        Rebuild the alert set from a summary and the active budget limits.

        An alert is raised when spent / limit * 100 reaches the limit's
        notification threshold. With budget reminders turned off the
        set is empty.
        """
        settings = self._settings.get_settings()

        alerts: list[BudgetAlert] = []
        if settings.budget_reminders:
            now = self._clock()
            for budget in settings.budget_limits:
                if not budget.is_active:
                    continue
                alert = self._check_limit(budget, summary, now, settings.currency.symbol)
                if alert is not None:
                    alerts.append(alert)

        self._alerts = alerts
        logger.info(
            "budget_alerts_evaluated",
            alerts=len(alerts),
            reminders=settings.budget_reminders,
        )
        self._notify()
        return list(alerts)

    def _check_limit(
        self,
        budget: BudgetLimit,
        summary: ExpenseSummary,
        now: datetime,
        symbol: str,
    ) -> Optional[BudgetAlert]:
        spent = summary.expenses_by_category.get(budget.category, Decimal("0"))
        exact = percent_of_limit(spent, budget.limit)

        if exact < budget.notification_threshold:
            return None

        severity = get_severity(exact)
        percentage = int(exact.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
        category = budget.category.value

        return BudgetAlert(
            id=f"{category}-{int(now.timestamp() * 1000)}",
            category=budget.category,
            spent=spent,
            limit=budget.limit,
            percentage=percentage,
            severity=severity,
            message=build_alert_message(
                category, severity, spent, budget.limit, percentage, symbol
            ),
            timestamp=now,
        )

    # -------------------------------------------------------------------------
    # Alert set
    # -------------------------------------------------------------------------

    def active_alerts(self) -> list[BudgetAlert]:
        return list(self._alerts)

    def dismiss(self, alert_id: str) -> bool:
        """Drop one alert until the next evaluation."""
        before = len(self._alerts)
        self._alerts = [a for a in self._alerts if a.id != alert_id]
        removed = len(self._alerts) != before

        if removed:
            logger.info("budget_alert_dismissed", alert_id=alert_id)
        self._notify()
        return removed

    def clear_all(self) -> None:
        self._alerts = []
        self._notify()
