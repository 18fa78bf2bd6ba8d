"""
Tests for budget alert evaluation and the alert subscription.
"""

import pytest
from decimal import Decimal

from expense_tracker.models import AlertSeverity, Category, ExpenseSummary, get_currency
from expense_tracker.services import get_severity

from conftest import NOW


def summary_with(**spent):
    return ExpenseSummary(
        expenses_by_category={Category(k): Decimal(str(v)) for k, v in spent.items()},
    )


@pytest.fixture
def food_limit(settings_service):
    return settings_service.add_budget_limit({
        "category": "food",
        "limit": Decimal("100"),
        "notification_threshold": Decimal("80"),
    })


class TestSeverity:
    """Tests for the severity tiers."""

    @pytest.mark.parametrize("percentage,expected", [
        (0, AlertSeverity.WARNING),
        (89.99, AlertSeverity.WARNING),
        (90, AlertSeverity.DANGER),
        (99.99, AlertSeverity.DANGER),
        (100, AlertSeverity.CRITICAL),
        (250, AlertSeverity.CRITICAL),
    ])
    def test_tiers(self, percentage, expected):
        """Test tier boundaries at 90 and 100."""
        assert get_severity(percentage) == expected


class TestEvaluate:
    """Tests for BudgetAlertManager.evaluate."""

    def test_below_threshold_no_alert(self, alert_manager, food_limit):
        """Test that 79% of the limit raises nothing."""
        assert alert_manager.evaluate(summary_with(food=79)) == []

    def test_at_threshold_warning(self, alert_manager, food_limit):
        """Test that reaching the threshold raises a warning."""
        [alert] = alert_manager.evaluate(summary_with(food=80))
        assert alert.severity == AlertSeverity.WARNING
        assert alert.percentage == 80
        assert alert.message == "⚡ You've used 80% of your food budget. $20.00 remaining."

    def test_danger_message(self, alert_manager, food_limit):
        """Test the danger tier message."""
        [alert] = alert_manager.evaluate(summary_with(food=95))
        assert alert.severity == AlertSeverity.DANGER
        assert alert.message == "🚨 Almost at your food budget limit! Only $5.00 remaining."

    def test_at_limit_critical(self, alert_manager, food_limit):
        """Test that spending the full limit is critical."""
        [alert] = alert_manager.evaluate(summary_with(food=100))
        assert alert.severity == AlertSeverity.CRITICAL

    def test_overspend_message(self, alert_manager, food_limit):
        """Test the critical message states the overspend."""
        [alert] = alert_manager.evaluate(summary_with(food="150.25"))
        assert alert.message == "⚠️ You've exceeded your food budget by $50.25!"
        assert alert.percentage == 150

    def test_alert_fields(self, alert_manager, food_limit):
        """Test id, amounts and timestamp of an alert."""
        [alert] = alert_manager.evaluate(summary_with(food=85))
        assert alert.id == f"food-{int(NOW.timestamp() * 1000)}"
        assert alert.category == Category.FOOD
        assert alert.spent == Decimal("85")
        assert alert.limit == Decimal("100")
        assert alert.timestamp == NOW

    def test_percentage_rounds_half_up(self, alert_manager, food_limit):
        """Test rounding while the tier uses the exact value."""
        [alert] = alert_manager.evaluate(summary_with(food="89.5"))
        assert alert.percentage == 90
        assert alert.severity == AlertSeverity.WARNING

    def test_missing_category_counts_as_zero(self, alert_manager, settings_service):
        """Test that a zero threshold alerts even without spend."""
        settings_service.add_budget_limit({
            "category": "travel",
            "limit": Decimal("50"),
            "notification_threshold": Decimal("0"),
        })
        [alert] = alert_manager.evaluate(summary_with(food=10))
        assert alert.category == Category.TRAVEL
        assert alert.percentage == 0

    def test_inactive_limits_are_skipped(self, alert_manager, settings_service, food_limit):
        """Test that inactive limits never alert."""
        settings_service.update_budget_limit(food_limit.id, {"is_active": False})
        assert alert_manager.evaluate(summary_with(food=500)) == []

    def test_one_alert_per_limit(self, alert_manager, settings_service, food_limit):
        """Test several limits over threshold."""
        settings_service.add_budget_limit({"category": "travel", "limit": Decimal("10")})
        alerts = alert_manager.evaluate(summary_with(food=90, travel=20))
        assert [a.category for a in alerts] == [Category.FOOD, Category.TRAVEL]

    def test_reminders_off_yields_nothing(self, alert_manager, settings_service, food_limit):
        """Test that disabled reminders produce an empty set."""
        settings_service.update_setting("budget_reminders", False)
        assert alert_manager.evaluate(summary_with(food=500)) == []
        assert alert_manager.active_alerts() == []

    def test_uses_user_currency_symbol(self, alert_manager, settings_service, food_limit):
        """Test that messages use the chosen currency."""
        settings_service.update_setting("currency", get_currency("EUR"))
        [alert] = alert_manager.evaluate(summary_with(food=80))
        assert alert.message.endswith("€20.00 remaining.")

    def test_evaluation_replaces_previous_set(self, alert_manager, food_limit):
        """Test that each evaluation starts from scratch."""
        alert_manager.evaluate(summary_with(food=90))
        alert_manager.evaluate(summary_with(food=10))
        assert alert_manager.active_alerts() == []


class TestAlertSet:
    """Tests for subscriptions, dismissal and clearing."""

    def test_subscribers_receive_every_evaluation(self, alert_manager, food_limit):
        """Test that evaluate notifies with the new set."""
        received = []
        alert_manager.subscribe(received.append)

        alert_manager.evaluate(summary_with(food=90))
        alert_manager.evaluate(summary_with(food=0))

        assert len(received) == 2
        assert len(received[0]) == 1
        assert received[1] == []

    def test_unsubscribe_callable(self, alert_manager, food_limit):
        """Test the function returned by subscribe."""
        received = []
        unsubscribe = alert_manager.subscribe(received.append)
        unsubscribe()

        alert_manager.evaluate(summary_with(food=90))
        assert received == []

    def test_unsubscribe_method(self, alert_manager, food_limit):
        """Test unsubscribe by callback, including unknown callbacks."""
        received = []
        alert_manager.subscribe(received.append)
        alert_manager.unsubscribe(received.append)
        alert_manager.unsubscribe(print)

        alert_manager.evaluate(summary_with(food=90))
        assert received == []

    def test_dismiss(self, alert_manager, food_limit):
        """Test dismissing removes the alert and notifies."""
        [alert] = alert_manager.evaluate(summary_with(food=90))
        received = []
        alert_manager.subscribe(received.append)

        assert alert_manager.dismiss(alert.id) is True
        assert alert_manager.active_alerts() == []
        assert received == [[]]
        assert alert_manager.dismiss(alert.id) is False

    def test_dismissed_alert_returns_on_next_evaluation(self, alert_manager, food_limit):
        """Test that dismissal lasts only until the next evaluation."""
        [alert] = alert_manager.evaluate(summary_with(food=90))
        alert_manager.dismiss(alert.id)

        assert len(alert_manager.evaluate(summary_with(food=90))) == 1

    def test_clear_all(self, alert_manager, food_limit):
        """Test clearing the set notifies subscribers."""
        alert_manager.evaluate(summary_with(food=90))
        received = []
        alert_manager.subscribe(received.append)

        alert_manager.clear_all()
        assert alert_manager.active_alerts() == []
        assert received == [[]]
