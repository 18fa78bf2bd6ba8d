"""
Savings Suggestions

Simple rules over the transaction history. Each rule looks for one
spending pattern and, if it is present, estimates what could be saved.
"""

from decimal import Decimal

from expense_tracker.models.transaction import Category, Transaction
from expense_tracker.models.user_settings import (
    SavingSuggestion,
    SuggestionDifficulty,
    SuggestionType,
)
from expense_tracker.services.records import sum_amounts
from expense_tracker.services.user_settings import SettingsService


SUBSCRIPTION_KEYWORDS = ("subscription", "netflix", "spotify")
SUBSCRIPTION_SAVING_RATE = Decimal("0.3")

MEAL_PREP_MIN_RECORDS = 15
MEAL_PREP_SAVING_RATE = Decimal("0.4")


class SavingsAdvisor:
    def __init__(self, settings_service: SettingsService):
        self._settings = settings_service

    def suggest(self, transactions: list[Transaction]) -> list[SavingSuggestion]:
        """Suggestions for the given records; empty when turned off in settings."""
        if not self._settings.get_settings().savings_suggestions:
            return []

        suggestions = []

        subscriptions = [
            t for t in transactions
            if any(k in t.description.lower() for k in SUBSCRIPTION_KEYWORDS)
        ]
        if subscriptions:
            suggestions.append(SavingSuggestion(
                id="sub-review",
                title="Review Subscriptions",
                description=(
                    f"You have {len(subscriptions)} subscription-like expenses. "
                    "Consider canceling the ones you no longer use."
                ),
                category="subscriptions",
                potential_saving=sum_amounts(subscriptions) * SUBSCRIPTION_SAVING_RATE,
                difficulty=SuggestionDifficulty.EASY,
                type=SuggestionType.SUBSCRIPTION,
            ))

        food = [t for t in transactions if t.category == Category.FOOD]
        if len(food) > MEAL_PREP_MIN_RECORDS:
            suggestions.append(SavingSuggestion(
                id="meal-prep",
                title="Try Meal Prepping",
                description=(
                    "You eat out frequently. Meal prepping could "
                    "significantly reduce food costs."
                ),
                category="food",
                potential_saving=sum_amounts(food) * MEAL_PREP_SAVING_RATE,
                difficulty=SuggestionDifficulty.MEDIUM,
                type=SuggestionType.HABIT,
            ))

        return suggestions
