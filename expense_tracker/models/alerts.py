"""
Budget Alert Models

Alerts are derived entities: they are regenerated on every evaluation and
never persisted.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field

from expense_tracker.models.transaction import Category, utcnow


class AlertSeverity(str, Enum):
    """
    Severity tier, derived solely from percentage of the limit spent.

    WARNING:  threshold <= percentage < 90
    DANGER:   90 <= percentage < 100
    CRITICAL: percentage >= 100
    """
    WARNING = "warning"
    DANGER = "danger"
    CRITICAL = "critical"


class BudgetAlert(BaseModel):
    """A budget limit whose notification threshold has been reached."""

    id: str = Field(
        ...,
        description="'<category>-<epoch millis>' at generation time"
    )
    category: Category
    spent: Decimal
    limit: Decimal
    percentage: int = Field(
        ...,
        ge=0,
        description="Percentage of the limit spent, rounded half-up"
    )
    severity: AlertSeverity
    message: str
    timestamp: datetime = Field(default_factory=utcnow)
