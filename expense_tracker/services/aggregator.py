"""
Expense Aggregation

DESIGN DECISION: Summaries are DERIVED, never stored.
Every call re-reads the record store and recomputes totals, the category
breakdown and the six-month trend from scratch. There is no cache to go
stale and no incremental bookkeeping to get wrong.

The trend is an O(months x records) scan. At personal scale that is a few
thousand comparisons.
"""

from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from expense_tracker.log import get_logger
from expense_tracker.models.chat import CategoryShare, ExpenseContext, RecentTransaction
from expense_tracker.models.transaction import (
    Category,
    ExpenseSummary,
    MonthlyBudget,
    MonthlyTrendPoint,
    Transaction,
)
from expense_tracker.services.dates import month_bounds, month_label, shift_month
from expense_tracker.services.records import RecordStore, sum_amounts


logger = get_logger(__name__)

TREND_MONTHS = 6

# Built-in monthly limits shown on the dashboard. Zero means "no limit".
DEFAULT_BUDGET_LIMITS: dict[Category, Decimal] = {
    Category.FOOD: Decimal("800"),
    Category.TRANSPORTATION: Decimal("300"),
    Category.ENTERTAINMENT: Decimal("200"),
    Category.UTILITIES: Decimal("150"),
    Category.HEALTHCARE: Decimal("100"),
    Category.SHOPPING: Decimal("400"),
    Category.EDUCATION: Decimal("100"),
    Category.TRAVEL: Decimal("500"),
    Category.HOUSING: Decimal("1200"),
    Category.INSURANCE: Decimal("200"),
    Category.SAVINGS: Decimal("1000"),
    Category.INVESTMENT: Decimal("500"),
    Category.INCOME: Decimal("0"),
    Category.OTHER: Decimal("200"),
}


class ExpenseAggregator:
    """
    Computes period summaries from the record store.

    Args:
        records: The record store to read from
        today: Clock returning the current date (injectable for tests)
    """

    def __init__(
        self,
        records: RecordStore,
        today: Callable[[], date] = date.today,
    ):
        self._records = records
        self._today = today

    def summarize(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ExpenseSummary:
        """
        Summarize a period.

        If either bound is missing, the current calendar month is used.
        Income records count towards total_income only; the category
        breakdown contains expenses only.
        """
        if start_date is None or end_date is None:
            today = self._today()
            start_date, end_date = month_bounds(today.year, today.month)

        all_records = self._records.get_all()
        in_range = [r for r in all_records if start_date <= r.date <= end_date]

        expenses = [r for r in in_range if r.is_expense]
        income = [r for r in in_range if r.is_income]

        total_expenses = sum_amounts(expenses)
        total_income = sum_amounts(income)

        by_category: dict[Category, Decimal] = {}
        for record in expenses:
            by_category[record.category] = (
                by_category.get(record.category, Decimal("0")) + record.amount
            )

        summary = ExpenseSummary(
            total_expenses=total_expenses,
            total_income=total_income,
            net_amount=total_income - total_expenses,
            expenses_by_category=by_category,
            monthly_trend=self._monthly_trend(all_records),
        )

        logger.debug(
            "summary_computed",
            start=start_date.isoformat(),
            end=end_date.isoformat(),
            records=len(in_range),
        )
        return summary

    def _monthly_trend(self, records: list[Transaction]) -> list[MonthlyTrendPoint]:
        """Trailing six calendar months, oldest first, current month last."""
        today = self._today()
        points = []

        for offset in range(TREND_MONTHS - 1, -1, -1):
            year, month = shift_month(today.year, today.month, -offset)
            start, end = month_bounds(year, month)
            month_records = [r for r in records if start <= r.date <= end]

            points.append(MonthlyTrendPoint(
                month=month_label(year, month),
                expenses=sum_amounts([r for r in month_records if r.is_expense]),
                income=sum_amounts([r for r in month_records if r.is_income]),
            ))

        return points

    def monthly_budgets(self) -> list[MonthlyBudget]:
        """Current-month spend against the built-in default limits."""
        current = self._records.get_current_month(self._today())
        budgets = []

        for category, limit in DEFAULT_BUDGET_LIMITS.items():
            if limit <= 0:
                continue
            spent = sum_amounts(
                [r for r in current if r.category == category and r.is_expense]
            )
            budgets.append(MonthlyBudget(
                category=category,
                limit=limit,
                spent=spent,
                percentage=float(spent / limit * 100),
            ))

        return budgets

    def expense_context(
        self,
        summary: Optional[ExpenseSummary] = None,
        currency_symbol: str = "$",
        top_n: int = 5,
        recent_n: int = 10,
    ) -> ExpenseContext:
        """
        Build the chat assistant's financial context.

        Top categories are ranked by amount with their share of total
        expenses; recent transactions are the newest by occurrence date.
        """
        if summary is None:
            summary = self.summarize()
        total = summary.total_expenses

        shares = [
            CategoryShare(
                category=category.value,
                amount=amount,
                percentage=float(amount / total * 100) if total > 0 else 0.0,
            )
            for category, amount in summary.expenses_by_category.items()
        ]
        shares.sort(key=lambda s: s.amount, reverse=True)

        recent = sorted(self._records.get_all(), key=lambda r: r.date, reverse=True)

        return ExpenseContext(
            total_expenses=summary.total_expenses,
            total_income=summary.total_income,
            top_categories=shares[:top_n],
            recent_transactions=[
                RecentTransaction(
                    description=r.description,
                    amount=r.amount,
                    category=r.category.value,
                    date=r.date.isoformat(),
                )
                for r in recent[:recent_n]
            ],
            currency_symbol=currency_symbol,
        )
