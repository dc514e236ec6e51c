"""Caller-facing budget operations for one store."""

from decimal import Decimal
from typing import List, Optional, Sequence

from budgeting.aggregator import BudgetLine, PeriodAggregate, aggregate, budget_lines
from budgeting.category_filter import DEFAULT_EXCLUDED_CATEGORIES
from budgeting.errors import StoreError
from budgeting.events import BUDGETS_CHANGED, EventBus
from budgeting.periods import parse_period
from budgeting.reconciler import ReconcileResult, reconcile
from budgeting.store import BudgetStore
from logger import get_logger
from models.budget import Budget

logger = get_logger()


def _validate_amount(amount: Decimal) -> None:
    if amount < 0:
        raise ValueError("Budget amount must be non-negative.")


class BudgetManager:
    """Summaries, edits and auto-generation of budgets.

    Every successful write publishes BUDGETS_CHANGED on the event bus with the
    affected month in the payload.

    Args:
        store: Store holding budgets, transactions and categories.
        events: Bus used to announce budget changes.
        excluded: Category-name substrings excluded from auto-generation.
    """

    def __init__(
        self,
        store: BudgetStore,
        events: EventBus,
        excluded: Sequence[str] = DEFAULT_EXCLUDED_CATEGORIES,
    ):
        self.store = store
        self.events = events
        self.excluded = list(excluded)
        # Last figures computed successfully; kept stale when a refresh fails
        self.last_summary: Optional[PeriodAggregate] = None

    async def summary(self, period: str) -> PeriodAggregate:
        """Compute the summary figures of a period from fresh store data."""
        parse_period(period)
        budgets = await self.store.list_budgets(period)
        transactions = await self.store.list_transactions()
        self.last_summary = aggregate(period, budgets, transactions)
        return self.last_summary

    async def lines(self, period: str) -> List[BudgetLine]:
        """Per-budget spend breakdown of a period."""
        parse_period(period)
        budgets = await self.store.list_budgets(period)
        transactions = await self.store.list_transactions()
        return budget_lines(period, budgets, transactions)

    async def add_budget(
        self,
        category_id: int,
        amount: Decimal,
        period: str,
        notes: Optional[str] = None,
    ) -> List[Budget]:
        """Create a budget and return the refreshed budgets of its period."""
        parse_period(period)
        _validate_amount(amount)
        budgets = await self.store.create_budget(category_id, amount, period, notes)
        logger.info(f"Added budget for category {category_id} in {period}: {amount}")
        self._announce(period)
        return budgets

    async def update_budget(self, budget: Budget) -> List[Budget]:
        """Save edits to a budget's category, amount and notes."""
        parse_period(budget.month)
        _validate_amount(budget.amount)
        budgets = await self.store.update_budget(budget)
        logger.info(f"Updated budget {budget.id}")
        self._announce(budget.month)
        return budgets

    async def delete_budget(self, budget: Budget) -> List[Budget]:
        """Delete a budget and return the remaining budgets of its period."""
        parse_period(budget.month)
        budgets = await self.store.delete_budget(budget.id)
        logger.info(f"Deleted budget {budget.id}")
        self._announce(budget.month)
        return budgets

    async def auto_generate(self, period: str) -> ReconcileResult:
        """Run auto-generation for a period, then refresh its summary.

        A failed refresh is logged and leaves `last_summary` stale; the budgets
        written by the run are still reported.
        """
        result = await reconcile(period, self.store, self.excluded, self.events)
        try:
            await self.summary(period)
        except StoreError as e:
            logger.warning(f"Could not refresh the summary for {period}: {e}")
        return result

    def _announce(self, period: str) -> None:
        self.events.publish(BUDGETS_CHANGED, {"month": period})
