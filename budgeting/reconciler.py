"""Auto-generation of a period's budgets.

Two passes run in order against the target period P:

1. Carry-forward: every budget of the previous period P' whose category has
   no budget in P is copied into P with the same amount and notes.
2. Spend-seeded fill: every eligible category still without a budget in P
   gets one, sized at that category's spend in P' (0 when it had none).

Existing budgets in P are never modified. Writes go through the store one at
a time, so pass 2 always sees what pass 1 wrote.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Set

from budgeting.aggregator import spending_by_category
from budgeting.category_filter import DEFAULT_EXCLUDED_CATEGORIES, eligible_categories
from budgeting.errors import ReconciliationError
from budgeting.events import BUDGETS_CHANGED, EventBus
from budgeting.periods import parse_period, previous_period
from budgeting.store import BudgetStore
from logger import get_logger
from models.budget import Budget
from models.category import Category

logger = get_logger()


@dataclass
class ReconcileResult:
    """Counts reported by an auto-generate run.

    Attributes:
        month: Target period.
        created: Budgets inserted by the spend-seeded pass.
        skipped: Eligible categories that already had a budget at that pass.
        carried_forward: Budgets copied from the previous period. Not part of
            `created`, which only reflects the spend-seeded pass.
    """

    month: str
    created: int = 0
    skipped: int = 0
    carried_forward: int = 0

    @property
    def changed(self) -> bool:
        return self.created > 0 or self.carried_forward > 0

    def message(self) -> str:
        message = f"Auto-generate completed: Created {self.created} new budget(s)"
        if self.skipped > 0:
            message += f", skipped {self.skipped} existing budget(s)"
        return message


async def _carry_forward(
    period: str,
    store: BudgetStore,
    current: List[Budget],
    prior: List[Budget],
    result: ReconcileResult,
) -> None:
    budgeted: Set[int] = {budget.category_id for budget in current}
    for budget in prior:
        if budget.category_id in budgeted:
            continue
        await store.create_budget(budget.category_id, budget.amount, period, budget.notes)
        budgeted.add(budget.category_id)
        result.carried_forward += 1
        logger.debug(
            f"Carried forward category {budget.category_id} ({budget.amount}) into {period}"
        )


async def _fill_from_spend(
    period: str,
    store: BudgetStore,
    current: List[Budget],
    categories: List[Category],
    spending: Dict[int, Decimal],
    result: ReconcileResult,
) -> None:
    budgeted: Set[int] = {budget.category_id for budget in current}
    for category in categories:
        if category.id in budgeted:
            result.skipped += 1
            logger.debug(f"Skipped '{category.name}', already budgeted in {period}")
            continue
        amount = spending.get(category.id, Decimal("0"))
        await store.create_budget(category.id, amount, period, "")
        budgeted.add(category.id)
        result.created += 1
        logger.debug(f"Created budget for '{category.name}' in {period}: {amount}")


async def reconcile(
    period: str,
    store: BudgetStore,
    excluded: Sequence[str] = DEFAULT_EXCLUDED_CATEGORIES,
    events: Optional[EventBus] = None,
) -> ReconcileResult:
    """Generate missing budgets for a period.

    Args:
        period: Target period key ('YYYY-MM').
        store: Store to read from and write budgets to.
        excluded: Category-name substrings that are never auto-budgeted.
        events: Optional bus; BUDGETS_CHANGED is published when anything was written.

    Returns:
        ReconcileResult with the counts of the run.

    Raises:
        ValueError: If the period key is malformed. Nothing is read or written.
        ReconciliationError: If any store operation fails. Budgets written
            before the failure remain in place.
    """
    parse_period(period)
    prior_period = previous_period(period)
    result = ReconcileResult(month=period)

    try:
        current = await store.list_budgets(period)
        prior = await store.list_budgets(prior_period)
        if prior:
            logger.info(
                f"Carrying forward up to {len(prior)} budget(s) from {prior_period} to {period}"
            )
            await _carry_forward(period, store, current, prior, result)
        else:
            logger.info(f"No budgets in {prior_period} to carry forward")

        # Re-read so the fill pass observes the carried-forward budgets
        current = await store.list_budgets(period)
        transactions = await store.list_transactions()
        categories = eligible_categories(await store.list_categories(), excluded)
        spending = spending_by_category(prior_period, transactions)

        logger.info(
            f"Seeding {period} from {prior_period} spend across "
            f"{len(categories)} eligible categories"
        )
        await _fill_from_spend(period, store, current, categories, spending, result)
    except Exception as e:
        operation = getattr(e, "operation", "reconcile")
        logger.error(f"Auto-generate for {period} failed during '{operation}': {e}")
        raise ReconciliationError(operation, result) from e
    finally:
        if events is not None and result.changed:
            events.publish(
                BUDGETS_CHANGED,
                {
                    "month": period,
                    "created": result.created,
                    "carried_forward": result.carried_forward,
                },
            )

    logger.info(
        f"Auto-generate for {period}: created {result.created}, "
        f"carried forward {result.carried_forward}, skipped {result.skipped}"
    )
    return result
