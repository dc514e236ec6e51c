"""Period summary figures computed from budgets and transactions.

Everything here is pure: the same inputs always produce the same figures and
nothing is read from or written to the store.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List

from budgeting.periods import period_of
from models.budget import Budget
from models.transaction import Transaction

WARNING_PERCENT = Decimal("80")
OVER_PERCENT = Decimal("100")


def progress_percent(spent: Decimal, budgeted: Decimal) -> Decimal:
    """Percent of a budget used. Zero when nothing is budgeted."""
    if budgeted == 0:
        return Decimal("0")
    return spent / budgeted * 100


def _status(percent: Decimal) -> str:
    if percent >= OVER_PERCENT:
        return "over"
    if percent >= WARNING_PERCENT:
        return "warning"
    return "ok"


@dataclass(frozen=True)
class PeriodAggregate:
    """Summary figures for one period."""

    month: str
    total_budget: Decimal
    total_spent: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.total_budget - self.total_spent

    @property
    def progress_percent(self) -> Decimal:
        return progress_percent(self.total_spent, self.total_budget)

    @property
    def status(self) -> str:
        return _status(self.progress_percent)


@dataclass(frozen=True)
class BudgetLine:
    """One budget of a period alongside what was spent in its category."""

    budget: Budget
    spent: Decimal

    @property
    def remaining(self) -> Decimal:
        return self.budget.amount - self.spent

    @property
    def progress_percent(self) -> Decimal:
        return progress_percent(self.spent, self.budget.amount)

    @property
    def status(self) -> str:
        return _status(self.progress_percent)


def is_tracked_spend(transaction: Transaction, period: str) -> bool:
    """Check whether a transaction counts as spend for a period.

    Only categorized expenses dated inside the period count. Uncategorized
    expenses are left out of spend tracking on purpose.
    """
    return (
        transaction.is_expense
        and transaction.is_categorized
        and period_of(transaction.transaction_date) == period
    )


def spending_by_category(
    period: str, transactions: Iterable[Transaction]
) -> Dict[int, Decimal]:
    """Sum absolute expense amounts per category for a period.

    Args:
        period: Period key ('YYYY-MM').
        transactions: Any transactions; those outside the period are ignored.

    Returns:
        Mapping of category_id to total spend. Categories without spend are absent.
    """
    totals: Dict[int, Decimal] = defaultdict(Decimal)
    for transaction in transactions:
        if is_tracked_spend(transaction, period):
            totals[transaction.category_id] += abs(transaction.amount)
    return dict(totals)


def aggregate(
    period: str, budgets: Iterable[Budget], transactions: Iterable[Transaction]
) -> PeriodAggregate:
    """Compute the summary figures for a period.

    Args:
        period: Period key ('YYYY-MM').
        budgets: Budgets of any period; only those tagged with `period` are summed.
        transactions: Full transaction history.

    Returns:
        PeriodAggregate with total budget and total spent for the period.
    """
    total_budget = sum(
        (budget.amount for budget in budgets if budget.month == period), Decimal("0")
    )
    total_spent = sum(
        (
            abs(transaction.amount)
            for transaction in transactions
            if is_tracked_spend(transaction, period)
        ),
        Decimal("0"),
    )
    return PeriodAggregate(
        month=period, total_budget=total_budget, total_spent=total_spent
    )


def budget_lines(
    period: str, budgets: Iterable[Budget], transactions: Iterable[Transaction]
) -> List[BudgetLine]:
    """Pair every budget of a period with its category's spend, in budget order."""
    spending = spending_by_category(period, transactions)
    return [
        BudgetLine(budget=budget, spent=spending.get(budget.category_id, Decimal("0")))
        for budget in budgets
        if budget.month == period
    ]
