"""Helper utilities for tests."""

from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional
import sqlite3

from budgeting.errors import StoreReadFailure, StoreWriteFailure
from budgeting.store import BudgetStore
from cli.migrate import apply_pending
from models.budget import Budget
from models.category import Category
from models.transaction import Transaction

_WRITE_OPERATIONS = {"create_budget", "update_budget", "delete_budget"}


def run_migrations(conn: sqlite3.Connection, migrations_dir: Path) -> None:
    """Run all SQL migrations in order.

    Args:
        conn: SQLite connection to run migrations against.
        migrations_dir: Path to directory containing .sql migration files.
    """
    apply_pending(conn, migrations_dir)


def budget(id, category_id, amount, month, notes=None) -> Budget:
    return Budget(
        id=id,
        category_id=category_id,
        amount=Decimal(str(amount)),
        month=month,
        notes=notes,
    )


def expense(id, day: str, amount, category_id=None, type="expense") -> Transaction:
    return Transaction(
        id=id,
        transaction_date=date.fromisoformat(day),
        amount=Decimal(str(amount)),
        type=type,
        category_id=category_id,
    )


def category(id, name, type="expense") -> Category:
    return Category(id=id, name=name, type=type)


class InMemoryBudgetStore(BudgetStore):
    """BudgetStore over plain lists, recording every call.

    Set `fail_on[operation] = n` to make the n-th call of that operation
    raise the matching store failure.

    Unlike the SQLite store it does not reject duplicate budgets, so tests
    can see whether the caller itself avoided writing them.
    """

    def __init__(
        self,
        budgets: Optional[List[Budget]] = None,
        transactions: Optional[List[Transaction]] = None,
        categories: Optional[List[Category]] = None,
    ):
        self.budgets = list(budgets or [])
        self.transactions = list(transactions or [])
        self.categories = list(categories or [])
        self.calls: List[str] = []
        self.fail_on: Dict[str, int] = {}
        self._next_id = max((b.id for b in self.budgets), default=0) + 1

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        limit = self.fail_on.get(operation)
        if limit is not None and self.calls.count(operation) >= limit:
            if operation in _WRITE_OPERATIONS:
                raise StoreWriteFailure(operation)
            raise StoreReadFailure(operation)

    def for_month(self, period: str) -> List[Budget]:
        return [b for b in self.budgets if b.month == period]

    async def list_budgets(self, period):
        self._record("list_budgets")
        return self.for_month(period)

    async def list_transactions(self):
        self._record("list_transactions")
        return list(self.transactions)

    async def list_categories(self):
        self._record("list_categories")
        return list(self.categories)

    async def create_budget(self, category_id, amount, period, notes):
        self._record("create_budget")
        self.budgets.append(
            Budget(
                id=self._next_id,
                category_id=category_id,
                amount=amount,
                month=period,
                notes=notes,
            )
        )
        self._next_id += 1
        return self.for_month(period)

    async def update_budget(self, budget):
        self._record("update_budget")
        for i, existing in enumerate(self.budgets):
            if existing.id == budget.id:
                self.budgets[i] = budget
                return self.for_month(existing.month)
        raise StoreWriteFailure("update_budget")

    async def delete_budget(self, budget_id):
        self._record("delete_budget")
        for existing in self.budgets:
            if existing.id == budget_id:
                self.budgets.remove(existing)
                return self.for_month(existing.month)
        raise StoreWriteFailure("delete_budget")
