"""Storage interface consumed by the budget engine."""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from budgeting.errors import StoreReadFailure, StoreWriteFailure
from logger import get_logger
from models.budget import Budget
from models.category import Category
from models.transaction import Transaction

logger = get_logger()


class BudgetStore(ABC):
    """Asynchronous access to budgets, transactions and categories.

    Implementations raise StoreReadFailure when a listing fails and
    StoreWriteFailure when a write fails. Each write returns the refreshed
    budget list of the affected period.
    """

    @abstractmethod
    async def list_budgets(self, period: str) -> List[Budget]:
        pass

    @abstractmethod
    async def list_transactions(self) -> List[Transaction]:
        """Full transaction history; period filtering is the caller's job."""
        pass

    @abstractmethod
    async def list_categories(self) -> List[Category]:
        pass

    @abstractmethod
    async def create_budget(
        self, category_id: int, amount: Decimal, period: str, notes: Optional[str]
    ) -> List[Budget]:
        pass

    @abstractmethod
    async def update_budget(self, budget: Budget) -> List[Budget]:
        pass

    @abstractmethod
    async def delete_budget(self, budget_id: int) -> List[Budget]:
        pass


class ServicesBudgetStore(BudgetStore):
    """BudgetStore backed by the SQLite services container.

    Args:
        services: Services container providing budgets, transactions and categories.
    """

    def __init__(self, services):
        self.services = services

    async def list_budgets(self, period: str) -> List[Budget]:
        try:
            return self.services.budgets.find_by_month(period)
        except Exception as e:
            logger.error(f"Failed to list budgets for {period}: {e}")
            raise StoreReadFailure("list_budgets") from e

    async def list_transactions(self) -> List[Transaction]:
        try:
            return self.services.transactions.find_all()
        except Exception as e:
            logger.error(f"Failed to list transactions: {e}")
            raise StoreReadFailure("list_transactions") from e

    async def list_categories(self) -> List[Category]:
        try:
            return self.services.categories.find_all()
        except Exception as e:
            logger.error(f"Failed to list categories: {e}")
            raise StoreReadFailure("list_categories") from e

    async def create_budget(
        self, category_id: int, amount: Decimal, period: str, notes: Optional[str]
    ) -> List[Budget]:
        try:
            self.services.budgets.create(category_id, amount, period, notes)
            return self.services.budgets.find_by_month(period)
        except Exception as e:
            logger.error(
                f"Failed to create budget for category {category_id} in {period}: {e}"
            )
            raise StoreWriteFailure("create_budget") from e

    async def update_budget(self, budget: Budget) -> List[Budget]:
        try:
            updated = self.services.budgets.update(budget)
            return self.services.budgets.find_by_month(updated.month)
        except Exception as e:
            logger.error(f"Failed to update budget {budget.id}: {e}")
            raise StoreWriteFailure("update_budget") from e

    async def delete_budget(self, budget_id: int) -> List[Budget]:
        try:
            budget = self.services.budgets.find(budget_id)
            if budget is None:
                raise Exception(f"Budget with ID {budget_id} not found")
            self.services.budgets.delete(budget_id)
            return self.services.budgets.find_by_month(budget.month)
        except Exception as e:
            logger.error(f"Failed to delete budget {budget_id}: {e}")
            raise StoreWriteFailure("delete_budget") from e
