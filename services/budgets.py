"""Budget service for database operations."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from models.budget import Budget

_BUDGET_SELECT_FIELDS = "id, category_id, amount, month, notes, created_at"


class BudgetService:
    """Service for managing budgets.

    The schema declares UNIQUE(category_id, month), so a second budget for a
    category in the same month is rejected by the database.
    """

    def __init__(self, db_manager):
        """Initialize the budget service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_by_month(self, month: str) -> List[Budget]:
        """Get all budgets of a period.

        Args:
            month: Period key ('YYYY-MM').

        Returns:
            List of Budget objects ordered by id (creation order).
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BUDGET_SELECT_FIELDS} FROM budgets WHERE month = ? ORDER BY id",
                (month,),
            )
            return [self._row_to_budget(row) for row in cursor.fetchall()]

    def find(self, budget_id: int) -> Optional[Budget]:
        """Get a single budget by ID."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_BUDGET_SELECT_FIELDS} FROM budgets WHERE id = ?",
                (budget_id,),
            )
            row = cursor.fetchone()
            return self._row_to_budget(row) if row else None

    def create(
        self,
        category_id: int,
        amount: Decimal,
        month: str,
        notes: Optional[str] = None,
    ) -> Budget:
        """Create a new budget.

        Args:
            category_id: Category the budget applies to.
            amount: Budgeted amount.
            month: Period key ('YYYY-MM').
            notes: Optional notes.

        Returns:
            The created Budget with id and created_at populated.

        Raises:
            sqlite3.IntegrityError: If the category already has a budget for the
                month, or the category does not exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO budgets (category_id, amount, month, notes) VALUES (?, ?, ?, ?)",
                (category_id, float(amount), month, notes),
            )
            conn.commit()
            budget_id = cursor.lastrowid

            # Fetch the created record to get the created_at timestamp
            cursor = conn.execute(
                f"SELECT {_BUDGET_SELECT_FIELDS} FROM budgets WHERE id = ?",
                (budget_id,),
            )
            return self._row_to_budget(cursor.fetchone())

    def update(self, budget: Budget) -> Budget:
        """Update the category, amount and notes of a budget.

        The id, month and created_at of the stored row are left unchanged.

        Raises:
            Exception: If the budget does not exist.
            sqlite3.IntegrityError: If the new category is already budgeted in the month.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE budgets SET category_id = ?, amount = ?, notes = ? WHERE id = ?",
                (budget.category_id, float(budget.amount), budget.notes, budget.id),
            )
            conn.commit()

            if cursor.rowcount == 0:
                raise Exception(f"Budget with ID {budget.id} not found")

        return self.find(budget.id)

    def delete(self, budget_id: int) -> bool:
        """Delete a budget by ID.

        Returns:
            True if budget was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM budgets WHERE id = ?", (budget_id,))
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_budget(self, row) -> Budget:
        return Budget(
            id=row[0],
            category_id=row[1],
            amount=Decimal(str(row[2])),
            month=row[3],
            notes=row[4],
            created_at=datetime.fromisoformat(row[5]) if row[5] else None,
        )
