"""Transaction service for database operations."""

from typing import List, Optional
from datetime import date
from decimal import Decimal
from models.transaction import Transaction

_TRANSACTION_SELECT_FIELDS = """id, transaction_date, amount, transaction_type,
       category_id, description"""


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db_manager):
        """Initialize the transaction service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def create(
        self,
        transaction_date: date,
        amount: Decimal,
        transaction_type: str,
        category_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> Transaction:
        """Create a single transaction.

        Args:
            transaction_date: Date the transaction happened.
            amount: Signed amount.
            transaction_type: 'expense', 'income' or 'transfer'.
            category_id: Optional category; None leaves it uncategorized.
            description: Optional description.

        Returns:
            The created Transaction with id populated.

        Raises:
            sqlite3.IntegrityError: If category_id does not exist.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO transactions
                    (transaction_date, amount, transaction_type, category_id, description)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    transaction_date.isoformat(),
                    float(amount),
                    transaction_type,
                    category_id,
                    description,
                ),
            )
            conn.commit()

            return Transaction(
                id=cursor.lastrowid,
                transaction_date=transaction_date,
                amount=amount,
                type=transaction_type,
                category_id=category_id,
                description=description,
            )

    def find_all(self) -> List[Transaction]:
        """Get the full transaction history.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS}
                FROM transactions
                ORDER BY transaction_date DESC, id
                """
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def find(self, transaction_id: int) -> Optional[Transaction]:
        """Get a single transaction by ID."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_TRANSACTION_SELECT_FIELDS} FROM transactions WHERE id = ?",
                (transaction_id,),
            )
            row = cursor.fetchone()
            return self._row_to_transaction(row) if row else None

    def get_transactions_by_date_range(
        self, start_date: date, end_date: date
    ) -> List[Transaction]:
        """Get transactions dated between two days, both inclusive.

        Returns:
            List of Transaction objects ordered by date (newest first).
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"""
                SELECT {_TRANSACTION_SELECT_FIELDS}
                FROM transactions
                WHERE transaction_date >= ? AND transaction_date <= ?
                ORDER BY transaction_date DESC, id
                """,
                (start_date.isoformat(), end_date.isoformat()),
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def set_category(self, transaction_id: int, category_id: Optional[int]) -> bool:
        """Assign (or clear, with None) the category of a transaction.

        Returns:
            True if the transaction exists and was updated.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "UPDATE transactions SET category_id = ? WHERE id = ?",
                (category_id, transaction_id),
            )
            conn.commit()
            return cursor.rowcount > 0

    def delete(self, transaction_id: int) -> bool:
        """Delete a transaction by ID.

        Returns:
            True if the transaction was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ?", (transaction_id,)
            )
            conn.commit()
            return cursor.rowcount > 0

    def _row_to_transaction(self, row) -> Transaction:
        return Transaction(
            id=row[0],
            transaction_date=date.fromisoformat(row[1]),
            amount=Decimal(str(row[2])),
            type=row[3],
            category_id=row[4],
            description=row[5],
        )
