"""Category service for database operations."""

from typing import List, Optional
from models.category import Category

_CATEGORY_SELECT_FIELDS = "id, name, category_type, description"


def _row_to_category(row) -> Category:
    return Category(id=row[0], name=row[1], type=row[2], description=row[3])


class CategoryService:
    """Service for managing the category catalog."""

    def __init__(self, db_manager):
        """Initialize the category service.

        Args:
            db_manager: Database manager instance for database operations.
        """
        self.db_manager = db_manager

    def find_all(self) -> List[Category]:
        """Get all categories from the database.

        Returns:
            List of Category objects, ordered by name.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories ORDER BY name"
            )
            return [_row_to_category(row) for row in cursor.fetchall()]

    def find(self, category_id: int) -> Optional[Category]:
        """Get a single category by ID.

        Args:
            category_id: The category ID to find.

        Returns:
            Category object if found, None otherwise.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE id = ?",
                (category_id,),
            )
            row = cursor.fetchone()
            return _row_to_category(row) if row else None

    def find_by_name(self, name: str) -> Optional[Category]:
        """Get a single category by its exact name."""
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                f"SELECT {_CATEGORY_SELECT_FIELDS} FROM categories WHERE name = ?",
                (name,),
            )
            row = cursor.fetchone()
            return _row_to_category(row) if row else None

    def create(
        self, name: str, category_type: str, description: Optional[str] = None
    ) -> Category:
        """Create a new category.

        Args:
            name: Category name (must be unique).
            category_type: 'expense', 'income' or another classification.
            description: Optional description of the category.

        Returns:
            The created Category object with id populated.

        Raises:
            sqlite3.IntegrityError: If the name is already taken.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute(
                "INSERT INTO categories (name, category_type, description) VALUES (?, ?, ?)",
                (name, category_type, description),
            )
            conn.commit()

            return Category(
                id=cursor.lastrowid,
                name=name,
                type=category_type,
                description=description,
            )

    def delete(self, category_id: int) -> bool:
        """Delete a category by ID.

        Returns:
            True if category was deleted, False if not found.
        """
        with self.db_manager.connect() as conn:
            cursor = conn.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
            return cursor.rowcount > 0
