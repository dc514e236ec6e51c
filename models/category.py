"""Category model for transaction categorization."""

from dataclasses import dataclass
from typing import Optional

EXPENSE = "expense"


@dataclass
class Category:
    """Represents a category from the category catalog.

    Attributes:
        id: Unique identifier (auto-generated).
        name: Category name (unique).
        type: Classification, 'expense', 'income' or another kind such as 'transfer'.
        description: Optional description of what belongs in this category.
    """

    id: int
    name: str
    type: str
    description: Optional[str] = None

    @property
    def is_expense(self) -> bool:
        return self.type == EXPENSE
