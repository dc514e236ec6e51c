"""Budget model for a per-category monthly spending limit."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Budget:
    """A spending budget for one category in one period.

    Attributes:
        id: Unique identifier (auto-generated).
        category_id: Category this budget limits.
        amount: Budgeted amount, never negative.
        month: Period key in 'YYYY-MM' format.
        notes: Optional free-form notes.
        created_at: Timestamp when the budget was created.
    """

    id: int
    category_id: int
    amount: Decimal
    month: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
