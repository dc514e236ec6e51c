from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class Transaction:
    id: int
    transaction_date: date
    amount: Decimal  # signed, expenses may be stored negative
    type: str  # 'income', 'expense', or 'transfer'
    category_id: Optional[int] = None  # None means uncategorized
    description: Optional[str] = None

    @property
    def is_expense(self) -> bool:
        return self.type == "expense"

    @property
    def is_categorized(self) -> bool:
        return self.category_id is not None
