"""Selection of categories eligible for auto-generated budgets."""

from typing import Iterable, List, Sequence

from models.category import Category

# Administrative categories that never get a spend-seeded budget. Matched as
# case-sensitive substrings of the category name.
DEFAULT_EXCLUDED_CATEGORIES = (
    "Reimbursement",
    "Reimbursement [G]",
    "Reimbursement [U]",
    "Reimbursement [E]",
    "Transfer",
    "Adjust",
)


def is_eligible(
    category: Category, excluded: Sequence[str] = DEFAULT_EXCLUDED_CATEGORIES
) -> bool:
    """Check whether a category may receive an auto-generated budget.

    A category is eligible when its type is exactly 'expense' and none of the
    exclusion strings occurs anywhere in its name.
    """
    if not category.is_expense:
        return False
    return not any(pattern in category.name for pattern in excluded)


def eligible_categories(
    categories: Iterable[Category],
    excluded: Sequence[str] = DEFAULT_EXCLUDED_CATEGORIES,
) -> List[Category]:
    """Filter categories down to those eligible for auto-generation.

    Args:
        categories: Full category catalog.
        excluded: Category-name substrings to exclude.

    Returns:
        Eligible categories, in their original order.
    """
    return [category for category in categories if is_eligible(category, excluded)]
