#!/usr/bin/env python3

import asyncio
import argparse
import sys
from decimal import Decimal, InvalidOperation

from budgeting.errors import ReconciliationError, StoreError
from budgeting.periods import current_period, parse_period
from logger import get_logger

logger = get_logger()


def _period_arg(value: str) -> str:
    try:
        parse_period(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def _amount_arg(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"Invalid amount: {value}")
    if amount < 0:
        raise argparse.ArgumentTypeError("Budget amount must be non-negative")
    return amount


def _log_summary(summary):
    logger.info(f"\nBudget summary for {summary.month}")
    logger.info("=" * 80)
    logger.info(f"Total budget:     {summary.total_budget:.2f}")
    logger.info(f"Total spent:      {summary.total_spent:.2f}")
    logger.info(f"Remaining budget: {summary.remaining:.2f}")
    logger.info(f"Progress:         {round(summary.progress_percent)}% ({summary.status})")


def cmd_list(args, services):
    """List the budgets of a month with what was spent against each."""
    lines = asyncio.run(services.budget_manager.lines(args.month))

    if not lines:
        logger.info(f"No budgets found for {args.month}.")
        return

    category_names = {c.id: c.name for c in services.categories.find_all()}

    logger.info(f"\nBudgets for {args.month}:")
    logger.info("=" * 80)
    for line in lines:
        budget = line.budget
        name = category_names.get(budget.category_id, "Unknown")
        logger.info(f"ID: {budget.id}  {name} (category {budget.category_id})")
        logger.info(
            f"  Budget: {budget.amount:.2f}  Spent: {line.spent:.2f}  "
            f"Remaining: {line.remaining:.2f}  "
            f"{round(line.progress_percent)}% ({line.status})"
        )
        if budget.notes:
            logger.info(f"  Notes: {budget.notes}")
        logger.info("-" * 80)

    logger.info(f"\nTotal budgets: {len(lines)}")


def cmd_summary(args, services):
    """Show total budget, spent, remaining and progress for a month."""
    summary = asyncio.run(services.budget_manager.summary(args.month))
    _log_summary(summary)


def cmd_add(args, services):
    """Add a budget for a category."""
    category = services.categories.find(args.category_id)
    if not category:
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    try:
        asyncio.run(
            services.budget_manager.add_budget(
                category.id, args.amount, args.month, args.notes
            )
        )
    except StoreError as e:
        logger.error(f"Failed to add budget: {e}")
        sys.exit(1)

    logger.info(f"✓ Budget for '{category.name}' in {args.month} added successfully.")


def cmd_update(args, services):
    """Update the amount, notes or category of a budget."""
    budget = services.budgets.find(args.budget_id)
    if not budget:
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)

    if args.amount is not None:
        budget.amount = args.amount
    if args.notes is not None:
        budget.notes = args.notes
    if args.category_id is not None:
        if not services.categories.find(args.category_id):
            logger.error(f"Category with ID {args.category_id} not found.")
            sys.exit(1)
        budget.category_id = args.category_id

    try:
        asyncio.run(services.budget_manager.update_budget(budget))
    except StoreError as e:
        logger.error(f"Failed to update budget: {e}")
        sys.exit(1)

    logger.info(f"✓ Budget {budget.id} updated successfully.")


def cmd_delete(args, services):
    """Delete a budget by ID."""
    budget = services.budgets.find(args.budget_id)
    if not budget:
        logger.error(f"Budget with ID {args.budget_id} not found.")
        sys.exit(1)

    try:
        asyncio.run(services.budget_manager.delete_budget(budget))
    except StoreError as e:
        logger.error(f"Failed to delete budget: {e}")
        sys.exit(1)

    logger.info(f"✓ Budget {budget.id} deleted successfully.")


def cmd_auto_generate(args, services):
    """Carry forward last month's budgets and seed the rest from last month's spend."""
    manager = services.budget_manager
    try:
        result = asyncio.run(manager.auto_generate(args.month))
    except ReconciliationError as e:
        logger.error(f"Auto-generate failed: {e}")
        sys.exit(1)

    logger.info(result.message())
    if result.carried_forward:
        logger.info(
            f"Carried forward {result.carried_forward} budget(s) from the previous month"
        )
    summary = manager.last_summary
    if summary is not None and summary.month == args.month:
        _log_summary(summary)
    else:
        logger.warning("Summary could not be refreshed; run 'budgets summary' to retry.")


def setup_parser(subparsers):
    """Setup budgets subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "budgets",
        help="Manage monthly budgets",
        description="Review, edit and auto-generate monthly category budgets",
    )

    budgets_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available budget commands",
        dest="subcommand",
        required=True,
    )

    def add_month_argument(subparser):
        subparser.add_argument(
            "--month",
            type=_period_arg,
            default=current_period(),
            help="Month in YYYY-MM format (default: current month)",
        )

    # budgets list
    list_parser = budgets_subparsers.add_parser(
        "list", help="List budgets of a month with spending"
    )
    add_month_argument(list_parser)
    list_parser.set_defaults(func=cmd_list)

    # budgets summary
    summary_parser = budgets_subparsers.add_parser(
        "summary", help="Show totals and progress for a month"
    )
    add_month_argument(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    # budgets add
    add_parser = budgets_subparsers.add_parser("add", help="Add a budget")
    add_parser.add_argument("category_id", type=int, help="Category to budget")
    add_parser.add_argument("amount", type=_amount_arg, help="Budgeted amount")
    add_parser.add_argument("--notes", help="Optional notes")
    add_month_argument(add_parser)
    add_parser.set_defaults(func=cmd_add)

    # budgets update
    update_parser = budgets_subparsers.add_parser("update", help="Edit a budget")
    update_parser.add_argument("budget_id", type=int, help="ID of the budget")
    update_parser.add_argument("--amount", type=_amount_arg, help="New amount")
    update_parser.add_argument("--notes", help="New notes")
    update_parser.add_argument("--category-id", type=int, help="New category ID")
    update_parser.set_defaults(func=cmd_update)

    # budgets delete
    delete_parser = budgets_subparsers.add_parser("delete", help="Delete a budget")
    delete_parser.add_argument("budget_id", type=int, help="ID of the budget")
    delete_parser.set_defaults(func=cmd_delete)

    # budgets auto-generate
    auto_parser = budgets_subparsers.add_parser(
        "auto-generate",
        help="Fill a month from last month's budgets and spending",
    )
    add_month_argument(auto_parser)
    auto_parser.set_defaults(func=cmd_auto_generate)
