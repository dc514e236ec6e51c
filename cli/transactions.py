#!/usr/bin/env python3

import argparse
import sys
from datetime import date
from decimal import Decimal, InvalidOperation

from budgeting.events import TRANSACTIONS_CHANGED
from budgeting.periods import parse_period, period_bounds
from logger import get_logger

logger = get_logger()


def _date_arg(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date '{value}', expected YYYY-MM-DD")


def _decimal_arg(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"Invalid amount: {value}")


def cmd_add(args, services):
    """Record a transaction."""
    if args.category_id is not None and not services.categories.find(args.category_id):
        logger.error(f"Category with ID {args.category_id} not found.")
        sys.exit(1)

    try:
        transaction = services.transactions.create(
            args.date, args.amount, args.type, args.category_id, args.description
        )
    except Exception as e:
        logger.error(f"Error creating transaction: {e}")
        sys.exit(1)

    services.events.publish(TRANSACTIONS_CHANGED, {"id": transaction.id})
    logger.info(f"✓ Transaction created with ID: {transaction.id}")


def cmd_list(args, services):
    """List transactions, optionally limited to one month."""
    if args.month:
        try:
            start, end = period_bounds(args.month)
        except ValueError as e:
            logger.error(str(e))
            sys.exit(1)
        transactions = services.transactions.get_transactions_by_date_range(start, end)
    else:
        transactions = services.transactions.find_all()

    if not transactions:
        logger.info("No transactions found.")
        return

    category_names = {c.id: c.name for c in services.categories.find_all()}

    for t in transactions:
        category = (
            category_names.get(t.category_id, "Unknown")
            if t.category_id is not None
            else "(uncategorized)"
        )
        logger.info(
            f"{t.id:>6}  {t.transaction_date.isoformat()}  {t.amount:>12.2f}  "
            f"{t.type:<8}  {category:<24}  {t.description or ''}"
        )

    logger.info(f"\nTotal transactions: {len(transactions)}")


def cmd_set_category(args, services):
    """Assign a category to a transaction, or clear it with --clear."""
    category_id = None if args.clear else args.category_id
    if category_id is None and not args.clear:
        logger.error("Provide a category ID or --clear.")
        sys.exit(1)

    if category_id is not None and not services.categories.find(category_id):
        logger.error(f"Category with ID {category_id} not found.")
        sys.exit(1)

    if not services.transactions.set_category(args.transaction_id, category_id):
        logger.error(f"Transaction with ID {args.transaction_id} not found.")
        sys.exit(1)

    services.events.publish(TRANSACTIONS_CHANGED, {"id": args.transaction_id})
    logger.info(f"✓ Transaction {args.transaction_id} updated.")


def cmd_delete(args, services):
    """Delete a transaction by ID."""
    if not services.transactions.delete(args.transaction_id):
        logger.error(f"Transaction with ID {args.transaction_id} not found.")
        sys.exit(1)

    services.events.publish(TRANSACTIONS_CHANGED, {"id": args.transaction_id})
    logger.info(f"✓ Transaction {args.transaction_id} deleted.")


def _month_arg(value: str) -> str:
    try:
        parse_period(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))
    return value


def setup_parser(subparsers):
    """Setup transactions subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "transactions",
        help="Manage transactions",
        description="Record, list and categorize transactions",
    )

    transactions_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available transaction commands",
        dest="subcommand",
        required=True,
    )

    # transactions add
    add_parser = transactions_subparsers.add_parser("add", help="Record a transaction")
    add_parser.add_argument("date", type=_date_arg, help="Date in YYYY-MM-DD format")
    add_parser.add_argument("amount", type=_decimal_arg, help="Signed amount")
    add_parser.add_argument(
        "--type",
        default="expense",
        choices=["expense", "income", "transfer"],
        help="Transaction type (default: expense)",
    )
    add_parser.add_argument("--category-id", type=int, help="Category ID")
    add_parser.add_argument("--description", help="Description")
    add_parser.set_defaults(func=cmd_add)

    # transactions list
    list_parser = transactions_subparsers.add_parser("list", help="List transactions")
    list_parser.add_argument(
        "--month", type=_month_arg, help="Only show one month (YYYY-MM)"
    )
    list_parser.set_defaults(func=cmd_list)

    # transactions set-category
    set_category_parser = transactions_subparsers.add_parser(
        "set-category", help="Set or clear the category of a transaction"
    )
    set_category_parser.add_argument("transaction_id", type=int, help="Transaction ID")
    set_category_parser.add_argument(
        "category_id", type=int, nargs="?", help="Category ID"
    )
    set_category_parser.add_argument(
        "--clear", action="store_true", help="Mark the transaction uncategorized"
    )
    set_category_parser.set_defaults(func=cmd_set_category)

    # transactions delete
    delete_parser = transactions_subparsers.add_parser(
        "delete", help="Delete a transaction"
    )
    delete_parser.add_argument("transaction_id", type=int, help="Transaction ID")
    delete_parser.set_defaults(func=cmd_delete)
