#!/usr/bin/env python3
"""
budgetbook CLI - command-line interface for monthly budgets.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    budgets      Review, edit and auto-generate monthly budgets
    categories   Manage the category catalog
    transactions Record and categorize transactions
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed
    python -m cli transactions add 2025-02-14 -42.50 --category-id 1
    python -m cli budgets auto-generate --month 2025-03
    python -m cli budgets summary --month 2025-03
"""

import sys
import argparse
from cli import budgets, categories, transactions, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="budgetbook - Monthly budgets reconciled against spending",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    budgets.setup_parser(subparsers)
    categories.setup_parser(subparsers)
    transactions.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # migrate works on the raw database, everything else on services
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
