#!/usr/bin/env python3
"""Schema migrations: numbered .sql files applied once each, in name order."""

from pathlib import Path
from typing import List

from logger import get_logger

logger = get_logger()


def ensure_migrations_table(conn) -> None:
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            migration_file TEXT PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)
    conn.commit()


def applied_migrations(conn) -> set:
    cursor = conn.execute("SELECT migration_file FROM schema_migrations")
    return {row[0] for row in cursor.fetchall()}


def available_migrations(migrations_dir: Path) -> List[str]:
    if not migrations_dir.exists():
        return []
    return sorted(path.name for path in migrations_dir.glob("*.sql"))


def apply_pending(conn, migrations_dir: Path) -> List[str]:
    """Apply every migration not yet recorded in schema_migrations.

    Args:
        conn: Open SQLite connection.
        migrations_dir: Directory holding the .sql files.

    Returns:
        Names of the migrations applied by this call.

    Raises:
        sqlite3.Error: If a migration fails. Earlier migrations stay applied.
    """
    ensure_migrations_table(conn)
    done = applied_migrations(conn)
    pending = [m for m in available_migrations(migrations_dir) if m not in done]

    for migration in pending:
        sql = (migrations_dir / migration).read_text()
        try:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_migrations (migration_file) VALUES (?)",
                (migration,),
            )
            conn.commit()
        except Exception as e:
            conn.rollback()
            logger.error(f"Error applying migration {migration}: {e}")
            raise
        logger.info(f"Applied migration: {migration}")

    return pending


def cmd_status(args, db_manager):
    """Show migration status."""
    if not db_manager.get_db_path().exists():
        logger.info(
            "Database does not exist. Run 'python -m cli migrate apply' to create it."
        )
        return

    with db_manager.connect() as conn:
        ensure_migrations_table(conn)
        done = applied_migrations(conn)
        available = available_migrations(db_manager.get_migrations_dir())

    if not available:
        logger.info("No migrations found.")
        return

    for migration in available:
        logger.info(f"{migration}: {'APPLIED' if migration in done else 'PENDING'}")

    pending_count = len([m for m in available if m not in done])
    logger.info(f"\nApplied: {len(available) - pending_count}  Pending: {pending_count}")


def cmd_apply(args, db_manager):
    """Apply pending migrations."""
    with db_manager.connect() as conn:
        applied = apply_pending(conn, db_manager.get_migrations_dir())

    if applied:
        logger.info(f"Successfully applied {len(applied)} migration(s).")
    else:
        logger.info("No pending migrations.")


def setup_parser(subparsers):
    """Setup migrate subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "migrate",
        help="Database migrations",
        description="Manage database schema migrations",
    )

    migrate_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available migration commands",
        dest="subcommand",
        required=True,
    )

    status_parser = migrate_subparsers.add_parser(
        "status", help="Show migration status"
    )
    status_parser.set_defaults(func=cmd_status)

    apply_parser = migrate_subparsers.add_parser(
        "apply", help="Apply pending migrations"
    )
    apply_parser.set_defaults(func=cmd_apply)
