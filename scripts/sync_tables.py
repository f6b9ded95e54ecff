#!/usr/bin/env python
"""Script to synchronize managed tables with their descriptors."""

import argparse
import logging

from dotenv import load_dotenv

load_dotenv()

from rich.console import Console
from rich.table import Table

from tablesync.core.config import get_settings
from tablesync.core.errors import TableSyncError
from tablesync.core.schema_sync import SchemaSynchronizer
from tablesync.crud.users import USER_DESCRIPTOR
from tablesync.db.base import get_engine
from tablesync.db.store import SQLAlchemyStore

DESCRIPTORS = {
    USER_DESCRIPTOR.name: USER_DESCRIPTOR,
}

console = Console()


def sync_tables(table_names: list[str], database_url: str | None, dry_run: bool) -> int:
    """Synchronize (or plan) each table, printing the statements involved."""
    synchronizer = SchemaSynchronizer(SQLAlchemyStore(get_engine(database_url)))

    for name in table_names:
        descriptor = DESCRIPTORS[name]
        try:
            if dry_run:
                changes = synchronizer.plan(descriptor)
            else:
                changes = list(synchronizer.synchronize(descriptor).changes)
        except TableSyncError as exc:
            console.print(f"[red]✗ {name}: {exc}[/red]")
            return 1

        if not changes:
            console.print(f"[green]✓ {name} already in sync[/green]")
            continue

        table = Table(title=f"{name} ({'planned' if dry_run else 'applied'})")
        table.add_column("Action")
        table.add_column("Statement")
        for change in changes:
            table.add_row(change.action.value, change.sql)
        console.print(table)

    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Synchronize tablesync tables")
    parser.add_argument(
        "tables",
        nargs="*",
        default=sorted(DESCRIPTORS),
        help="Tables to synchronize (default: all)",
    )
    parser.add_argument("--database-url", help="Override DATABASE_URL")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only print the statements that would be executed",
    )
    args = parser.parse_args()

    unknown = [name for name in args.tables if name not in DESCRIPTORS]
    if unknown:
        parser.error(f"unknown tables: {', '.join(unknown)}")

    logging.basicConfig(level=get_settings().log_level)
    raise SystemExit(sync_tables(args.tables, args.database_url, args.dry_run))
