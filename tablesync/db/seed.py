"""Seed script for local development data."""

from __future__ import annotations

import logging

from faker import Faker

from tablesync.core.config import get_settings
from tablesync.crud.users import UserRecordWriter
from tablesync.db.base import get_engine
from tablesync.db.store import SQLAlchemyStore

fake = Faker()

logger = logging.getLogger(__name__)


def seed_users(writer: UserRecordWriter, count: int = 20) -> int:
    """Insert fake users, returning how many rows were written."""
    written = 0
    for _ in range(count):
        written += writer.create(
            {
                "name": fake.name(),
                "email": fake.unique.email(),
            }
        )
    return written


def main() -> None:
    logging.basicConfig(level=get_settings().log_level)

    writer = UserRecordWriter.for_store(SQLAlchemyStore(get_engine()))
    report = writer.synchronize()
    logger.info("Synchronized '%s' (%d statements)", report.table, len(report.changes))
    written = seed_users(writer)
    print(f"Seeded database with {written} fake users.")


if __name__ == "__main__":
    main()
