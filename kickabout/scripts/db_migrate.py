"""Run database migrations using kickabout.shared.migrations.runner.

Usage:
    kickabout-migrate          # Run all pending migrations
    kickabout-migrate --dry    # Show pending migrations without applying
"""

import asyncio
import logging
import sys

from kickabout.api.core.config import get_settings
from kickabout.shared.database import DatabaseManager, PoolConfig
from kickabout.shared.migrations.runner import MigrationRunner

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")


async def run(dry: bool) -> None:
    settings = get_settings()
    db = DatabaseManager(
        settings.database_url, PoolConfig(min_size=1, max_size=2, ssl=settings.database_ssl)
    )
    await db.connect()

    try:
        runner = MigrationRunner(db.pool)

        if dry:
            pending = await runner.pending()
            applied = await runner.get_applied()
            print(f"Applied: {len(applied)} | Pending: {len(pending)}")
            for v in pending:
                print(f"  -> {v}")
            if not pending:
                print("Database is up to date.")
        else:
            newly_applied = await runner.run_pending()
            if not newly_applied:
                print("No pending migrations.")
            else:
                print(f"Applied {len(newly_applied)} migration(s).")
    finally:
        await db.disconnect()


def main() -> None:
    asyncio.run(run("--dry" in sys.argv))


if __name__ == "__main__":
    main()
