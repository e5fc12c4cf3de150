"""
Development reset: drop every dashboard table, recreate, and (optionally) re-seed.
Refuses to run when APP_ENV is production.

Run with: python -m app.db_reset [--force] [--no-seed]
"""

import asyncio
import sys

from app.core.config import get_settings
from app.core.database import create_tables, engine, register_models
from app.core.logging import setup_logging, get_logger


async def reset_database(seed: bool = True):
    setup_logging()
    logger = get_logger("db_reset")

    tables = register_models()
    logger.warning("Dropping %d tables: %s", len(tables), ", ".join(tables))
    await create_tables(drop_first=True)
    logger.info("Tables recreated")

    if seed:
        from app.seed import seed_database
        await seed_database()
    else:
        logger.info("Skipping seed (--no-seed); the status endpoint will 404 until seeded")

    await engine.dispose()
    logger.info("Database reset complete")


if __name__ == "__main__":
    if get_settings().is_production:
        raise SystemExit("Refusing to reset a production database.")

    if "--force" not in sys.argv:
        confirm = input("This will DELETE ALL dashboard data. Type 'RESET' to confirm: ")
        if confirm != "RESET":
            print("Cancelled.")
            sys.exit(0)

    asyncio.run(reset_database(seed="--no-seed" not in sys.argv))
