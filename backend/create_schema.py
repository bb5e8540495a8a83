"""Create the database schema for DATABASE_URL (idempotent)."""

import asyncio
import logging
import sys

from core.config import get_settings
from core.database import DatabaseManager
from core.logging import setup_logging

logger = logging.getLogger(__name__)


async def main() -> int:
    settings = get_settings()
    setup_logging(settings)
    manager = DatabaseManager(settings.database_url)
    await manager.init()
    try:
        await manager.create_schema()
    except Exception:
        logger.exception("Schema creation failed for %s", settings.database_url)
        return 1
    finally:
        await manager.dispose()
    print("schema ok")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
