"""Create the course schema on the configured database.

    python -m course_platform.main

Runs ``create_all`` only; it does not diff or migrate an existing schema.
"""
import asyncio
import logging

from .database import engine, init_db
from .settings.config import settings

logger = logging.getLogger(__name__)


async def create_schema():
    try:
        await init_db(force=True)
    finally:
        await engine.dispose()


def main() -> int:
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL))
    logger.info("Creating tables with prefix %r", settings.TABLE_PREFIX)
    asyncio.run(create_schema())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
