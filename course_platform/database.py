from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
import logging

from .settings.config import settings

logger = logging.getLogger(__name__)


def table_name(name: str) -> str:
    """Physical table name for a logical one, e.g. ``user`` -> ``app_user``."""
    return f"{settings.TABLE_PREFIX}_{name}"


def _sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enforce_foreign_keys(sync_engine: Engine) -> Engine:
    """Turn on FK enforcement for every new connection of a SQLite engine."""
    if sync_engine.dialect.name == "sqlite":
        event.listen(sync_engine, "connect", _sqlite_foreign_keys)
    return sync_engine


def make_engine(url: str, echo: bool = False) -> AsyncEngine:
    async_engine = create_async_engine(url, echo=echo, future=True, pool_pre_ping=True)
    enforce_foreign_keys(async_engine.sync_engine)
    return async_engine


engine = make_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
async_session_maker = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
Base = declarative_base()


async def get_db():
    async with async_session_maker() as session:
        yield session


async def init_db(bind: AsyncEngine | None = None, force: bool = False) -> bool:
    """Create every table on ``bind`` (defaults to the process engine).

    Only runs when ``force`` is set or ``RUN_DB_CREATE_ALL`` is on; never
    in prod. Returns whether create_all ran.
    """
    if not (force or settings.RUN_DB_CREATE_ALL):
        logger.info("RUN_DB_CREATE_ALL is off; skipping create_all")
        return False

    # registers every table on Base.metadata
    from . import models  # noqa: F401

    target = bind or engine
    try:
        async with target.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception:
        logger.exception("create_all failed on %s", target.url.render_as_string(hide_password=True))
        raise
    logger.info("Created %d tables on %s", len(Base.metadata.tables), target.url.render_as_string(hide_password=True))
    return True
