"""
Asynchronous Database Utilities Module

This module builds the SQLAlchemy async engine and the session factory shared
by every repository. Each repository operation opens its own short-lived
`AsyncSession` from the factory, so concurrent sub-operations of one request
(a storage write and its activity log entry) never share a session.

**Security Note**: Never log DATABASE_URL; it carries the database password.

Key Components:
    - create_engine: Builds the async engine (asyncpg in production, aiosqlite in tests).
    - create_session_factory: An `async_sessionmaker` bound to an engine.
    - create_db_and_tables: Creates missing tables (development and tests only).
    - check_database_health: Cheap ``SELECT 1`` used by the health endpoint.
"""

from typing import Optional

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from soon_auth.core.config.settings import settings
import soon_auth.domain.entities  # noqa: F401  registers the tables on SQLModel.metadata

logger = get_logger(__name__)

SessionFactory = async_sessionmaker[AsyncSession]


def create_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the async engine for ``database_url`` (defaults to settings).

    Pool sizing only applies to server databases; SQLite uses its own pool.
    """
    url = make_url(database_url or settings.DATABASE_URL)
    engine_kwargs = {"echo": False, "pool_pre_ping": True}
    if url.get_backend_name() == "postgresql":
        engine_kwargs.update(
            pool_size=settings.POSTGRES_POOL_SIZE,
            max_overflow=settings.POSTGRES_MAX_OVERFLOW,
            pool_timeout=settings.POSTGRES_POOL_TIMEOUT,
        )
    logger.debug("Creating async database engine", backend=url.get_backend_name())
    return create_async_engine(url, **engine_kwargs)


def create_session_factory(engine: AsyncEngine) -> SessionFactory:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@retry(
    stop=stop_after_attempt(5),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type(OperationalError),
    reraise=True,
)
async def create_db_and_tables(engine: AsyncEngine) -> None:
    """Create missing tables, retrying while the database is still starting.

    Schema provisioning in deployed environments is external; this is for
    local development and the test suite.
    """
    try:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except OperationalError as e:
        logger.warning("database_tables_creation_retry", error=str(e))
        raise
    logger.info("database_tables_created")


async def check_database_health(engine: AsyncEngine) -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        await logger.aerror("Database health check failed", error=str(e))
        return False
