"""Async engine, per-request sessions and schema bootstrap."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.configs import file_logger, settings
from app.decorators import with_retry

logger = file_logger(getLogger(__name__))

STATEMENT_TIMEOUT_MS = 30000


def _log_pool_activity(engine: AsyncEngine) -> None:
    """Trace pool connect/checkout/checkin at debug level."""
    for name in ("connect", "checkout", "checkin"):
        event.listen(
            engine.sync_engine,
            name,
            lambda *_, _name=name: logger.debug(f"Pool event: {_name}"),
        )


def engine_kwargs(database_url: str) -> dict[str, Any]:
    """
    Build dialect-appropriate engine arguments.

    PostgreSQL (asyncpg) gets a sized pool and server-side timeouts; SQLite
    gets a single shared connection so in-memory databases survive across
    sessions.
    """
    if database_url.startswith("sqlite"):
        return {
            "echo": settings.DATABASE_ECHO,
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {
        "echo": settings.DATABASE_ECHO,
        "pool_size": settings.POOL_SIZE,
        "max_overflow": settings.MAX_OVERFLOW,
        "pool_timeout": settings.POOL_TIMEOUT,
        "pool_recycle": settings.POOL_RECYCLE,
        "pool_pre_ping": True,
        "connect_args": {
            "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
            "server_settings": {
                "statement_timeout": str(STATEMENT_TIMEOUT_MS),
                "lock_timeout": str(STATEMENT_TIMEOUT_MS),
            },
        },
    }


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    **engine_kwargs(settings.DATABASE_URL),
)

if settings.DEBUG:
    _log_pool_activity(engine)

async_session_maker: async_sessionmaker[SQLModelAsyncSession] = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency: one session per request, committed when the handler returns."""
    async with transaction() as session:
        yield session


@asynccontextmanager
async def transaction() -> AsyncGenerator[AsyncSession]:
    """Session scoped to one unit of work: commit on clean exit, rollback on error."""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            logger.debug("Transaction rolled back", exc_info=True)
            raise
        finally:
            await session.close()


@with_retry(attempts=5, base_delay=0.5, max_delay=5.0)
async def init_db() -> None:
    """
    Create any missing tables.

    Deployments run the Alembic migrations instead. Connection errors are
    retried while the database server is still starting.
    """
    async with engine.begin() as conn:
        from app.models import PostDB, UserDB  # noqa: F401, PLC0415

        await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Database schema ready")


async def check_db() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Database health check failed")
        return False
    return True


async def close_db() -> None:
    """Dispose of all pooled database connections."""
    await engine.dispose()
    logger.info("Database connections closed")
