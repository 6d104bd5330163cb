"""Engine, sessions and the ledger's unit of work.

``transactional`` bounds every write in one commit-or-rollback block with a
deadline; ``read_only_transaction`` wraps aggregate reads so storage failures
surface as ``StorageError`` without ever committing.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from fin.core.config import settings
from fin.core.exceptions import StorageError, StorageTimeoutError

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """Set ``PRAGMA foreign_keys`` on each new SQLite connection so CASCADE and RESTRICT apply."""

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, connection_record: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def _create_engine() -> AsyncEngine:
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        # No connection pool sizing for file or memory databases
        local = create_async_engine(url, echo=settings.DB_ECHO)
        enable_sqlite_foreign_keys(local)
        return local
    return create_async_engine(
        url,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
    )


engine = _create_engine()
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session.

    Writes are committed by the services' own units of work; whatever is still
    pending when the handler returns is committed, and rolled back if it raised.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def transactional(
    db: AsyncSession,
    *,
    commit: bool = True,
    timeout: float | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Run the block as one atomic unit of work.

    Statements inside commit together when the block exits cleanly. Any error,
    cancellation or an overrun of ``timeout`` seconds (``DB_UNIT_TIMEOUT`` by
    default) rolls the whole unit back. ``commit=False`` always rolls back.

    Raises:
        StorageTimeoutError: the deadline passed before the commit finished
        StorageError: the database rejected a statement or the commit
        AppException: raised inside the block, re-raised after rollback

    Example:
        ```python
        async with transactional(db):
            transaction = await repo.create(obj_in=values)
            await repo.link_categories(transaction.id, category_ids)
        ```
    """
    budget = settings.DB_UNIT_TIMEOUT if timeout is None else timeout
    try:
        async with asyncio.timeout(budget):
            yield db
            if commit:
                await db.commit()
                logger.debug("Unit of work committed")
            else:
                await db.rollback()
    except TimeoutError as e:
        await db.rollback()
        logger.error(f"Unit of work exceeded {budget}s, rolled back")
        raise StorageTimeoutError(f"storage operation exceeded {budget}s") from e
    except asyncio.CancelledError:
        await db.rollback()
        logger.warning("Unit of work cancelled, rolled back")
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Unit of work failed in storage, rolled back: {type(e).__name__}: {e}")
        raise StorageError(f"storage failure: {type(e).__name__}") from e
    except Exception as e:
        await db.rollback()
        logger.debug(f"Unit of work rolled back: {type(e).__name__}: {e}")
        raise


@asynccontextmanager
async def read_only_transaction(
    db: AsyncSession,
) -> AsyncGenerator[AsyncSession, None]:
    """Read-only block that never commits and maps storage errors.

    Used for balance aggregation and latest-rate lookups.

    Example:
        ```python
        async with read_only_transaction(db):
            totals = await repo.totals_by_type(account.id)
        ```
    """
    try:
        yield db
    except SQLAlchemyError as e:
        logger.error(f"Read failed in storage: {type(e).__name__}: {e}")
        raise StorageError(f"storage failure: {type(e).__name__}") from e
