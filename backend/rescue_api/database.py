"""
Animal Rescue API — Database Handle & Connection Provider
==========================================================

What:  The `Database` handle (query / execute / query-single-row primitives
       over an async SQLAlchemy engine) and `connect_database`, which builds
       one from settings at startup.
How:   One engine with a connection pool per process. Each primitive checks
       out a connection inside `engine.begin()`, so every statement is its own
       transaction: committed on success, rolled back on error.
Who:   Built by the FastAPI lifespan, stored on `app.state`, handed by
       reference to the AnimalRepository and the health route.
When:  Created once at process start; disposed at shutdown.

Connection Pooling:
    pool_size / max_overflow come from settings (PostgreSQL only).
    pool_pre_ping validates a connection before use.
    pool_recycle=3600 recycles connections every hour.
    SQLite URLs keep SQLAlchemy's default pool for that dialect.
"""

import asyncio
import logging
from typing import Any, Optional, Sequence, Union

from sqlalchemy import Row, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.base import Executable

from rescue_api.config import Settings
from rescue_api.credentials import resolve_database_url
from rescue_api.exceptions import InitializationError

logger = logging.getLogger(__name__)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Models register their tables on `Base.metadata`; tests call
    `Base.metadata.create_all` against a scratch SQLite file.
    """
    pass


class Database:
    """
    Process-wide handle to the relational store.

    Primitives:
        fetch_all(stmt)  → every result row
        fetch_one(stmt)  → exactly one row (raises NoResultFound otherwise)
        execute(stmt)    → affected row count
        ping()           → True if `SELECT 1` succeeds

    Errors from SQLAlchemy propagate unchanged; translating them into
    application errors is the caller's job.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(cls, url: Union[str, URL], **engine_kwargs: Any) -> "Database":
        return cls(create_async_engine(url, **engine_kwargs))

    async def fetch_all(self, statement: Executable) -> Sequence[Row]:
        async with self.engine.begin() as conn:
            result = await conn.execute(statement)
            return result.all()

    async def fetch_one(self, statement: Executable) -> Row:
        async with self.engine.begin() as conn:
            result = await conn.execute(statement)
            return result.one()

    async def execute(self, statement: Executable) -> int:
        async with self.engine.begin() as conn:
            result = await conn.execute(statement)
            return result.rowcount

    async def ping(self) -> bool:
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Database connectivity check failed: %s", e)
            return False
        return True

    async def dispose(self) -> None:
        """Close all pooled connections. Called during application shutdown."""
        await self.engine.dispose()


def engine_options(settings: Settings, url: URL) -> dict:
    """
    Engine keyword arguments for a given URL.

    SQLite gets no pool sizing (its dialects pick their own pool class);
    everything else gets the configured pool.
    """
    options: dict = {"echo": settings.log_level == "DEBUG"}
    if url.get_backend_name() != "sqlite":
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


async def connect_database(
    settings: Settings,
    secrets_client: Optional[Any] = None,
) -> Database:
    """
    Resolve credentials, create the engine and verify it answers.

    Raises:
        InitializationError: Credentials cannot be resolved or the first
            `SELECT 1` fails. The lifespan lets this propagate so the
            server never starts without a store.
    """
    # boto3 is blocking; keep the Secrets Manager round trip off the event loop
    url = make_url(await asyncio.to_thread(resolve_database_url, settings, client=secrets_client))
    database = Database.from_url(url, **engine_options(settings, url))

    if not await database.ping():
        await database.dispose()
        logger.error("Failed to connect to the database at %s", url.render_as_string(hide_password=True))
        raise InitializationError(
            message="Failed to connect to the database",
            context={"url": url.render_as_string(hide_password=True)},
        )

    logger.info("Successfully connected to the database")
    return database
