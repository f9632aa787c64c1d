import contextlib
from collections.abc import AsyncIterator
from functools import lru_cache

from alembic import command, config
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.config.settings import settings


def create_engine(url: str) -> AsyncEngine:
    connect_args = {}
    if "sqlite" in url:
        connect_args = {"timeout": 15}
    return create_async_engine(
        url,
        echo=settings.log_db,
        connect_args=connect_args,
    )


@lru_cache
def get_engine() -> AsyncEngine:
    """
    Engine for the configured RSVP store.
    Created on first use so a missing configuration fails the request, not the import.
    """
    return create_engine(settings.database_dsn)


@lru_cache
def _session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


def run_upgrade(connection, cfg):
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def upgrade_database(engine: AsyncEngine | None = None) -> None:
    async with (engine or get_engine()).begin() as conn:
        await conn.run_sync(run_upgrade, config.Config("alembic.ini"))


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True,
    session_overwrite: AsyncSession | None = None,
    engine: AsyncEngine | None = None,
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with _session_maker(engine or get_engine())() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()


async def dispose_engine() -> None:
    """Close pooled connections, for callers that run one event loop per command."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
