from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

from shared.config.settings import Settings

Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for ``settings.database_url``.

    asyncpg gets explicit connect/command timeouts so a stalled backend
    surfaces as an error instead of hanging the request.
    """
    connect_args = {}
    if settings.database_url.startswith("postgresql+asyncpg"):
        connect_args = {
            "timeout": settings.db_connect_timeout,
            "command_timeout": settings.db_command_timeout,
        }
    return create_async_engine(
        settings.database_url,
        echo=False,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)
