from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool

from .config import Settings, get_settings


def build_engine(settings: Settings) -> AsyncEngine:
    if settings.uses_sqlite:
        # NullPool for SQLite: every session gets its own connection, so
        # readers never share a connection with an in-flight writer.
        return create_async_engine(
            settings.database_url,
            echo=settings.debug,
            future=True,
            poolclass=NullPool,
        )
    return create_async_engine(
        settings.database_url,
        echo=settings.debug,
        future=True,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_recycle=settings.db_pool_recycle,
        pool_pre_ping=settings.db_pool_pre_ping,
    )


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: objects stay readable after commit. Repositories
    # re-query after a commit instead of trusting in-memory state.
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


engine = build_engine(get_settings())
AsyncSessionLocal = build_session_factory(engine)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
