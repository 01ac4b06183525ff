"""Database connection and session management."""

from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase


# Base class for all models
class Base(DeclarativeBase):
    pass


class Database:
    """Store handle: owns the engine and session factory for the app lifetime.

    Constructed once in the application lifespan, kept on ``app.state.database``
    and disposed at shutdown.
    """

    def __init__(self, url: str, echo: bool = False):
        self.engine = create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create tables that do not exist yet."""
        # Register models on Base.metadata
        from patchpoint import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting a request-scoped database session."""
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
