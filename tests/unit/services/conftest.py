"""Shared pytest fixtures for service tests."""

import pytest
from unittest.mock import AsyncMock, Mock


@pytest.fixture
def mock_report_repo():
    """Create a mock ReportRepository."""
    repo = AsyncMock()
    repo.list_all = AsyncMock(return_value=[])
    repo.get_by_id = AsyncMock(return_value=None)

    async def _update_address(report, address):
        report.address = address
        return report

    repo.update_address = AsyncMock(side_effect=_update_address)
    return repo


@pytest.fixture
def mock_resolver():
    """Create a mock AddressResolver."""
    resolver = Mock()
    resolver.resolve = AsyncMock(return_value="1 Main St, Springfield")
    resolver.lookup = AsyncMock()
    return resolver


@pytest.fixture
def mock_image_host():
    """Create a mock CloudinaryClient."""
    host = Mock()
    host.configured = True
    host.upload_image = AsyncMock(return_value="https://res.cloudinary.com/demo/image/upload/p.jpg")
    return host


@pytest.fixture
async def sqlite_session():
    """Real AsyncSession over in-memory SQLite, with working savepoints."""
    from sqlalchemy import event
    from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from patchpoint import models  # noqa: F401
    from patchpoint.database import Base

    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)

    # pysqlite/aiosqlite emit their own BEGIN, which breaks SAVEPOINT
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
