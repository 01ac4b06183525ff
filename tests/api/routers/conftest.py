"""Shared pytest fixtures for router integration tests."""

import pytest
from contextlib import ExitStack, asynccontextmanager
from typing import AsyncGenerator
from unittest.mock import AsyncMock, Mock, patch

from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from patchpoint.clients.nominatim_client import GeocodeResult
from patchpoint.services.map_archive_service import ExtractedMap


# Mock database before the app starts to avoid connection issues
@pytest.fixture(autouse=True)
def mock_database_init():
    """Mock store and upload directory setup for all router tests."""
    with ExitStack() as stack:
        mock_database_cls = stack.enter_context(patch("patchpoint.main.Database"))
        mock_database = mock_database_cls.return_value
        mock_database.create_tables = AsyncMock()
        mock_database.dispose = AsyncMock()
        stack.enter_context(patch("patchpoint.main.get_map_archive_service"))
        yield mock_database


@pytest.fixture
def mock_db_session():
    """Create a mock AsyncSession for router tests."""
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.add = Mock()

    @asynccontextmanager
    async def begin_nested():
        yield

    session.begin_nested = begin_nested

    return session


@pytest.fixture
def mock_report_repo():
    """Create a mock ReportRepository."""
    repo = AsyncMock()
    repo.list_all = AsyncMock(return_value=[])
    repo.get_by_id = AsyncMock(return_value=None)
    repo.count = AsyncMock(return_value=0)

    async def _update_address(report, address):
        report.address = address
        return report

    repo.update_address = AsyncMock(side_effect=_update_address)
    return repo


@pytest.fixture
def mock_comment_repo():
    """Create a mock CommentRepository."""
    repo = AsyncMock()
    repo.list_for_report = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_user_repo():
    """Create a mock UserRepository."""
    repo = AsyncMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.get_by_email = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_resolver():
    """Create a mock AddressResolver."""
    resolver = Mock()
    resolver.resolve = AsyncMock(return_value="1 Main St, Springfield")
    resolver.lookup = AsyncMock(return_value=GeocodeResult())
    return resolver


@pytest.fixture
def mock_image_host():
    """Create a mock CloudinaryClient."""
    host = Mock()
    host.configured = True
    host.upload_image = AsyncMock(return_value="https://res.cloudinary.com/demo/image/upload/p.jpg")
    return host


@pytest.fixture
def mock_archive_service():
    """Create a mock MapArchiveService."""
    from patchpoint.services.map_archive_service import MapArchiveService

    service = Mock()
    service.is_zip_filename = Mock(side_effect=MapArchiveService.is_zip_filename)
    service.store_and_extract = AsyncMock(
        return_value=ExtractedMap(
            timestamp="1736937000000",
            map_path="pi_maps/1736937000000/pothole_map.html",
            extract_dir="pi_maps/1736937000000",
        )
    )
    return service


@pytest.fixture
def mock_user(make_user):
    """Authenticated user for the overridden session dependency."""
    return make_user(name="Asha Rao", email="asha@example.com")


def _create_test_client(
    mock_db_session,
    mock_report_repo,
    mock_comment_repo,
    mock_user_repo,
    mock_resolver,
    mock_image_host,
    mock_archive_service,
    *,
    mock_user=None,
):
    """Build a TestClient with all infra dependencies overridden.

    When mock_user is provided, session auth is bypassed. When omitted, the
    auth dependency runs normally so tests can assert 401 behaviour.
    """
    from patchpoint.main import app
    from patchpoint.database import get_db
    from patchpoint.dependencies import (
        get_comment_repository,
        get_current_user_required,
        get_report_repository,
        get_user_repository,
    )
    from patchpoint.factories.client_factories import get_cloudinary_client
    from patchpoint.factories.service_factories import (
        get_address_resolver,
        get_map_archive_service,
    )

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield mock_db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_report_repository] = lambda: mock_report_repo
    app.dependency_overrides[get_comment_repository] = lambda: mock_comment_repo
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo
    app.dependency_overrides[get_address_resolver] = lambda: mock_resolver
    app.dependency_overrides[get_cloudinary_client] = lambda: mock_image_host
    app.dependency_overrides[get_map_archive_service] = lambda: mock_archive_service

    if mock_user is not None:
        app.dependency_overrides[get_current_user_required] = lambda: mock_user

    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def client(
    mock_db_session,
    mock_report_repo,
    mock_comment_repo,
    mock_user_repo,
    mock_resolver,
    mock_image_host,
    mock_archive_service,
    mock_user,
):
    """Create TestClient with all dependencies overridden including auth."""
    yield from _create_test_client(
        mock_db_session,
        mock_report_repo,
        mock_comment_repo,
        mock_user_repo,
        mock_resolver,
        mock_image_host,
        mock_archive_service,
        mock_user=mock_user,
    )


@pytest.fixture
def unauthenticated_client(
    mock_db_session,
    mock_report_repo,
    mock_comment_repo,
    mock_user_repo,
    mock_resolver,
    mock_image_host,
    mock_archive_service,
):
    """Create TestClient WITHOUT auth override to test 401 responses."""
    yield from _create_test_client(
        mock_db_session,
        mock_report_repo,
        mock_comment_repo,
        mock_user_repo,
        mock_resolver,
        mock_image_host,
        mock_archive_service,
    )
