"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Cookie, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from patchpoint.database import get_db
from patchpoint.clients.cloudinary_client import CloudinaryClient
from patchpoint.services.address_service import AddressResolver
from patchpoint.services.auth_service import AuthService, extract_bearer_token, get_auth_service
from patchpoint.services.map_archive_service import MapArchiveService
from patchpoint.services.report_service import ReportService
from patchpoint.repositories.report_repository import ReportRepository
from patchpoint.repositories.comment_repository import CommentRepository
from patchpoint.repositories.user_repository import UserRepository
from patchpoint.models.user import User
from patchpoint.exceptions import InvalidTokenError, MissingTokenError
from patchpoint.factories.client_factories import get_cloudinary_client
from patchpoint.factories.service_factories import get_address_resolver, get_map_archive_service
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)

SESSION_COOKIE = "token"


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]

# Client and stateless service dependencies (singletons)
CloudinaryClientDep = Annotated[CloudinaryClient, Depends(get_cloudinary_client)]
AddressResolverDep = Annotated[AddressResolver, Depends(get_address_resolver)]
MapArchiveServiceDep = Annotated[MapArchiveService, Depends(get_map_archive_service)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


# Repository dependencies (request-scoped)
def get_report_repository(db: DbSession) -> ReportRepository:
    """Get ReportRepository with database session."""
    return ReportRepository(db)


def get_comment_repository(db: DbSession) -> CommentRepository:
    """Get CommentRepository with database session."""
    return CommentRepository(db)


def get_user_repository(db: DbSession) -> UserRepository:
    """Get UserRepository with database session."""
    return UserRepository(db)


ReportRepoDep = Annotated[ReportRepository, Depends(get_report_repository)]
CommentRepoDep = Annotated[CommentRepository, Depends(get_comment_repository)]
UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


# Service dependencies
def get_report_service(
    report_repo: ReportRepoDep,
    resolver: AddressResolverDep,
    image_host: CloudinaryClientDep,
) -> ReportService:
    """Get ReportService wired to the request's repository."""
    return ReportService(report_repo, resolver, image_host)


ReportServiceDep = Annotated[ReportService, Depends(get_report_service)]


# ============================================================================
# Authentication Dependencies
# ============================================================================


async def _load_user(token: str | None, auth_service: AuthService, user_repo: UserRepository) -> User:
    user_id = auth_service.verify_token(token)
    user = await user_repo.get_by_id(user_id)
    if user is None:
        log.warning("session user no longer exists", user_id=str(user_id))
        raise InvalidTokenError()
    return user


def _session_token(authorization: str | None, cookie_token: str | None) -> str | None:
    return extract_bearer_token(authorization) or cookie_token


async def get_current_user_required(
    auth_service: AuthServiceDep,
    user_repo: UserRepoDep,
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
    token: Annotated[str | None, Cookie(alias=SESSION_COOKIE)] = None,
) -> User:
    """Get current user, raise 401 if not authenticated."""
    session_token = _session_token(authorization, token)
    if not session_token:
        raise MissingTokenError()
    return await _load_user(session_token, auth_service, user_repo)


# Type alias for auth dependency
CurrentUserRequired = Annotated[User, Depends(get_current_user_required)]
