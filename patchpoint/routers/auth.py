"""Authentication router: registration, login and session."""

from fastapi import APIRouter, Response
from sqlalchemy.exc import IntegrityError

from patchpoint.config import get_settings
from patchpoint.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserEnvelope,
    UserResponse,
)
from patchpoint.schemas.common import SuccessResponse
from patchpoint.dependencies import (
    SESSION_COOKIE,
    AuthServiceDep,
    CurrentUserRequired,
    UserRepoDep,
)
from patchpoint.exceptions import ConflictError, InvalidCredentialsError
from patchpoint.models.user import User
from patchpoint.services.auth_service import AuthService
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _start_session(response: Response, user: User, auth_service: AuthService) -> AuthResponse:
    token = auth_service.create_token(user.id)
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE,
        token,
        max_age=settings.token_expire_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=not settings.debug,
    )
    return AuthResponse(user=UserResponse.model_validate(user, from_attributes=True), token=token)


@router.post("/register", response_model=AuthResponse)
async def register(
    payload: RegisterRequest,
    response: Response,
    user_repo: UserRepoDep,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Create an account and start a session."""
    if await user_repo.get_by_email(payload.email) is not None:
        raise ConflictError("Email already registered")

    try:
        user = await user_repo.create(
            name=payload.name.strip(),
            email=payload.email,
            password_hash=auth_service.hash_password(payload.password),
        )
    except IntegrityError:
        # Concurrent registration won the unique email constraint
        log.warning("registration lost email race")
        raise ConflictError("Email already registered")
    log.info("user registered", user_id=str(user.id))
    return _start_session(response, user, auth_service)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    user_repo: UserRepoDep,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """Start a session with email and password."""
    user = await user_repo.get_by_email(payload.email)
    if user is None or not auth_service.verify_password(payload.password, user.password_hash):
        log.warning("login rejected")
        raise InvalidCredentialsError()

    log.info("user logged in", user_id=str(user.id))
    return _start_session(response, user, auth_service)


@router.get("/me", response_model=UserEnvelope)
async def me(current_user: CurrentUserRequired) -> UserEnvelope:
    """Current session user."""
    return UserEnvelope(user=UserResponse.model_validate(current_user, from_attributes=True))


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response) -> SuccessResponse:
    """End the session by clearing the cookie."""
    response.delete_cookie(SESSION_COOKIE)
    return SuccessResponse()
