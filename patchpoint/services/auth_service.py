"""Authentication service: password hashing and signed session tokens."""

from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

import jwt
from passlib.context import CryptContext

from patchpoint.exceptions import InvalidTokenError, MissingTokenError
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)

JWT_ALGORITHM = "HS256"


class AuthService:
    """Issues and verifies HS256 session tokens signed with the session secret."""

    def __init__(self, secret: str, expire_minutes: int = 60 * 24 * 7) -> None:
        self._secret = secret
        self._expire_minutes = expire_minutes
        self._pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    # ------------------------------------------------------------------
    # Passwords
    # ------------------------------------------------------------------

    def hash_password(self, password: str) -> str:
        return self._pwd_context.hash(password)

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return self._pwd_context.verify(password, password_hash)
        except (ValueError, TypeError):
            log.warning("password hash unreadable")
            return False

    # ------------------------------------------------------------------
    # Tokens
    # ------------------------------------------------------------------

    def create_token(self, user_id: UUID) -> str:
        """Create a signed session token for a user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": now,
            "exp": now + timedelta(minutes=self._expire_minutes),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify_token(self, token: Optional[str]) -> UUID:
        """
        Verify a session token and extract the user ID.

        Args:
            token: Raw JWT (from the Authorization header or the session cookie)

        Returns:
            ID of the authenticated user

        Raises:
            MissingTokenError: If no token is provided
            InvalidTokenError: If token is invalid or expired
        """
        if not token:
            raise MissingTokenError()

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["sub", "exp"]},
            )
        except jwt.ExpiredSignatureError:
            log.warning("token expired")
            raise InvalidTokenError("Session has expired")
        except jwt.InvalidTokenError as e:
            log.warning("token invalid", error=str(e))
            raise InvalidTokenError()

        try:
            return UUID(payload["sub"])
        except (ValueError, TypeError):
            log.warning("token subject malformed")
            raise InvalidTokenError()


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Token from an ``Authorization: Bearer <token>`` header, if well formed."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise InvalidTokenError("Invalid authorization header format")
    return parts[1]


# Singleton instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get singleton auth service instance."""
    global _auth_service
    if _auth_service is None:
        from patchpoint.config import get_settings

        settings = get_settings()
        _auth_service = AuthService(
            secret=settings.session_secret,
            expire_minutes=settings.token_expire_minutes,
        )
    return _auth_service
