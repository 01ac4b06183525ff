"""Application exception hierarchy.

Each exception carries the HTTP status, a stable error code and a client-safe
message. ``middleware.error_handler`` turns them into JSON responses.
"""

from typing import Any, Optional


class BaseAPIException(Exception):
    """Base class for all API errors."""

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        details: Optional[dict[str, Any]] = None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        if error_code is not None:
            self.error_code = error_code


# ============================================================================
# Client input errors (4xx)
# ============================================================================


class BadRequestError(BaseAPIException):
    status_code = 400
    error_code = "BAD_REQUEST"


class InvalidCoordinatesError(BadRequestError):
    """GPS coordinates missing or not finite numbers."""

    error_code = "INVALID_COORDINATES"

    def __init__(self, message: str = "Missing or invalid GPS coordinates", **kwargs):
        super().__init__(message=message, **kwargs)


class InvalidDepthError(BadRequestError):
    error_code = "INVALID_DEPTH"

    def __init__(self, message: str = "Depth must be a non-negative number", **kwargs):
        super().__init__(message=message, **kwargs)


class MissingFileError(BadRequestError):
    error_code = "MISSING_FILE"

    def __init__(self, message: str = "No file uploaded", **kwargs):
        super().__init__(message=message, **kwargs)


class InvalidFileTypeError(BadRequestError):
    error_code = "INVALID_FILE_TYPE"


class InvalidArchiveError(BadRequestError):
    error_code = "INVALID_ARCHIVE"


class MapNotFoundError(BadRequestError):
    """Uploaded archive does not contain the expected map page."""

    error_code = "MAP_NOT_FOUND"

    def __init__(self, filename: str):
        super().__init__(
            message=f"{filename} not found in ZIP", details={"filename": filename}
        )


class MissingTokenError(BaseAPIException):
    status_code = 401
    error_code = "MISSING_TOKEN"

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message=message)


class InvalidTokenError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid or expired session"):
        super().__init__(message=message)


class InvalidCredentialsError(BaseAPIException):
    status_code = 401
    error_code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message)


class ResourceNotFoundError(BaseAPIException):
    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            details={"resource": resource, "id": identifier},
        )


class ConflictError(BaseAPIException):
    status_code = 409
    error_code = "CONFLICT"


# ============================================================================
# Upstream and internal errors (5xx)
# ============================================================================


class ImageUploadError(BaseAPIException):
    """Image host rejected or never acknowledged the upload."""

    status_code = 502
    error_code = "IMAGE_UPLOAD_FAILED"

    def __init__(self, message: str = "Image upload failed", **kwargs):
        super().__init__(message=message, **kwargs)


class DatabaseError(BaseAPIException):
    status_code = 500
    error_code = "DATABASE_ERROR"
