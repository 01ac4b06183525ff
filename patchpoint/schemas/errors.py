"""Error response schema shared by every exception handler."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from patchpoint.schemas.common import APIModel


class ErrorResponse(APIModel):
    """Stable error shape: ``{success: false, message, code, ...}``."""

    success: bool = False
    message: str = Field(..., description="Client-safe error message")
    code: str = Field(..., description="Stable machine-readable error code")
    details: Optional[dict[str, Any]] = None
    request_id: Optional[str] = None
    timestamp: datetime
