"""SQLAlchemy models."""

from patchpoint.models.user import User
from patchpoint.models.report import Report
from patchpoint.models.comment import Comment

__all__ = ["User", "Report", "Comment"]
