"""Repository layer for database access."""

from patchpoint.repositories.report_repository import ReportRepository
from patchpoint.repositories.comment_repository import CommentRepository
from patchpoint.repositories.user_repository import UserRepository

__all__ = ["ReportRepository", "CommentRepository", "UserRepository"]
