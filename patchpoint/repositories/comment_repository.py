"""Repository for Comment model operations."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from patchpoint.models.comment import Comment
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)


class CommentRepository:
    """Repository for Comment operations. Comments are never updated."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, report_id: UUID, user_id: UUID, text: str) -> Comment:
        """Create a comment and load its author for the response."""
        comment = Comment(report_id=report_id, user_id=user_id, text=text)
        self.session.add(comment)
        await self.session.flush()
        await self.session.refresh(comment, attribute_names=["author", "created_at"])
        log.debug("comment_created", report_id=str(report_id), user_id=str(user_id))
        return comment

    async def list_for_report(self, report_id: UUID) -> list[Comment]:
        """Comments on one report in creation order."""
        result = await self.session.execute(
            select(Comment)
            .where(Comment.report_id == report_id)
            .order_by(Comment.created_at.asc())
        )
        return list(result.scalars().all())
