"""Comment model: free-text note attached to a report."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from patchpoint.database import Base

if TYPE_CHECKING:
    from patchpoint.models.report import Report
    from patchpoint.models.user import User


class Comment(Base):
    """Immutable comment on a report."""

    __tablename__ = "comments"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    report_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("reports.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    report: Mapped[Report] = relationship("Report", back_populates="comments")
    author: Mapped[User] = relationship("User", lazy="joined")

    @property
    def author_name(self) -> str | None:
        return self.author.name if self.author is not None else None

    def __repr__(self):
        return f"<Comment(report_id='{self.report_id}', user_id='{self.user_id}')>"
