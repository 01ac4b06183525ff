"""Schemas for comment operations."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field

from patchpoint.schemas.common import APIModel


class CommentCreate(APIModel):
    report_id: UUID = Field(..., description="Report being discussed")
    text: str = Field(..., max_length=2000)


class CommentResponse(APIModel):
    id: UUID
    report_id: UUID
    user_id: UUID
    author_name: Optional[str] = None
    text: str
    created_at: Optional[datetime] = None


class CommentEnvelope(APIModel):
    success: bool = True
    comment: CommentResponse


class CommentListResponse(APIModel):
    success: bool = True
    comments: list[CommentResponse]
