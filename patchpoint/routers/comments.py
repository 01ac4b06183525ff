"""Comments router: threads scoped to a report."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query

from patchpoint.schemas.comments import (
    CommentCreate,
    CommentEnvelope,
    CommentListResponse,
    CommentResponse,
)
from patchpoint.dependencies import CommentRepoDep, CurrentUserRequired, ReportRepoDep
from patchpoint.exceptions import BadRequestError, ResourceNotFoundError
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.get("", response_model=CommentListResponse)
async def list_comments(
    comment_repo: CommentRepoDep,
    report_id: Optional[str] = Query(None, alias="reportId"),
) -> CommentListResponse:
    """List comments on one report, oldest first."""
    if not report_id:
        raise BadRequestError("reportId is required")
    try:
        uid = UUID(report_id)
    except ValueError:
        raise BadRequestError("reportId is not a valid id", details={"reportId": report_id})

    comments = await comment_repo.list_for_report(uid)
    return CommentListResponse(
        comments=[CommentResponse.model_validate(c, from_attributes=True) for c in comments]
    )


@router.post("", response_model=CommentEnvelope)
async def create_comment(
    payload: CommentCreate,
    current_user: CurrentUserRequired,
    comment_repo: CommentRepoDep,
    report_repo: ReportRepoDep,
) -> CommentEnvelope:
    """Comment on a report. Requires authentication."""
    text = payload.text.strip()
    if not text:
        raise BadRequestError("Comment text is required")

    report = await report_repo.get_by_id(payload.report_id)
    if report is None:
        raise ResourceNotFoundError("Report", str(payload.report_id))

    comment = await comment_repo.create(
        report_id=payload.report_id, user_id=current_user.id, text=text
    )
    log.info("comment created", report_id=str(payload.report_id), user_id=str(current_user.id))
    return CommentEnvelope(comment=CommentResponse.model_validate(comment, from_attributes=True))
