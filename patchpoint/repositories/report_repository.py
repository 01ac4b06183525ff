"""Repository for Report model operations."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from patchpoint.models.report import Report
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)


class ReportRepository:
    """Repository for Report CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        gps_lat: float,
        gps_lon: float,
        timestamp: datetime,
        depth_cm: Optional[float] = None,
        address: Optional[str] = None,
        image_url: Optional[str] = None,
        created_by: Optional[UUID] = None,
    ) -> Report:
        """Create a new report record."""
        report = Report(
            gps_lat=gps_lat,
            gps_lon=gps_lon,
            depth_cm=depth_cm,
            address=address,
            image_url=image_url,
            timestamp=timestamp,
            created_by=created_by,
        )
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        log.debug("report_created", report_id=str(report.id), has_address=address is not None)
        return report

    async def get_by_id(self, report_id: UUID) -> Optional[Report]:
        """Get report by ID."""
        result = await self.session.execute(select(Report).where(Report.id == report_id))
        return result.scalar_one_or_none()

    async def list_all(self) -> list[Report]:
        """List every report, newest observation first."""
        result = await self.session.execute(
            select(Report).order_by(Report.timestamp.desc(), Report.created_at.desc())
        )
        return list(result.scalars().all())

    async def update_address(self, report: Report, address: str) -> Report:
        """Persist a resolved address inside a savepoint.

        A failed write rolls back only this report's update, so callers that
        update several reports in one session can carry on.
        """
        async with self.session.begin_nested():
            report.address = address
            await self.session.flush()
        log.debug("report_address_updated", report_id=str(report.id))
        return report

    async def count(self) -> int:
        """Total number of reports."""
        result = await self.session.execute(select(func.count()).select_from(Report))
        return result.scalar_one()
