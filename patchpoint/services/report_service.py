"""Report ingestion, listing with address backfill, and on-demand geocoding."""

import asyncio
from typing import Any, Optional
from uuid import UUID

from patchpoint.clients.cloudinary_client import CloudinaryClient
from patchpoint.exceptions import ResourceNotFoundError
from patchpoint.models.report import Report
from patchpoint.repositories.report_repository import ReportRepository
from patchpoint.schemas.reports import (
    DeviceReportCreate,
    ReportCreate,
    ReportResponse,
    clean_address,
)
from patchpoint.services.address_service import ADDRESS_UNAVAILABLE, AddressResolver
from patchpoint.utils.coordinates import parse_coordinates, parse_depth
from patchpoint.utils.logger import get_logger
from patchpoint.utils.timestamps import normalize_timestamp
from patchpoint.utils.uploads import ImageUpload

log = get_logger(__name__)


def needs_address(report: Report) -> bool:
    """True when the stored address is missing, blank or the legacy placeholder."""
    return clean_address(report.address) is None


class ReportService:
    """Thin orchestration over the report repository and external services."""

    def __init__(
        self,
        report_repo: ReportRepository,
        resolver: AddressResolver,
        image_host: CloudinaryClient,
    ):
        self.report_repo = report_repo
        self.resolver = resolver
        self.image_host = image_host

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def create_from_ui(self, payload: ReportCreate, user_id: UUID) -> Report:
        """Authenticated UI submission. The address is client-supplied or left for backfill."""
        gps_lat, gps_lon = parse_coordinates(payload.gps_lat, payload.gps_lon)
        depth_cm = parse_depth(payload.depth_cm)

        report = await self.report_repo.create(
            gps_lat=gps_lat,
            gps_lon=gps_lon,
            depth_cm=depth_cm,
            address=clean_address(payload.address),
            image_url=_clean_url(payload.image_url),
            timestamp=normalize_timestamp(None),
            created_by=user_id,
        )
        log.info("report created", source="ui", report_id=str(report.id), user_id=str(user_id))
        return report

    async def create_from_device(self, payload: DeviceReportCreate) -> Report:
        """Sensor unit JSON submission with synchronous reverse geocoding."""
        gps_lat, gps_lon = parse_coordinates(payload.gps_lat, payload.gps_lon)
        depth_cm = parse_depth(payload.lidar_cm)
        timestamp = normalize_timestamp(payload.timestamp)

        address = await self.resolver.resolve(gps_lat, gps_lon)

        report = await self.report_repo.create(
            gps_lat=gps_lat,
            gps_lon=gps_lon,
            depth_cm=depth_cm,
            address=address,
            image_url=_clean_url(payload.image),
            timestamp=timestamp,
        )
        log.info(
            "report created",
            source="device",
            report_id=str(report.id),
            timestamp=timestamp.isoformat(),
            address=address,
        )
        return report

    async def create_from_device_image(
        self,
        image: ImageUpload,
        lat: Any,
        lon: Any,
        depth: Any = None,
        timestamp: Any = None,
    ) -> Report:
        """
        Sensor unit multipart submission.

        The image is hosted first; nothing is persisted unless the host
        acknowledges the upload (``ImageUploadError`` propagates).
        """
        gps_lat, gps_lon = parse_coordinates(lat, lon)
        depth_cm = parse_depth(depth)
        observed_at = normalize_timestamp(timestamp)

        image_url = await self.image_host.upload_image(
            image.content, filename=image.filename, content_type=image.content_type
        )
        address = await self.resolver.resolve(gps_lat, gps_lon)

        report = await self.report_repo.create(
            gps_lat=gps_lat,
            gps_lon=gps_lon,
            depth_cm=depth_cm,
            address=address,
            image_url=image_url,
            timestamp=observed_at,
        )
        log.info(
            "report created",
            source="device_image",
            report_id=str(report.id),
            timestamp=observed_at.isoformat(),
            address=address,
        )
        return report

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_report(self, report_id: str) -> Report:
        """Fetch one report; unknown or malformed ids are not found."""
        try:
            uid = UUID(str(report_id))
        except ValueError:
            raise ResourceNotFoundError("Report", str(report_id))

        report = await self.report_repo.get_by_id(uid)
        if report is None:
            raise ResourceNotFoundError("Report", str(report_id))
        return report

    async def list_reports(self) -> list[ReportResponse]:
        """
        List all reports newest first, backfilling missing addresses.

        Lookups for addressless reports run concurrently; each result (or the
        sentinel on failure) is then persisted in its own savepoint. The
        returned snapshots already carry the new addresses, even for reports
        whose write failed.
        """
        reports = await self.report_repo.list_all()
        snapshots = [ReportResponse.model_validate(r, from_attributes=True) for r in reports]

        pending = [i for i, r in enumerate(reports) if needs_address(r)]
        if not pending:
            return snapshots

        log.info("backfilling addresses", count=len(pending))
        results = await asyncio.gather(
            *(self.resolver.resolve(reports[i].gps_lat, reports[i].gps_lon) for i in pending),
            return_exceptions=True,
        )

        for i, result in zip(pending, results):
            report = reports[i]
            # A failed savepoint expires the instance, so log with the snapshot id
            report_id = str(snapshots[i].id)
            if isinstance(result, BaseException):
                log.warning(
                    "address backfill lookup raised",
                    report_id=report_id,
                    error=str(result),
                )
                address = ADDRESS_UNAVAILABLE
            else:
                address = result or ADDRESS_UNAVAILABLE

            snapshots[i].address = address
            try:
                await self.report_repo.update_address(report, address)
            except Exception as e:
                log.warning(
                    "address backfill write failed",
                    report_id=report_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            else:
                log.info("address backfilled", report_id=report_id, address=address)

        return snapshots

    async def geocode_report(self, report_id: str) -> Report:
        """Resolve and persist an address for one report unless it already has one."""
        report = await self.get_report(report_id)
        if not needs_address(report):
            return report

        address = await self.resolver.resolve(report.gps_lat, report.gps_lon)
        report = await self.report_repo.update_address(report, address or ADDRESS_UNAVAILABLE)
        log.info("report geocoded", report_id=str(report.id), address=report.address)
        return report


def _clean_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
