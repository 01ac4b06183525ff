"""Pothole reports router: ingestion, listing with backfill, geocoding."""

from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, UploadFile

from patchpoint.config import get_settings
from patchpoint.schemas.reports import (
    DeviceReportCreate,
    ReportCreate,
    ReportEnvelope,
    ReportListResponse,
    ReportResponse,
)
from patchpoint.dependencies import CurrentUserRequired, ReportServiceDep
from patchpoint.utils.uploads import read_image_upload

router = APIRouter(prefix="/reports", tags=["Reports"])


def _envelope(report) -> ReportEnvelope:
    return ReportEnvelope(report=ReportResponse.model_validate(report, from_attributes=True))


@router.get("", response_model=ReportListResponse)
async def list_reports(service: ReportServiceDep) -> ReportListResponse:
    """List all reports newest first. Missing addresses are resolved before responding."""
    return ReportListResponse(reports=await service.list_reports())


@router.post("", response_model=ReportEnvelope)
async def create_report(
    payload: ReportCreate,
    current_user: CurrentUserRequired,
    service: ReportServiceDep,
) -> ReportEnvelope:
    """Create a report from the UI. Requires authentication."""
    report = await service.create_from_ui(payload, user_id=current_user.id)
    return _envelope(report)


@router.post("/device", response_model=ReportEnvelope)
async def create_device_report(
    payload: DeviceReportCreate,
    service: ReportServiceDep,
) -> ReportEnvelope:
    """Create a report from the sensor unit (JSON). Reverse geocodes before saving."""
    report = await service.create_from_device(payload)
    return _envelope(report)


@router.post("/device/image", response_model=ReportEnvelope)
async def create_device_image_report(
    service: ReportServiceDep,
    image: Annotated[Optional[UploadFile], File()] = None,
    lat: Annotated[Optional[str], Form()] = None,
    lon: Annotated[Optional[str], Form()] = None,
    depth: Annotated[Optional[str], Form()] = None,
    timestamp: Annotated[Optional[str], Form()] = None,
) -> ReportEnvelope:
    """
    Create a report from the sensor unit with an image (multipart).

    The image is hosted first; on hosting failure nothing is saved and the
    response is a 502 "Image upload failed".
    """
    upload = await read_image_upload(image, get_settings().max_upload_bytes)
    report = await service.create_from_device_image(
        upload, lat=lat, lon=lon, depth=depth, timestamp=timestamp
    )
    return _envelope(report)


@router.get("/{report_id}", response_model=ReportEnvelope)
async def get_report(report_id: str, service: ReportServiceDep) -> ReportEnvelope:
    """Get a specific report by ID."""
    return _envelope(await service.get_report(report_id))


@router.post("/{report_id}/geocode", response_model=ReportEnvelope)
async def geocode_report(report_id: str, service: ReportServiceDep) -> ReportEnvelope:
    """Resolve and store the address of one report if it has none yet."""
    return _envelope(await service.geocode_report(report_id))
