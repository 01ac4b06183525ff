"""Schemas for report operations."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from patchpoint.schemas.common import APIModel

# Placeholder written by an older client for "no address"
LEGACY_EMPTY_ADDRESS = "-"


def clean_address(value: Optional[str]) -> Optional[str]:
    """Map blank and legacy placeholder addresses to None."""
    if value is None:
        return None
    value = value.strip()
    if not value or value == LEGACY_EMPTY_ADDRESS:
        return None
    return value


class ReportCreate(APIModel):
    """UI submission. Coordinates are validated by the service for a stable 400."""

    gps_lat: Any = Field(None, description="Latitude")
    gps_lon: Any = Field(None, description="Longitude")
    depth_cm: Any = Field(None, description="Depth in centimetres")
    address: Optional[str] = Field(None, description="Address already known to the client")
    image_url: Optional[str] = Field(None, description="URL returned by /upload/image")


class DeviceReportCreate(BaseModel):
    """JSON submission from the Raspberry Pi sensor unit (snake_case on the wire)."""

    gps_lat: Any = None
    gps_lon: Any = None
    lidar_cm: Any = Field(None, description="LiDAR depth reading in centimetres")
    image: Optional[str] = Field(None, description="Already hosted image URL")
    timestamp: Any = Field(None, description="Unix seconds, Unix ms or ISO string")


class ReportResponse(APIModel):
    """A single report as served to the frontend."""

    id: UUID
    gps_lat: float
    gps_lon: float
    depth_cm: Optional[float] = None
    address: Optional[str] = None
    image_url: Optional[str] = None
    timestamp: datetime
    created_by: Optional[UUID] = None
    created_at: Optional[datetime] = None

    @field_validator("address", mode="before")
    @classmethod
    def _normalize_address(cls, value: Optional[str]) -> Optional[str]:
        return clean_address(value)


class ReportEnvelope(APIModel):
    success: bool = True
    report: ReportResponse


class ReportListResponse(APIModel):
    success: bool = True
    reports: list[ReportResponse]
