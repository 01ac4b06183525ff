"""Report model: a single geotagged pothole observation."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from patchpoint.database import Base

if TYPE_CHECKING:
    from patchpoint.models.comment import Comment


class Report(Base):
    """Pothole report filed from the UI or by the sensor unit."""

    __tablename__ = "reports"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    gps_lat: Mapped[float] = mapped_column(Float, nullable=False)
    gps_lon: Mapped[float] = mapped_column(Float, nullable=False)
    depth_cm: Mapped[float | None] = mapped_column(Float)

    # None until reverse geocoding has run
    address: Mapped[str | None] = mapped_column(Text)
    image_url: Mapped[str | None] = mapped_column(Text)

    # Observation time (device clock or receipt time)
    timestamp: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, index=True
    )

    # Absent for device reports
    created_by: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )

    comments: Mapped[list[Comment]] = relationship("Comment", back_populates="report")

    def __repr__(self):
        return f"<Report(id='{self.id}', lat={self.gps_lat}, lon={self.gps_lon})>"
