"""Upload router: UI images and sensor map archives."""

from typing import Annotated, Optional

from fastapi import APIRouter, File, UploadFile

from patchpoint.config import get_settings
from patchpoint.schemas.uploads import ImageUploadResponse, MapUploadResponse
from patchpoint.dependencies import (
    CloudinaryClientDep,
    CurrentUserRequired,
    MapArchiveServiceDep,
)
from patchpoint.exceptions import InvalidFileTypeError, MissingFileError
from patchpoint.utils.logger import get_logger
from patchpoint.utils.uploads import read_image_upload

log = get_logger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post("/upload/image", response_model=ImageUploadResponse)
async def upload_image(
    current_user: CurrentUserRequired,
    image_host: CloudinaryClientDep,
    image: Annotated[Optional[UploadFile], File()] = None,
) -> ImageUploadResponse:
    """Host an image for a UI report; the returned URL goes into ``imageUrl``."""
    upload = await read_image_upload(image, get_settings().max_upload_bytes)
    image_url = await image_host.upload_image(
        upload.content,
        filename=upload.filename,
        content_type=upload.content_type,
        folder="patchpoint/ui",
    )
    log.info("ui image uploaded", user_id=str(current_user.id), url=image_url)
    return ImageUploadResponse(image_url=image_url)


@router.post("/zip/upload", response_model=MapUploadResponse)
async def upload_map_archive(
    archive_service: MapArchiveServiceDep,
    file: Annotated[Optional[UploadFile], File()] = None,
) -> MapUploadResponse:
    """Upload a zip produced on the sensor unit and expose its ``pothole_map.html``."""
    if file is None or not file.filename:
        raise MissingFileError()
    if not archive_service.is_zip_filename(file.filename):
        raise InvalidFileTypeError(
            message="Only ZIP files are allowed", details={"filename": file.filename}
        )

    max_bytes = get_settings().max_upload_bytes
    content = await file.read(max_bytes + 1)
    if not content:
        raise MissingFileError("Uploaded file is empty")
    if len(content) > max_bytes:
        raise InvalidFileTypeError(
            message="Archive exceeds the upload size limit", details={"max_bytes": max_bytes}
        )

    extracted = await archive_service.store_and_extract(content)
    return MapUploadResponse(
        map_url=extracted.map_url,
        timestamp=extracted.timestamp,
        extract_dir=extracted.extract_dir,
    )
