"""Helpers for reading multipart uploads."""

from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile

from patchpoint.exceptions import InvalidFileTypeError, MissingFileError


@dataclass(frozen=True)
class ImageUpload:
    """Image bytes read from a multipart field."""

    content: bytes
    filename: str
    content_type: Optional[str]


async def read_image_upload(upload: Optional[UploadFile], max_bytes: int) -> ImageUpload:
    """
    Read and validate an uploaded image.

    Raises:
        MissingFileError: If no file or an empty file was sent
        InvalidFileTypeError: If the file is not an image or is too large
    """
    if upload is None or not upload.filename:
        raise MissingFileError("No image uploaded")

    content_type = upload.content_type or ""
    if content_type and not content_type.startswith("image/"):
        raise InvalidFileTypeError(
            message="Only image files are allowed",
            details={"content_type": content_type},
        )

    content = await upload.read(max_bytes + 1)
    if not content:
        raise MissingFileError("Uploaded image is empty")
    if len(content) > max_bytes:
        raise InvalidFileTypeError(
            message="Image exceeds the upload size limit",
            details={"max_bytes": max_bytes},
        )

    return ImageUpload(content=content, filename=upload.filename, content_type=content_type or None)
