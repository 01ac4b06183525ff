"""Schemas for image and map archive uploads."""

from patchpoint.schemas.common import APIModel


class ImageUploadResponse(APIModel):
    success: bool = True
    image_url: str


class MapUploadResponse(APIModel):
    success: bool = True
    map_url: str
    timestamp: str
    extract_dir: str
