"""Cloudinary image hosting client."""

import asyncio
import io
from typing import Any, Optional

import cloudinary.uploader

from patchpoint.exceptions import ImageUploadError
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)


class CloudinaryClient:
    """Uploads images to Cloudinary and returns their public HTTPS URL."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "patchpoint/pi",
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _upload_sync(self, content: bytes, filename: str, folder: str) -> dict[str, Any]:
        """Blocking SDK upload; credentials are passed per call, not via global config."""
        stream = io.BytesIO(content)
        stream.name = filename
        return cloudinary.uploader.upload(
            stream,
            folder=folder,
            resource_type="image",
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
            timeout=self.timeout,
        )

    async def upload_image(
        self,
        content: bytes,
        filename: str,
        content_type: Optional[str] = None,
        folder: Optional[str] = None,
    ) -> str:
        """
        Upload image bytes.

        Args:
            content: Raw image bytes
            filename: Original filename (informational)
            content_type: MIME type reported by the uploader
            folder: Target folder, defaults to the configured one

        Returns:
            ``secure_url`` of the hosted image

        Raises:
            ImageUploadError: If the host is unreachable, rejects the upload, or
                answers without a URL
        """
        if not self.configured:
            raise ImageUploadError(details={"reason": "image host not configured"})

        target_folder = folder or self.folder
        log.debug(
            "uploading image",
            filename=filename,
            content_type=content_type,
            size=len(content),
            folder=target_folder,
        )

        loop = asyncio.get_running_loop()
        try:
            result = await loop.run_in_executor(
                None, self._upload_sync, content, filename, target_folder
            )
        except Exception as e:
            log.error("image upload failed", error=str(e), error_type=type(e).__name__)
            raise ImageUploadError(details={"error_type": type(e).__name__})

        secure_url = result.get("secure_url") if isinstance(result, dict) else None
        if not secure_url:
            log.error("image upload returned no url", body=str(result)[:500])
            raise ImageUploadError(details={"reason": "no secure_url in response"})

        log.info("image uploaded", url=secure_url, filename=filename)
        return secure_url
