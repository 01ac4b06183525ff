"""Factory functions for external API clients."""

from functools import lru_cache

from patchpoint.config import get_settings
from patchpoint.clients.cloudinary_client import CloudinaryClient
from patchpoint.clients.nominatim_client import NominatimClient


@lru_cache(maxsize=1)
def get_nominatim_client() -> NominatimClient:
    """
    Create singleton Nominatim reverse geocoding client.

    Returns:
        NominatimClient instance
    """
    settings = get_settings()
    return NominatimClient(
        base_url=settings.nominatim_url,
        user_agent=settings.nominatim_user_agent,
        timeout=settings.geocode_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_cloudinary_client() -> CloudinaryClient:
    """
    Create singleton Cloudinary client.

    Returns:
        CloudinaryClient instance
    """
    settings = get_settings()
    return CloudinaryClient(
        cloud_name=settings.cloudinary_cloud_name,
        api_key=settings.cloudinary_api_key,
        api_secret=settings.cloudinary_api_secret,
        folder=settings.cloudinary_folder,
        timeout=settings.cloudinary_timeout_seconds,
    )
