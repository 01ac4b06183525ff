"""Clients for external services."""

from patchpoint.clients.cloudinary_client import CloudinaryClient
from patchpoint.clients.nominatim_client import GeocodeResult, NominatimClient

__all__ = ["CloudinaryClient", "GeocodeResult", "NominatimClient"]
