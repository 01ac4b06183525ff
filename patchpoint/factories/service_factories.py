"""Factory functions for stateless services."""

from functools import lru_cache
from pathlib import Path

from patchpoint.config import get_settings
from patchpoint.factories.client_factories import get_nominatim_client
from patchpoint.services.address_service import AddressResolver
from patchpoint.services.map_archive_service import MapArchiveService


@lru_cache(maxsize=1)
def get_address_resolver() -> AddressResolver:
    """Create singleton address resolver over the Nominatim client."""
    return AddressResolver(get_nominatim_client())


@lru_cache(maxsize=1)
def get_map_archive_service() -> MapArchiveService:
    """Create singleton map archive service rooted at the upload directory."""
    return MapArchiveService(Path(get_settings().upload_dir))
