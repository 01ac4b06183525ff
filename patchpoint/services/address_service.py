"""Address resolution on top of the reverse geocoding client."""

from typing import Optional

from patchpoint.clients.nominatim_client import GeocodeResult, NominatimClient
from patchpoint.utils.logger import get_logger

log = get_logger(__name__)

# Display value stored when the provider answered but had nothing usable,
# or when a backfill lookup failed.
ADDRESS_UNAVAILABLE = "Address unavailable"


class AddressResolver:
    """Turns coordinates into a single display address. Never raises."""

    def __init__(self, client: NominatimClient):
        self.client = client

    async def lookup(self, lat: float, lon: float) -> GeocodeResult:
        """Address components for a coordinate pair (all None on failure)."""
        return await self.client.reverse(lat, lon)

    async def resolve(self, lat: float, lon: float) -> Optional[str]:
        """
        Resolve a display address.

        Returns:
            The provider's full address, the joined address components,
            ``ADDRESS_UNAVAILABLE`` when the provider had no usable fields, or
            None when the lookup failed (callers choose their own fallback)
        """
        result = await self.lookup(lat, lon)
        if not result.resolved:
            return None
        return result.formatted or ADDRESS_UNAVAILABLE
