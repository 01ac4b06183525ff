"""OpenStreetMap Nominatim reverse geocoding client."""

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)

from patchpoint.utils.logger import get_logger

log = get_logger(__name__)
_tenacity_logger = logging.getLogger(f"{__name__}.retry")


class GeocoderUnavailableError(Exception):
    """Provider is rate limiting us or failing server-side (retryable)."""


@dataclass(frozen=True)
class GeocodeResult:
    """Address components from one reverse lookup.

    ``resolved`` is False when the lookup itself failed (network, HTTP or parse
    error); every field is None in that case.
    """

    road: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postcode: Optional[str] = None
    full_address: Optional[str] = None
    resolved: bool = False

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "GeocodeResult":
        """Map a Nominatim ``format=json`` body onto address components."""
        addr = data.get("address") or {}
        if not isinstance(addr, dict):
            addr = {}
        return cls(
            road=_first(addr, "road"),
            area=_first(addr, "suburb", "neighbourhood", "hamlet"),
            city=_first(addr, "city", "town", "village"),
            state=_first(addr, "state"),
            postcode=_first(addr, "postcode"),
            full_address=_clean(data.get("display_name")),
            resolved=True,
        )

    @property
    def formatted(self) -> Optional[str]:
        """Provider's full address, else the known components joined in order."""
        if self.full_address:
            return self.full_address
        parts = [p for p in (self.road, self.area, self.city, self.state, self.postcode) if p]
        return ", ".join(parts) if parts else None


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first(addr: dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = _clean(addr.get(key))
        if value:
            return value
    return None


class NominatimClient:
    """Client for the Nominatim ``/reverse`` endpoint."""

    def __init__(
        self,
        base_url: str = "https://nominatim.openstreetmap.org/reverse",
        user_agent: str = "PatchPoint/1.0",
        timeout: float = 10.0,
    ):
        """
        Initialize Nominatim client.

        Args:
            base_url: Reverse endpoint URL (self-hosted instances work too)
            user_agent: Identifying User-Agent, mandatory under the OSM usage policy
            timeout: Per-request timeout in seconds
        """
        self.base_url = base_url
        self.user_agent = user_agent
        self.timeout = timeout

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_random_exponential(multiplier=0.5, max=4),
        retry=retry_if_exception_type(
            (GeocoderUnavailableError, httpx.TransportError)
        ),
        before_sleep=before_sleep_log(_tenacity_logger, logging.WARNING),
        reraise=True,
    )
    async def _fetch(self, lat: float, lon: float) -> dict[str, Any]:
        """Single lookup with bounded, jittered retry on transient failures."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                self.base_url,
                params={"lat": str(lat), "lon": str(lon), "format": "json"},
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )

            if response.status_code == 429 or response.status_code >= 500:
                raise GeocoderUnavailableError(
                    f"Nominatim returned {response.status_code}"
                )

            response.raise_for_status()
            data = response.json()

        if not isinstance(data, dict):
            raise ValueError("Unexpected Nominatim response body")
        return data

    async def reverse(self, lat: float, lon: float) -> GeocodeResult:
        """
        Reverse geocode a coordinate pair.

        Never raises: on any failure returns a result with every field None and
        ``resolved=False`` so callers can apply their own fallback.
        """
        try:
            data = await self._fetch(lat, lon)
        except Exception as e:
            log.warning(
                "reverse geocoding failed",
                lat=lat,
                lon=lon,
                error=str(e),
                error_type=type(e).__name__,
            )
            return GeocodeResult()

        result = GeocodeResult.from_response(data)
        log.debug("reverse geocoded", lat=lat, lon=lon, address=result.formatted)
        return result
