"""Reverse geocoding lookup router."""

from typing import Optional

from fastapi import APIRouter, Query

from patchpoint.schemas.geocode import AddressComponents, ReverseGeocodeResponse
from patchpoint.dependencies import AddressResolverDep
from patchpoint.utils.coordinates import parse_coordinates

router = APIRouter(prefix="/geocode", tags=["Geocode"])


@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    resolver: AddressResolverDep,
    lat: Optional[str] = Query(None),
    lon: Optional[str] = Query(None),
) -> ReverseGeocodeResponse:
    """Address components for a coordinate pair. Provider failures yield null fields."""
    gps_lat, gps_lon = parse_coordinates(lat, lon)
    result = await resolver.lookup(gps_lat, gps_lon)
    return ReverseGeocodeResponse(
        address=AddressComponents(
            road=result.road,
            area=result.area,
            city=result.city,
            state=result.state,
            pincode=result.postcode,
            full_address=result.full_address,
        )
    )
