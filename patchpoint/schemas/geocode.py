"""Schemas for reverse geocoding lookups."""

from typing import Optional

from patchpoint.schemas.common import APIModel


class AddressComponents(APIModel):
    road: Optional[str] = None
    area: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    full_address: Optional[str] = None


class ReverseGeocodeResponse(APIModel):
    success: bool = True
    address: AddressComponents
