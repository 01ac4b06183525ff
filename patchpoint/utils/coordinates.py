"""Parsing of loosely typed numeric inputs (JSON numbers, form strings)."""

import math
from typing import Any, Optional

from patchpoint.exceptions import InvalidCoordinatesError, InvalidDepthError


def to_finite_float(value: Any) -> Optional[float]:
    """Return value as a finite float, or None if it is missing or not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def parse_coordinates(lat: Any, lon: Any) -> tuple[float, float]:
    """
    Validate a latitude/longitude pair.

    Raises:
        InvalidCoordinatesError: If either value is missing or not finite
    """
    gps_lat = to_finite_float(lat)
    gps_lon = to_finite_float(lon)
    if gps_lat is None or gps_lon is None:
        raise InvalidCoordinatesError(details={"lat": _echo(lat), "lon": _echo(lon)})
    return gps_lat, gps_lon


def parse_depth(depth: Any) -> Optional[float]:
    """Optional non-negative depth in centimetres."""
    if depth is None or (isinstance(depth, str) and not depth.strip()):
        return None
    value = to_finite_float(depth)
    if value is None or value < 0:
        raise InvalidDepthError(details={"depth": _echo(depth)})
    return value


def _echo(value: Any) -> Any:
    # Keep error details JSON-serializable
    if value is None or isinstance(value, (int, str)):
        return value
    return str(value)
