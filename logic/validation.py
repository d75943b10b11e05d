"""
Validation and sanitization utilities.

This module contains functions for validating marker coordinates and
sanitizing user supplied identifiers.

Author: Matthew Picone (mail@matthewpicone.com)
Date: 2025-12-17
"""

import math
from typing import Any, Optional, Tuple

from fastapi import HTTPException

LAT_LIMIT = 90.0
LNG_LIMIT = 180.0


def parse_number(value: Any) -> Optional[float]:
    """Parse a finite number from a form value.

    Args:
        value: Raw value (usually a string from a form field).

    Returns:
        The number, or None if the value is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def is_within_bounds(lat: float, lng: float) -> bool:
    """Check whether a coordinate pair is on the globe.

    Args:
        lat: Latitude.
        lng: Longitude.

    Returns:
        True if -90 <= lat <= 90 and -180 <= lng <= 180.
    """
    return -LAT_LIMIT <= lat <= LAT_LIMIT and -LNG_LIMIT <= lng <= LNG_LIMIT


def sanitise_coordinates(lat: Any, lng: Any) -> Tuple[float, float]:
    """Validate and convert a coordinate pair.

    Args:
        lat: Raw latitude.
        lng: Raw longitude.

    Returns:
        Tuple of (lat, lng) as floats.

    Raises:
        HTTPException: If either value is not numeric or is out of range.
    """
    lat_value = parse_number(lat)
    lng_value = parse_number(lng)

    if lat_value is None or lng_value is None:
        raise HTTPException(400, "Invalid coordinates")

    if not is_within_bounds(lat_value, lng_value):
        raise HTTPException(400, "Coordinates out of range")

    return lat_value, lng_value


def sanitise_int(value: Any, *, allow_none: bool = False) -> Optional[int]:
    """Sanitize and validate integer values.

    Args:
        value: Value to convert to integer.
        allow_none: Whether None is an acceptable value.

    Returns:
        Integer value or None if allowed.

    Raises:
        HTTPException: If value cannot be converted to integer.
    """
    if value is None and allow_none:
        return None
    if isinstance(value, bool):
        raise HTTPException(400, "Invalid numeric value")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise HTTPException(400, "Invalid numeric value")
