import math
from typing import Sequence

# IUGG mean Earth radius
EARTH_RADIUS_M = 6371008.8


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance in Meters."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (math.sin(d_lat / 2) * math.sin(d_lat / 2) +
         math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) * math.sin(d_lon / 2))
    # rounding can push a past 1 for near-antipodal points (NaN passes through)
    if a > 1.0:
        a = 1.0
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def geodesic_distance_km(start: Sequence[float], end: Sequence[float]) -> float:
    """
    Great-circle distance between two GeoJSON positions.

    Args:
        start, end: (longitude, latitude) pairs in decimal degrees.

    Returns:
        Distance in kilometres. NaN if either position is malformed.
    """
    lon1, lat1 = start[0], start[1]
    lon2, lat2 = end[0], end[1]
    return haversine_distance(lat1, lon1, lat2, lon2) / 1000.0


def to_float(value) -> float:
    """Coerces a raw JSON number (or numeric string) to float, NaN when it isn't one."""
    if isinstance(value, bool) or value is None:
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def to_timestamp_ms(value):
    """Parses `timestampMs` ("1500000000000" or 1500000000000) into an int, None if malformed."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        pass
    number = to_float(value)
    if math.isnan(number) or math.isinf(number):
        return None
    return int(number)
