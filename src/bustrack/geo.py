"""Great-circle distance helpers."""

import math

from .models import Coordinate

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinate, b: Coordinate) -> float:
    """
    Calculate the great-circle distance between two coordinates using the
    haversine formula.

    Values outside the geographic ranges are computed, not rejected.

    Args:
        a: First coordinate in decimal degrees.
        b: Second coordinate in decimal degrees.

    Returns:
        Distance in kilometers.
    """
    lat1, lon1, lat2, lon2 = map(math.radians, [a.latitude, a.longitude, b.latitude, b.longitude])

    dlat = lat2 - lat1
    dlon = lon2 - lon1
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # Clamp against rounding drift past 1.0 for near-antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
