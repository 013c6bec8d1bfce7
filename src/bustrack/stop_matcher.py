"""Nearest-stop search for a user's position."""

import logging
from typing import Iterable, Optional

from .geo import distance_km
from .models import Coordinate, Stop, StopMatch

logger = logging.getLogger(__name__)

# Users farther than this from every stop on the route are not served
NEARBY_STOP_THRESHOLD_KM = 1.0


def find_nearest_stop(
    stops: Iterable[Stop],
    point: Coordinate,
    threshold_km: float = NEARBY_STOP_THRESHOLD_KM,
) -> Optional[StopMatch]:
    """
    Find the stop closest to a point.

    Scans every stop; on equal distances the first stop seen wins.

    Args:
        stops: Stops of a route, in any order.
        point: The user's coordinate.
        threshold_km: Maximum accepted distance. A stop exactly at the
            threshold is accepted.

    Returns:
        StopMatch for the nearest stop, or None if there are no stops or the
        nearest one is beyond the threshold.
    """
    nearest: Optional[StopMatch] = None

    for stop in stops:
        distance = distance_km(point, stop.coordinate)
        if nearest is None or distance < nearest.distance_km:
            nearest = StopMatch(stop=stop, distance_km=distance)

    if nearest is None:
        logger.debug("No stops to match against")
        return None

    if nearest.distance_km > threshold_km:
        logger.debug(
            f"Nearest stop {nearest.stop.name} is {nearest.distance_km:.3f} km away, "
            f"beyond {threshold_km} km"
        )
        return None

    return nearest
