"""Arrival time estimation from last known positions."""

from .geo import distance_km
from .models import Coordinate, EtaEstimate

AVERAGE_SPEED_KMH = 22.5


def estimate_eta(
    user_point: Coordinate,
    vehicle_point: Coordinate,
    average_speed_kmh: float = AVERAGE_SPEED_KMH,
) -> EtaEstimate:
    """
    Estimate how long the vehicle needs to reach the user.

    This is a straight-line approximation: route shape, traffic and heading
    are ignored, so the real arrival is usually later than the estimate.

    Args:
        user_point: The user's coordinate.
        vehicle_point: The vehicle's last known coordinate.
        average_speed_kmh: Assumed constant speed. Must be greater than zero;
            this is not checked.

    Returns:
        EtaEstimate with minutes until arrival and the distance in km.
    """
    distance = distance_km(user_point, vehicle_point)
    return EtaEstimate(
        eta_minutes=distance / average_speed_kmh * 60,
        distance_km=distance,
    )
