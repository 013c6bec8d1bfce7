"""BusTrack - Nearest-stop matching and arrival estimates for a tracked bus."""

__version__ = "0.1.0"

from .models import (
    Coordinate,
    Stop,
    Route,
    UserRegistration,
    VehiclePositionSample,
    StopMatch,
    EtaEstimate,
    RegistrationRequest,
    RegistrationResult,
)
from .exceptions import (
    BusTrackError,
    ValidationError,
    RouteNotFound,
    NoBusesNearby,
    NoUserFound,
    NoVehiclePositionFound,
    PersistenceError,
)
from .geo import distance_km
from .stop_matcher import find_nearest_stop
from .eta import estimate_eta
from .record_store import RecordStore, InMemoryRecordStore
from .route_loader import RouteLoader
from .vehicle_feed import VehicleFeedClient
from .bus_tracker import BusTracker

__all__ = [
    "BusTracker",
    "RouteLoader",
    "VehicleFeedClient",
    "RecordStore",
    "InMemoryRecordStore",
    "distance_km",
    "find_nearest_stop",
    "estimate_eta",
    "Coordinate",
    "Stop",
    "Route",
    "UserRegistration",
    "VehiclePositionSample",
    "StopMatch",
    "EtaEstimate",
    "RegistrationRequest",
    "RegistrationResult",
    "BusTrackError",
    "ValidationError",
    "RouteNotFound",
    "NoBusesNearby",
    "NoUserFound",
    "NoVehiclePositionFound",
    "PersistenceError",
]
