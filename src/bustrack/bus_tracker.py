"""Main BusTrack tracker class."""

import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional

from .eta import AVERAGE_SPEED_KMH, estimate_eta
from .exceptions import (
    BusTrackError,
    NoBusesNearby,
    NoUserFound,
    NoVehiclePositionFound,
    PersistenceError,
    RouteNotFound,
    ValidationError,
)
from .models import (
    EtaEstimate,
    RegistrationRequest,
    RegistrationResult,
    UserRegistration,
    VehiclePositionSample,
    parse_coordinate,
)
from .record_store import RecordStore
from .stop_matcher import NEARBY_STOP_THRESHOLD_KM, find_nearest_stop
from .vehicle_feed import VehicleFeedClient

logger = logging.getLogger(__name__)


class BusTracker:
    """
    Matches waiting users to stops and tracks the vehicle that serves them.

    This class provides methods to:
    - Register a user at the nearest stop of a route
    - Record and look up the vehicle's reported positions
    - Estimate when the vehicle reaches the most recent user
    """

    def __init__(
        self,
        store: RecordStore,
        threshold_km: float = NEARBY_STOP_THRESHOLD_KM,
        average_speed_kmh: float = AVERAGE_SPEED_KMH,
        vehicle_feed: Optional[VehicleFeedClient] = None,
    ):
        """
        Initialize the tracker.

        Args:
            store: Record store holding routes, registrations and vehicle positions.
            threshold_km: Maximum distance from a user to their resolved stop.
            average_speed_kmh: Vehicle speed assumed for ETAs. Must be greater than zero.
            vehicle_feed: Optional GTFS-Realtime client used by poll_vehicle_feed().
        """
        self.store = store
        self.threshold_km = threshold_km
        self.average_speed_kmh = average_speed_kmh
        self.vehicle_feed = vehicle_feed

    def _store_call(self, operation: str, *args):
        """Run a record store operation, surfacing failures as PersistenceError."""
        try:
            return getattr(self.store, operation)(*args)
        except BusTrackError:
            raise
        except Exception as e:
            logger.error(f"Record store {operation} failed: {e}")
            raise PersistenceError(f"Record store {operation} failed: {e}") from e

    def register_user(
        self,
        name: str,
        email: str,
        phone: str,
        route_id: str,
        latitude: float,
        longitude: float,
    ) -> RegistrationResult:
        """
        Register a user at the nearest stop of a route.

        Args:
            name: User name.
            email: User email.
            phone: User phone number.
            route_id: Identifier of the route the user is waiting for.
            latitude: User latitude in decimal degrees.
            longitude: User longitude in decimal degrees.

        Returns:
            RegistrationResult with the saved registration and resolved stop.

        Raises:
            ValidationError: If a field is missing or malformed. Raised before
                the store is touched.
            RouteNotFound: If the route does not exist.
            NoBusesNearby: If no stop on the route is within the threshold.
            PersistenceError: If the record store fails.
        """
        request = RegistrationRequest.from_payload({
            "name": name,
            "email": email,
            "phone": phone,
            "route_id": route_id,
            "latitude": latitude,
            "longitude": longitude,
        })
        return self._register(request)

    def register_payload(self, payload: Mapping[str, Any]) -> RegistrationResult:
        """Register a user from a raw request body. See register_user()."""
        return self._register(RegistrationRequest.from_payload(payload))

    def _register(self, request: RegistrationRequest) -> RegistrationResult:
        route = self._store_call("find_route_by_id", request.route_id)
        if route is None:
            raise RouteNotFound(request.route_id)

        match = find_nearest_stop(route.stops, request.coordinate, self.threshold_km)
        if match is None:
            raise NoBusesNearby(request.route_id, self.threshold_km)

        registration = UserRegistration(
            name=request.name,
            email=request.email,
            phone=request.phone,
            route_id=request.route_id,
            coordinate=request.coordinate,
            resolved_stop=match.stop.name,
            distance_km=match.distance_km,
            registered_at=datetime.now(timezone.utc),
        )
        self._store_call("save_user_registration", registration)

        logger.info(
            f"Registered {registration.name} on route {registration.route_id} "
            f"at {registration.resolved_stop} ({match.distance_km:.2f} km)"
        )
        return RegistrationResult(
            user=registration,
            resolved_stop=match.stop.name,
            distance_km=match.distance_km,
        )

    def record_vehicle_position(
        self,
        latitude: float,
        longitude: float,
        timestamp: Optional[datetime] = None,
    ) -> VehiclePositionSample:
        """
        Record a reported position of the vehicle.

        Args:
            latitude: Vehicle latitude in decimal degrees.
            longitude: Vehicle longitude in decimal degrees.
            timestamp: When the position was observed. Defaults to now (UTC).

        Returns:
            The stored VehiclePositionSample.

        Raises:
            ValidationError: If a coordinate is missing or malformed, or the
                timestamp has no timezone.
            PersistenceError: If the record store fails.
        """
        coordinate = parse_coordinate({"latitude": latitude, "longitude": longitude})
        if timestamp is not None and timestamp.tzinfo is None:
            raise ValidationError("Vehicle position timestamp must be timezone-aware")
        sample = VehiclePositionSample(
            coordinate=coordinate,
            timestamp=timestamp or datetime.now(timezone.utc),
        )
        self._store_call("append_vehicle_position", sample)
        logger.debug(f"Recorded vehicle position {coordinate.latitude}, {coordinate.longitude}")
        return sample

    def get_latest_vehicle_position(self) -> VehiclePositionSample:
        """
        Get the most recent vehicle position.

        Raises:
            NoVehiclePositionFound: If no position has been recorded.
            PersistenceError: If the record store fails.
        """
        sample = self._store_call("find_latest_vehicle_position")
        if sample is None:
            raise NoVehiclePositionFound("No vehicle position recorded")
        return sample

    def compute_latest_eta(self) -> EtaEstimate:
        """
        Estimate when the vehicle reaches the most recently registered user.

        Returns:
            EtaEstimate from the latest registration and latest vehicle position.

        Raises:
            NoUserFound: If no user has registered.
            NoVehiclePositionFound: If no position has been recorded.
            PersistenceError: If the record store fails.
        """
        user = self._store_call("find_latest_user_registration")
        if user is None:
            raise NoUserFound("No registered user")

        vehicle = self.get_latest_vehicle_position()
        return estimate_eta(user.coordinate, vehicle.coordinate, self.average_speed_kmh)

    def poll_vehicle_feed(self) -> Optional[VehiclePositionSample]:
        """
        Pull the vehicle's position from the realtime feed and record it.

        Returns:
            The recorded sample, or None if the feed had no position.

        Raises:
            ValueError: If no vehicle feed is configured.
            PersistenceError: If the record store fails.
        """
        if self.vehicle_feed is None:
            raise ValueError("No vehicle feed configured")

        sample = self.vehicle_feed.get_vehicle_position()
        if sample is None:
            logger.warning(f"Vehicle feed {self.vehicle_feed.feed_url} returned no position")
            return None

        self._store_call("append_vehicle_position", sample)
        return sample
