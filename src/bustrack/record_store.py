"""Record store interface and an in-memory implementation."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .models import Route, UserRegistration, VehiclePositionSample

logger = logging.getLogger(__name__)


class RecordStore(ABC):
    """Persistence operations BusTrack needs from a backing store."""

    @abstractmethod
    def find_route_by_id(self, route_id: str) -> Optional[Route]:
        """Return the route with this identifier, or None."""

    @abstractmethod
    def save_route(self, route: Route) -> None:
        """Insert or replace a route."""

    @abstractmethod
    def append_vehicle_position(self, sample: VehiclePositionSample) -> None:
        """Append a vehicle position sample."""

    @abstractmethod
    def find_latest_vehicle_position(self) -> Optional[VehiclePositionSample]:
        """Return the sample with the most recent timestamp, or None."""

    @abstractmethod
    def find_latest_user_registration(self) -> Optional[UserRegistration]:
        """Return the most recently saved registration, or None."""

    @abstractmethod
    def save_user_registration(self, registration: UserRegistration) -> None:
        """Persist a user registration."""


class InMemoryRecordStore(RecordStore):
    """Keeps routes, registrations and vehicle positions in process memory."""

    def __init__(self):
        self.routes: Dict[str, Route] = {}
        self.registrations: List[UserRegistration] = []
        self.vehicle_positions: List[VehiclePositionSample] = []

    def find_route_by_id(self, route_id: str) -> Optional[Route]:
        return self.routes.get(route_id)

    def save_route(self, route: Route) -> None:
        self.routes[route.route_id] = route
        logger.debug(f"Saved route {route.route_id} with {len(route.stops)} stops")

    def append_vehicle_position(self, sample: VehiclePositionSample) -> None:
        self.vehicle_positions.append(sample)

    def find_latest_vehicle_position(self) -> Optional[VehiclePositionSample]:
        latest = None
        for sample in self.vehicle_positions:
            # >= so a later append wins on equal timestamps
            if latest is None or sample.timestamp >= latest.timestamp:
                latest = sample
        return latest

    def find_latest_user_registration(self) -> Optional[UserRegistration]:
        if not self.registrations:
            return None
        return self.registrations[-1]

    def save_user_registration(self, registration: UserRegistration) -> None:
        self.registrations.append(registration)

    def clear(self) -> None:
        """Drop all stored records."""
        self.routes.clear()
        self.registrations.clear()
        self.vehicle_positions.clear()
        logger.info("Cleared record store")
