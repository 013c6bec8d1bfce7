"""Errors raised by BusTrack operations."""


class BusTrackError(Exception):
    """Base class for all BusTrack errors."""


class ValidationError(BusTrackError, ValueError):
    """A required field is missing or malformed."""


class RouteNotFound(BusTrackError):
    """No route exists with the requested identifier."""

    def __init__(self, route_id: str):
        super().__init__(f"Route {route_id} not found")
        self.route_id = route_id


class NoBusesNearby(BusTrackError):
    """The nearest stop on the route is farther than the acceptance threshold."""

    def __init__(self, route_id: str, threshold_km: float):
        super().__init__(f"No stop on route {route_id} within {threshold_km} km")
        self.route_id = route_id
        self.threshold_km = threshold_km


class NoUserFound(BusTrackError):
    """No user has registered yet."""


class NoVehiclePositionFound(BusTrackError):
    """No vehicle position has been recorded yet."""


class PersistenceError(BusTrackError):
    """The record store failed; the caller may retry."""
