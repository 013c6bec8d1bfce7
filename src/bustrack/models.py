"""Data models for BusTrack."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping

from .exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    """A latitude/longitude pair in decimal degrees."""
    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        """Check that both values are inside the geographic ranges."""
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180


@dataclass
class Stop:
    """Represents a named stop on a route."""
    name: str
    coordinate: Coordinate


@dataclass
class Route:
    """Represents a bus route and its stops."""
    route_id: str
    stops: List[Stop] = field(default_factory=list)

    def stop_names(self) -> List[str]:
        return [stop.name for stop in self.stops]


@dataclass(frozen=True)
class UserRegistration:
    """A user waiting on a route, resolved to their nearest stop."""
    name: str
    email: str
    phone: str
    route_id: str
    coordinate: Coordinate
    resolved_stop: str
    distance_km: float
    registered_at: datetime


@dataclass(frozen=True)
class VehiclePositionSample:
    """A single reported position of the tracked vehicle."""
    coordinate: Coordinate
    timestamp: datetime


@dataclass(frozen=True)
class StopMatch:
    """Nearest stop found for a point."""
    stop: Stop
    distance_km: float


@dataclass(frozen=True)
class EtaEstimate:
    """Straight-line arrival estimate of the vehicle at a user."""
    eta_minutes: float
    distance_km: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "eta": f"{self.eta_minutes:.2f} minutes",
            "distance": f"{self.distance_km:.2f} km",
            "eta_minutes": self.eta_minutes,
            "distance_km": self.distance_km,
        }


@dataclass(frozen=True)
class RegistrationResult:
    """Outcome of a successful user registration."""
    user: UserRegistration
    resolved_stop: str
    distance_km: float

    def to_dict(self) -> Dict[str, Any]:
        """Render the registration response payload."""
        return {
            "message": "User registered successfully!",
            "user": {
                "name": self.user.name,
                "email": self.user.email,
                "phone": self.user.phone,
                "route": self.user.route_id,
                "latitude": self.user.coordinate.latitude,
                "longitude": self.user.coordinate.longitude,
                "current_stop": self.user.resolved_stop,
            },
            "closest_stop": self.resolved_stop,
            "distance_to_stop": f"{self.distance_km:.2f} km",
        }


def _required_text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        raise ValidationError(f"Field '{key}' is required")
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise ValidationError(f"Field '{key}' must be text, got {type(value).__name__}")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"Field '{key}' is required")
    return text


def _required_number(payload: Mapping[str, Any], key: str, limit: float) -> float:
    value = payload.get(key)
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"Field '{key}' is required")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Field '{key}' must be a number, got {value!r}") from None
    if math.isnan(number) or not -limit <= number <= limit:
        raise ValidationError(f"Field '{key}' must be between -{limit:g} and {limit:g}, got {value!r}")
    return number


def parse_coordinate(payload: Mapping[str, Any]) -> Coordinate:
    """
    Read a validated coordinate from the "latitude" and "longitude" keys.

    Raises:
        ValidationError: If either value is missing, non-numeric or out of range.
    """
    return Coordinate(
        _required_number(payload, "latitude", 90),
        _required_number(payload, "longitude", 180),
    )


@dataclass(frozen=True)
class RegistrationRequest:
    """Validated registration input."""
    name: str
    email: str
    phone: str
    route_id: str
    coordinate: Coordinate

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RegistrationRequest":
        """
        Build a request from a raw payload, checking every required field.

        Accepts "route" as an alias of "route_id". Coordinates may be numbers
        or numeric strings; 0 is a valid coordinate.

        Raises:
            ValidationError: If a field is missing, empty or malformed.
        """
        if not isinstance(payload, Mapping):
            raise ValidationError(f"Request body must be an object, got {type(payload).__name__}")

        if "route_id" not in payload and "route" in payload:
            payload = dict(payload, route_id=payload["route"])

        return cls(
            name=_required_text(payload, "name"),
            email=_required_text(payload, "email"),
            phone=_required_text(payload, "phone"),
            route_id=_required_text(payload, "route_id"),
            coordinate=parse_coordinate(payload),
        )
