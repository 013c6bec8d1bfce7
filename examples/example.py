"""Example usage of BusTracker."""

import logging
import sys
from pathlib import Path

# Add src to path so we can import bustrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bustrack import BusTracker, BusTrackError, InMemoryRecordStore, RouteLoader

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

ROUTES_CSV = Path(__file__).parent / "routes.csv"


def build_tracker() -> BusTracker:
    """Create a tracker backed by an in-memory store loaded with the sample routes."""
    store = InMemoryRecordStore()
    RouteLoader(store).load_from_file(str(ROUTES_CSV))
    return BusTracker(store)


def print_eta(route_id: str, user_lat: float, user_lon: float, bus_lat: float, bus_lon: float):
    """
    Register a rider, record a bus position and display the arrival estimate.

    Args:
        route_id: Route the rider is waiting for (e.g., "R1")
        user_lat, user_lon: Rider position
        bus_lat, bus_lon: Bus position
    """
    print(f"\n{'='*70}")
    print(f"Route {route_id}: rider at ({user_lat}, {user_lon}), bus at ({bus_lat}, {bus_lon})")
    print(f"{'='*70}\n")

    tracker = build_tracker()

    try:
        result = tracker.register_user(
            name="Example Rider",
            email="rider@example.com",
            phone="555-0100",
            route_id=route_id,
            latitude=user_lat,
            longitude=user_lon,
        )
        print(f"Closest stop: {result.resolved_stop} ({result.distance_km:.2f} km away)")

        tracker.record_vehicle_position(bus_lat, bus_lon)
        eta = tracker.compute_latest_eta()
        print(f"Bus distance: {eta.distance_km:.2f} km")
        print(f"ETA: {eta.eta_minutes:.2f} minutes")
        print("\n" + "=" * 70 + "\n")

    except BusTrackError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    if len(sys.argv) == 6:
        route, *values = sys.argv[1:]
        try:
            user_lat, user_lon, bus_lat, bus_lon = (float(v) for v in values)
        except ValueError:
            print("Coordinates must be numbers")
            sys.exit(1)
        print_eta(route, user_lat, user_lon, bus_lat, bus_lon)
    else:
        print("Usage: example.py ROUTE USER_LAT USER_LON BUS_LAT BUS_LON")
        print("Running with sample values...")
        print_eta("R1", 12.9721, 77.5937, 12.9850, 77.6050)
