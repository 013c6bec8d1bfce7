"""Tests for VehicleFeedClient."""

import unittest
from unittest.mock import patch, MagicMock
from datetime import datetime, timezone
import sys
from pathlib import Path

from google.transit import gtfs_realtime_pb2

# Add src to path so we can import bustrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bustrack.vehicle_feed import VehicleFeedClient


def _create_feed(vehicles, header_timestamp=0) -> bytes:
    """Build a GTFS-Realtime feed from (vehicle_id, lat, lon, timestamp) tuples."""
    feed = gtfs_realtime_pb2.FeedMessage()
    feed.header.gtfs_realtime_version = "2.0"
    if header_timestamp:
        feed.header.timestamp = header_timestamp

    for i, (vehicle_id, lat, lon, timestamp) in enumerate(vehicles):
        entity = feed.entity.add()
        entity.id = str(i)
        entity.vehicle.vehicle.id = vehicle_id
        entity.vehicle.position.latitude = lat
        entity.vehicle.position.longitude = lon
        if timestamp:
            entity.vehicle.timestamp = timestamp

    return feed.SerializeToString()


class TestVehicleFeedClient(unittest.TestCase):
    """Test GTFS-Realtime vehicle position fetching."""

    def _mock_response(self, mock_get, content: bytes):
        mock_response = MagicMock()
        mock_response.content = content
        mock_get.return_value = mock_response
        return mock_response

    @patch("bustrack.vehicle_feed.requests.get")
    def test_tracked_vehicle_position(self, mock_get):
        self._mock_response(mock_get, _create_feed([
            ("bus-1", 12.9, 77.5, 1700000000),
            ("bus-2", 12.98, 77.6, 1700000100),
        ]))
        client = VehicleFeedClient("http://test", vehicle_id="bus-2")

        sample = client.get_vehicle_position()

        self.assertAlmostEqual(sample.coordinate.latitude, 12.98, places=4)
        self.assertAlmostEqual(sample.coordinate.longitude, 77.6, places=4)
        self.assertEqual(sample.timestamp, datetime.fromtimestamp(1700000100, tz=timezone.utc))

    @patch("bustrack.vehicle_feed.requests.get")
    def test_first_vehicle_when_no_id(self, mock_get):
        self._mock_response(mock_get, _create_feed([
            ("bus-1", 12.9, 77.5, 1700000000),
            ("bus-2", 12.98, 77.6, 1700000100),
        ]))
        sample = VehicleFeedClient("http://test").get_vehicle_position()
        self.assertAlmostEqual(sample.coordinate.latitude, 12.9, places=4)

    @patch("bustrack.vehicle_feed.requests.get")
    def test_header_timestamp_fallback(self, mock_get):
        self._mock_response(mock_get, _create_feed([("bus-1", 12.9, 77.5, 0)], header_timestamp=1700000500))
        sample = VehicleFeedClient("http://test").get_vehicle_position()
        self.assertEqual(sample.timestamp, datetime.fromtimestamp(1700000500, tz=timezone.utc))

    @patch("bustrack.vehicle_feed.requests.get")
    def test_vehicle_not_in_feed(self, mock_get):
        self._mock_response(mock_get, _create_feed([("bus-1", 12.9, 77.5, 1700000000)]))
        client = VehicleFeedClient("http://test", vehicle_id="bus-9")
        self.assertIsNone(client.get_vehicle_position())

    @patch("bustrack.vehicle_feed.requests.get")
    def test_malformed_feed(self, mock_get):
        self._mock_response(mock_get, b"not a protobuf")
        self.assertIsNone(VehicleFeedClient("http://test").get_vehicle_position())

    @patch("bustrack.vehicle_feed.requests.get")
    def test_feed_is_cached(self, mock_get):
        self._mock_response(mock_get, _create_feed([("bus-1", 12.9, 77.5, 1700000000)]))
        client = VehicleFeedClient("http://test")

        client.get_vehicle_position()
        client.get_vehicle_position()
        self.assertEqual(mock_get.call_count, 1)

        client.clear_cache()
        client.get_vehicle_position()
        self.assertEqual(mock_get.call_count, 2)


if __name__ == "__main__":
    unittest.main()
