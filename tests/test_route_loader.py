"""Tests for RouteLoader."""

import unittest
from unittest.mock import patch, MagicMock
import sys
from pathlib import Path

import requests

# Add src to path so we can import bustrack
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bustrack.models import Coordinate
from bustrack.record_store import InMemoryRecordStore
from bustrack.route_loader import RouteLoader

ROUTES_CSV = """route_id,stop_name,stop_lat,stop_lon
R1,Town Hall,12.9716,77.5946
R1,Market Square,12.9762,77.6033
R2,Lake View,12.9352,77.6245
"""


class TestRouteLoader(unittest.TestCase):
    """Test route CSV loading."""

    def setUp(self):
        self.store = InMemoryRecordStore()
        self.loader = RouteLoader(self.store)

    def test_load_csv(self):
        routes = self.loader._load_csv(ROUTES_CSV)

        self.assertEqual([route.route_id for route in routes], ["R1", "R2"])
        route = self.store.find_route_by_id("R1")
        self.assertEqual(route.stop_names(), ["Town Hall", "Market Square"])
        self.assertEqual(route.stops[0].coordinate, Coordinate(12.9716, 77.5946))

    def test_numeric_route_ids_stay_strings(self):
        self.loader._load_csv("route_id,stop_name,stop_lat,stop_lon\n7,Depot,1.0,2.0\n")
        self.assertIsNotNone(self.store.find_route_by_id("7"))

    def test_missing_column(self):
        with self.assertRaises(ValueError):
            self.loader._load_csv("route_id,stop_name,stop_lat\nR1,Town Hall,12.97\n")

    def test_rows_with_missing_values_are_skipped(self):
        csv_data = ROUTES_CSV + "R2,Tech Park,,77.6271\n"
        self.loader._load_csv(csv_data)
        self.assertEqual(self.store.find_route_by_id("R2").stop_names(), ["Lake View"])

    def test_load_from_file(self):
        path = Path(__file__).parent.parent / "examples" / "routes.csv"
        routes = self.loader.load_from_file(str(path))
        self.assertGreater(len(routes), 0)
        self.assertIsNotNone(self.store.find_route_by_id("R1"))

    @patch("bustrack.route_loader.requests.get")
    def test_load_from_url(self, mock_get):
        mock_response = MagicMock()
        mock_response.text = ROUTES_CSV
        mock_get.return_value = mock_response

        routes = self.loader.load_from_url("http://test/routes.csv")

        self.assertEqual(len(routes), 2)
        mock_get.assert_called_once_with("http://test/routes.csv", timeout=30)
        mock_response.raise_for_status.assert_called_once()

    @patch("bustrack.route_loader.requests.get")
    def test_load_from_url_http_error(self, mock_get):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("404")
        mock_get.return_value = mock_response

        with self.assertRaises(requests.HTTPError):
            self.loader.load_from_url("http://test/missing.csv")
        self.assertEqual(self.store.routes, {})


if __name__ == "__main__":
    unittest.main()
