"""GTFS-Realtime vehicle position fetcher and parser."""

import logging
import time
from datetime import datetime, timezone
from typing import Optional, Tuple

import requests
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from .models import Coordinate, VehiclePositionSample

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 30  # seconds


class VehicleFeedClient:
    """Fetches the tracked vehicle's position from a GTFS-Realtime feed."""

    def __init__(
        self,
        feed_url: str,
        vehicle_id: Optional[str] = None,
        cache_ttl: float = DEFAULT_CACHE_TTL,
        timeout: float = 10,
    ):
        """
        Initialize the client.

        Args:
            feed_url: URL of a GTFS-Realtime VehiclePositions feed.
            vehicle_id: Vehicle to track. If None, the first vehicle in the feed is used.
            cache_ttl: Seconds to reuse a fetched feed before downloading again.
            timeout: Request timeout in seconds.
        """
        self.feed_url = feed_url
        self.vehicle_id = vehicle_id
        self.timeout = timeout
        self._cache_ttl = cache_ttl
        self._cache: Optional[Tuple[bytes, float]] = None  # (data, fetched_at)

    def get_vehicle_position(self) -> Optional[VehiclePositionSample]:
        """
        Get the latest position of the tracked vehicle.

        Returns:
            VehiclePositionSample, or None if the feed has no usable position
            for the vehicle.
        """
        feed_data = self._fetch_feed()
        return self._parse_vehicle_position(feed_data)

    def _fetch_feed(self) -> bytes:
        """
        Fetch and cache the feed.

        Returns:
            Raw protobuf bytes.
        """
        now = time.time()
        if self._cache is not None:
            data, fetched_at = self._cache
            if now - fetched_at < self._cache_ttl:
                logger.debug(f"Using cached data for {self.feed_url}")
                return data

        logger.debug(f"Fetching {self.feed_url}")
        try:
            response = requests.get(self.feed_url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to fetch {self.feed_url}: {e}")
            raise

        self._cache = (response.content, now)
        return response.content

    def clear_cache(self) -> None:
        """Manually clear the cache."""
        self._cache = None

    def _parse_vehicle_position(self, feed_data: bytes) -> Optional[VehiclePositionSample]:
        """
        Parse the tracked vehicle's position from a GTFS-Realtime feed.

        Args:
            feed_data: Raw protobuf bytes.

        Returns:
            VehiclePositionSample, or None if not found or the feed is malformed.
        """
        feed = gtfs_realtime_pb2.FeedMessage()
        try:
            feed.ParseFromString(feed_data)
        except DecodeError as e:
            logger.error(f"Failed to parse vehicle feed: {e}")
            return None

        for entity in feed.entity:
            if not entity.HasField("vehicle"):
                continue

            vehicle = entity.vehicle
            if not vehicle.HasField("position"):
                continue

            if self.vehicle_id is not None and vehicle.vehicle.id != self.vehicle_id:
                continue

            # Feed timestamps are POSIX seconds; fall back to the header, then now
            if vehicle.timestamp:
                timestamp = datetime.fromtimestamp(vehicle.timestamp, tz=timezone.utc)
            elif feed.header.timestamp:
                timestamp = datetime.fromtimestamp(feed.header.timestamp, tz=timezone.utc)
            else:
                timestamp = datetime.now(timezone.utc)

            return VehiclePositionSample(
                coordinate=Coordinate(vehicle.position.latitude, vehicle.position.longitude),
                timestamp=timestamp,
            )

        logger.debug(f"No position for vehicle {self.vehicle_id or '<any>'} in feed")
        return None
