"""Route definition loader."""

import io
import logging
from typing import Dict, List

import pandas as pd
import requests

from .models import Coordinate, Route, Stop
from .record_store import RecordStore

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["route_id", "stop_name", "stop_lat", "stop_lon"]


class RouteLoader:
    """Loads route stop lists from CSV into a record store."""

    def __init__(self, store: RecordStore, timeout: float = 30):
        """
        Initialize the loader.

        Args:
            store: Record store that receives the loaded routes.
            timeout: Seconds to wait when downloading route data.
        """
        self.store = store
        self.timeout = timeout

    def load_from_url(self, url: str) -> List[Route]:
        """Download a routes CSV and load it."""
        logger.info(f"Downloading route data from {url}")
        try:
            response = requests.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Failed to download route data: {e}")
            raise
        return self._load_csv(response.text)

    def load_from_file(self, path: str) -> List[Route]:
        """Load routes from a local CSV file."""
        logger.info(f"Loading route data from {path}")
        with open(path, "r", encoding="utf-8") as f:
            return self._load_csv(f.read())

    def _load_csv(self, csv_content: str) -> List[Route]:
        """
        Parse route CSV content and save every route to the store.

        The CSV has one row per stop with columns route_id, stop_name,
        stop_lat and stop_lon. Rows keep their file order within a route.

        Args:
            csv_content: Raw CSV text.

        Returns:
            The loaded routes in order of first appearance.

        Raises:
            ValueError: If a required column is missing.
        """
        df = pd.read_csv(io.StringIO(csv_content), dtype={"route_id": str, "stop_name": str})

        missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
        if missing:
            raise ValueError(f"Route data is missing columns: {', '.join(missing)}")

        incomplete = df[REQUIRED_COLUMNS].isna().any(axis=1)
        if incomplete.any():
            logger.warning(f"Skipping {int(incomplete.sum())} route rows with missing values")
            df = df[~incomplete]

        routes: Dict[str, Route] = {}
        for row in df.itertuples(index=False):
            route_id = str(row.route_id).strip()
            if route_id not in routes:
                routes[route_id] = Route(route_id=route_id)
            routes[route_id].stops.append(
                Stop(
                    name=str(row.stop_name).strip(),
                    coordinate=Coordinate(float(row.stop_lat), float(row.stop_lon)),
                )
            )

        for route in routes.values():
            self.store.save_route(route)

        logger.info(f"Loaded {len(routes)} routes with {len(df)} stops")
        return list(routes.values())
