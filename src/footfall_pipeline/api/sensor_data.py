"""
Sensor data operations for the footfall backend API.

Handles retrieval of raw footfall samples per location.
"""

import logging
from datetime import datetime
from typing import List, Dict, Any, Iterable, Optional

from ..core import DateUtils


class SensorDataAPI:
    """Sensor data-related API operations."""

    # Type hints for attributes provided by APIClient base class
    logger: logging.Logger

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Method provided by APIClient base class."""
        ...

    def get_sensor_data(
        self,
        sensor_ids: Iterable[int],
        start: datetime,
        end: datetime
    ) -> List[Dict[str, Any]]:
        """
        Get raw samples for a set of sensors, grouped by location.

        Args:
            sensor_ids: Sensor IDs
            start: Start of the range (inclusive)
            end: End of the range (inclusive)

        Returns:
            List of {location_id, location_name, data: [...]} objects

        Raises:
            ValueError: If the response body is not a list
        """
        ids = sorted(sensor_ids)
        if not ids:
            return []

        params = {
            "sensor_ids": ids,
            "from": DateUtils.to_iso_utc(start),
            "to": DateUtils.to_iso_utc(end),
        }
        self.logger.info(
            f"Fetching sensor data for sensors {ids} from {params['from']} to {params['to']}"
        )

        result = self.get("/devices/sensor-data", params=params)
        if not isinstance(result, list):
            raise ValueError(
                f"Expected a list of locations, got {type(result).__name__}"
            )
        return result
