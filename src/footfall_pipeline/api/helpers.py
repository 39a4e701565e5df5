"""
Helper functions for API operations.

Maps sensor data payloads from the backend onto pipeline models.
"""

from typing import Dict, Any, List, Optional

from ..core import DateUtils
from ..models import Sample, LocationSeries


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def parse_sample(record: Dict[str, Any]) -> Sample:
    """
    Parse one sensor data point.

    Expected format:
    {
        "timestamp": "2024-08-08T10:05:00.000Z",
        "total_count_in": 12,
        "total_count_out": 9,
        "returningCustomer": 41,      (optional)
        "avgVisitDuration": 23.5,     (optional, minutes)
        "outsideTraffic": 130         (optional)
    }

    Args:
        record: Data point dictionary

    Returns:
        Sample with an aware UTC timestamp

    Raises:
        ValueError: If the timestamp is missing or invalid
    """
    timestamp = record.get("timestamp")
    if not timestamp:
        raise ValueError(f"Sensor data point without timestamp: {record}")

    return Sample(
        timestamp=DateUtils.parse_timestamp(timestamp),
        count_in=record.get("total_count_in") or 0,
        count_out=record.get("total_count_out") or 0,
        returning_customer=_optional_number(record.get("returningCustomer")),
        avg_visit_duration=_optional_number(record.get("avgVisitDuration")),
        outside_traffic=_optional_number(record.get("outsideTraffic")),
    )


def parse_location_series(payload: Dict[str, Any]) -> LocationSeries:
    """
    Parse one location block of the sensor data response.

    Args:
        payload: {location_id, location_name, data: [...]} dictionary

    Returns:
        LocationSeries with samples sorted by timestamp
    """
    samples = sorted(
        (parse_sample(point) for point in payload.get("data") or []),
        key=lambda sample: sample.timestamp
    )
    return LocationSeries(
        location_id=int(payload["location_id"]),
        location_name=payload.get("location_name") or f"Location {payload['location_id']}",
        samples=samples,
    )


def parse_sensor_data_response(payload: List[Dict[str, Any]]) -> List[LocationSeries]:
    """Parse every location block of a sensor data response."""
    return [parse_location_series(location) for location in payload]
