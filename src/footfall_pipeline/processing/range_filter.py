"""
Range filtering module.

Clips per-location series to the window (or hours of day) the caller is viewing.
"""

from typing import List

from ..core import DateUtils
from ..models import LocationSeries, TimeWindow


def filter_by_window(
    series: List[LocationSeries],
    window: TimeWindow
) -> List[LocationSeries]:
    """
    Keep only samples whose timestamp lies within [window.start, window.end].

    Args:
        series: Per-location series (left untouched)
        window: Requested window, both bounds inclusive

    Returns:
        New per-location series holding the visible samples
    """
    return [
        location.with_samples(
            [s for s in location.samples if window.contains_instant(s.timestamp)]
        )
        for location in series
    ]


def filter_by_hour_range(
    series: List[LocationSeries],
    start_hour: int,
    end_hour: int,
    timezone_str: str = "UTC"
) -> List[LocationSeries]:
    """
    Keep only samples whose local hour of day is within [start_hour, end_hour].

    Used for opening-hours views, e.g. 9 to 21.

    Args:
        series: Per-location series (left untouched)
        start_hour: First hour to keep (0-23)
        end_hour: Last hour to keep (0-23), inclusive
        timezone_str: Timezone whose wall clock defines the hour

    Returns:
        New per-location series holding the samples inside the hour range
    """
    if not (0 <= start_hour <= 23 and 0 <= end_hour <= 23):
        raise ValueError(f"Hours must be within 0-23, got {start_hour}-{end_hour}")
    if start_hour > end_hour:
        raise ValueError(f"start_hour {start_hour} is after end_hour {end_hour}")

    tz = DateUtils.parse_timezone(timezone_str)

    return [
        location.with_samples([
            s for s in location.samples
            if start_hour <= s.timestamp.astimezone(tz).hour <= end_hour
        ])
        for location in series
    ]
