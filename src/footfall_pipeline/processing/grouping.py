"""
Time grouping strategies.

Each strategy floors a local wall-clock datetime to the start of its bucket.
"""

from datetime import datetime, timedelta
from typing import Dict


class TimeGroupingStrategy:
    """Base class for bucket key derivation."""

    name = ""

    def get_group_key(self, local: datetime) -> datetime:
        """
        Floor a naive local datetime to the start of its bucket.

        Args:
            local: Naive datetime in the wall clock of the display timezone

        Returns:
            Naive local datetime of the bucket start
        """
        raise NotImplementedError


class MinuteGroupingStrategy(TimeGroupingStrategy):
    """Fixed N-minute buckets aligned to the top of the hour."""

    def __init__(self, minutes: int):
        if minutes <= 0 or 60 % minutes != 0:
            raise ValueError(f"Minute buckets must divide an hour, got {minutes}")
        self.minutes = minutes
        self.name = f"{minutes}min"

    def get_group_key(self, local: datetime) -> datetime:
        return local.replace(
            minute=(local.minute // self.minutes) * self.minutes,
            second=0,
            microsecond=0,
        )


class HourGroupingStrategy(TimeGroupingStrategy):
    name = "hour"

    def get_group_key(self, local: datetime) -> datetime:
        return local.replace(minute=0, second=0, microsecond=0)


class DayGroupingStrategy(TimeGroupingStrategy):
    name = "day"

    def get_group_key(self, local: datetime) -> datetime:
        return local.replace(hour=0, minute=0, second=0, microsecond=0)


class WeekGroupingStrategy(TimeGroupingStrategy):
    """Weeks start on Sunday."""

    name = "week"

    def get_group_key(self, local: datetime) -> datetime:
        day = local.replace(hour=0, minute=0, second=0, microsecond=0)
        # weekday(): Monday=0 .. Sunday=6
        days_since_sunday = (day.weekday() + 1) % 7
        return day - timedelta(days=days_since_sunday)


class MonthGroupingStrategy(TimeGroupingStrategy):
    name = "month"

    def get_group_key(self, local: datetime) -> datetime:
        return local.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


TIME_GROUPING_STRATEGIES: Dict[str, TimeGroupingStrategy] = {
    "5min": MinuteGroupingStrategy(5),
    "10min": MinuteGroupingStrategy(10),
    "15min": MinuteGroupingStrategy(15),
    "30min": MinuteGroupingStrategy(30),
    "hour": HourGroupingStrategy(),
    "day": DayGroupingStrategy(),
    "week": WeekGroupingStrategy(),
    "month": MonthGroupingStrategy(),
}


def get_strategy(group_by: str) -> TimeGroupingStrategy:
    """
    Look up the grouping strategy for a granularity name.

    Raises:
        ValueError: If the granularity is unknown
    """
    try:
        return TIME_GROUPING_STRATEGIES[group_by]
    except KeyError:
        raise ValueError(
            f"Unknown granularity '{group_by}'. "
            f"Available: {', '.join(TIME_GROUPING_STRATEGIES)}"
        )
