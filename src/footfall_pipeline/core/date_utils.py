"""
Date and timezone utilities.

Centralizes all date/time operations with proper timezone handling.
Samples are carried as timezone-aware UTC datetimes; wall-clock boundaries
(start of day, bucket floors) are computed in a configured timezone.
"""

import logging
from datetime import datetime, time, timedelta
from typing import Optional
import pytz
from pytz.tzinfo import BaseTzInfo


class DateUtils:
    """Utilities for date and timezone handling."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize date utilities.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_timezone(timezone_str: str) -> BaseTzInfo:
        """
        Parse timezone string to pytz timezone object.

        Args:
            timezone_str: Timezone string (e.g., 'Europe/Madrid', 'UTC')

        Returns:
            pytz timezone object

        Raises:
            ValueError: If timezone is invalid
        """
        try:
            return pytz.timezone(timezone_str)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValueError(f"Invalid timezone: {timezone_str}")

    @staticmethod
    def to_utc(dt: datetime) -> datetime:
        """
        Convert datetime to UTC.

        Args:
            dt: Datetime object (can be naive or aware)

        Returns:
            Datetime in UTC (timezone-aware)
        """
        if dt.tzinfo is None:
            # Assume UTC if no timezone
            return pytz.UTC.localize(dt)
        return dt.astimezone(pytz.UTC)

    @staticmethod
    def parse_timestamp(value: str) -> datetime:
        """
        Parse an ISO-8601 timestamp from the API into an aware UTC datetime.

        Accepts a trailing 'Z' designator; naive values are taken as UTC.

        Args:
            value: ISO-8601 string (e.g., '2024-08-08T10:05:00.000Z')

        Returns:
            Timezone-aware datetime in UTC

        Raises:
            ValueError: If the string is not a valid timestamp
        """
        if not value:
            raise ValueError("Empty timestamp")
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        return DateUtils.to_utc(parsed)

    @staticmethod
    def to_iso_utc(dt: datetime) -> str:
        """
        Format a datetime as an ISO-8601 string in UTC.

        Args:
            dt: Datetime object (naive values are taken as UTC)

        Returns:
            ISO format string (e.g., '2024-08-08T00:00:00+00:00')
        """
        return DateUtils.to_utc(dt).isoformat()

    @staticmethod
    def localize_wall_time(naive: datetime, tz: BaseTzInfo) -> datetime:
        """
        Attach a timezone to a naive wall-clock datetime.

        Args:
            naive: Naive datetime expressed in the wall clock of ``tz``
            tz: pytz timezone

        Returns:
            Timezone-aware datetime

        Raises:
            ValueError: If datetime is already aware
        """
        if naive.tzinfo is not None:
            raise ValueError("Datetime is already timezone-aware")
        return tz.normalize(tz.localize(naive))

    @classmethod
    def start_of_day(cls, dt: datetime, timezone_str: str) -> datetime:
        """
        Get 00:00:00.000 of the day containing ``dt`` in the given timezone.

        Args:
            dt: Datetime (naive values are taken as UTC)
            timezone_str: Timezone string

        Returns:
            Timezone-aware datetime at the start of the local day
        """
        tz = cls.parse_timezone(timezone_str)
        local = cls.to_utc(dt).astimezone(tz)
        return cls.localize_wall_time(datetime.combine(local.date(), time.min), tz)

    @classmethod
    def end_of_day(cls, dt: datetime, timezone_str: str) -> datetime:
        """
        Get 23:59:59.999 of the day containing ``dt`` in the given timezone.

        Millisecond precision matches the resolution the dashboard works in.

        Args:
            dt: Datetime (naive values are taken as UTC)
            timezone_str: Timezone string

        Returns:
            Timezone-aware datetime at the end of the local day
        """
        tz = cls.parse_timezone(timezone_str)
        local = cls.to_utc(dt).astimezone(tz)
        return cls.localize_wall_time(
            datetime.combine(local.date(), time(23, 59, 59, 999000)), tz
        )

    def default_window(
        self,
        timezone_str: str,
        days: int = 7,
        reference_time: Optional[datetime] = None
    ) -> tuple:
        """
        Get the initial dashboard window: the last ``days`` days including today.

        Args:
            timezone_str: Timezone string
            days: Number of whole days in the window
            reference_time: Reference time (defaults to now in UTC)

        Returns:
            Tuple of (start, end) timezone-aware datetimes
        """
        if reference_time is None:
            reference_time = datetime.now(pytz.UTC)

        end = self.end_of_day(reference_time, timezone_str)
        start = self.start_of_day(end - timedelta(days=days - 1), timezone_str)

        self.logger.debug(
            f"Default window in {timezone_str}: {start.isoformat()} to {end.isoformat()}"
        )
        return start, end
