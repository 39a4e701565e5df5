"""
Time window data model.

A window is used for the requested range, the fetched range held by the
cache, and both halves of a comparison period.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class TimeWindow:
    """Time range between two timezone-aware instants."""

    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise ValueError("TimeWindow bounds must be timezone-aware")
        if self.start > self.end:
            raise ValueError(
                f"TimeWindow start {self.start.isoformat()} is after end {self.end.isoformat()}"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, other: "TimeWindow") -> bool:
        """True when ``other`` lies entirely inside this window."""
        return self.start <= other.start and other.end <= self.end

    def contains_instant(self, instant: datetime) -> bool:
        """True when ``instant`` lies inside the closed range [start, end]."""
        return self.start <= instant <= self.end

    def union(self, other: "TimeWindow") -> "TimeWindow":
        """Smallest window covering both (min of starts, max of ends)."""
        return TimeWindow(min(self.start, other.start), max(self.end, other.end))

    def __str__(self) -> str:
        return f"[{self.start.isoformat()}, {self.end.isoformat()}]"
