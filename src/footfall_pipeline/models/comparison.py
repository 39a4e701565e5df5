"""
Period comparison data models.
"""

from dataclasses import dataclass
from enum import Enum

from .window import TimeWindow


class Trend(str, Enum):
    """Direction of change between two periods."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class ComparisonPeriods:
    """Current window and the equal-length window immediately before it."""

    current: TimeWindow
    previous: TimeWindow


@dataclass(frozen=True)
class MetricComparison:
    """Headline metric compared between current and previous period."""

    current: float
    previous: float
    delta: float
    delta_percentage: float
    trend: Trend
