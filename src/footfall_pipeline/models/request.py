"""
Pipeline request and result data models.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from .series import AggregatedSeries, LocationTransformedSeries
from .window import TimeWindow


@dataclass(frozen=True)
class SeriesRequest:
    """What the caller is currently looking at."""

    sensor_ids: FrozenSet[int]
    window: TimeWindow
    group_by: str = "hour"
    aggregation: str = "sum"
    hour_range: Optional[Tuple[int, int]] = None  # local opening hours, inclusive

    def __post_init__(self):
        # Accept any iterable of ids; the cache keys on the set
        object.__setattr__(self, "sensor_ids", frozenset(self.sensor_ids))


@dataclass
class SeriesResult:
    """Processed series handed back to the caller."""

    per_location: List[LocationTransformedSeries] = field(default_factory=list)
    combined: AggregatedSeries = field(default_factory=AggregatedSeries)
    loading: bool = False
    error: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return not self.combined.is_empty
