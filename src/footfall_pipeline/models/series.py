"""
Display-ready series data models.

Contains DTOs produced by the transform and cross-location stages.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import List


@dataclass
class TransformedSeries:
    """
    Index-aligned arrays for one series of buckets.

    Index i of every array refers to the same bucket.
    """

    bucket_starts: List[datetime] = field(default_factory=list)
    timestamps: List[str] = field(default_factory=list)  # display labels
    count_in: List[float] = field(default_factory=list)
    count_out: List[float] = field(default_factory=list)
    returning_customers: List[float] = field(default_factory=list)
    avg_visit_duration: List[float] = field(default_factory=list)
    outside_traffic: List[float] = field(default_factory=list)
    affluence: List[float] = field(default_factory=list)

    def __post_init__(self):
        lengths = {f.name: len(getattr(self, f.name)) for f in fields(self)}
        if len(set(lengths.values())) > 1:
            raise ValueError(f"Series arrays are not index-aligned: {lengths}")

    def __len__(self) -> int:
        return len(self.bucket_starts)

    @property
    def is_empty(self) -> bool:
        return len(self) == 0


@dataclass
class AggregatedSeries(TransformedSeries):
    """Series summed/averaged across all selected locations."""


@dataclass
class LocationTransformedSeries:
    """Transformed series for one location."""

    location_id: int
    location_name: str
    data: TransformedSeries
