"""
Sensor sample data models.

Contains DTOs for raw sensor readings and per-location series.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Optional, Union


@dataclass(frozen=True)
class Sample:
    """One sensor reading (or one aggregated bucket) at a timestamp."""

    timestamp: datetime  # timezone-aware, UTC
    count_in: Union[int, float]
    count_out: Union[int, float]
    returning_customer: Optional[float] = None  # % of returning visitors
    avg_visit_duration: Optional[float] = None  # minutes
    outside_traffic: Optional[Union[int, float]] = None

    def __post_init__(self):
        if self.timestamp.tzinfo is None:
            raise ValueError("Sample timestamp must be timezone-aware")
        if self.count_in < 0 or self.count_out < 0:
            raise ValueError(
                f"Counts must be non-negative (in={self.count_in}, out={self.count_out})"
            )

    @classmethod
    def synthetic(cls, timestamp: datetime) -> "Sample":
        """Zero-valued placeholder used to fill a missing cadence tick."""
        return cls(timestamp=timestamp, count_in=0, count_out=0)

    @property
    def has_extended_attributes(self) -> bool:
        return (
            self.returning_customer is not None
            or self.avg_visit_duration is not None
            or self.outside_traffic is not None
        )


@dataclass
class LocationSeries:
    """Ordered samples for one physical location."""

    location_id: int
    location_name: str
    samples: List[Sample] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.samples)

    def with_samples(self, samples: List[Sample]) -> "LocationSeries":
        """Copy of this series carrying a different sample list."""
        return replace(self, samples=list(samples))

    @property
    def first_timestamp(self) -> Optional[datetime]:
        return self.samples[0].timestamp if self.samples else None

    @property
    def last_timestamp(self) -> Optional[datetime]:
        return self.samples[-1].timestamp if self.samples else None
