"""
Time-bucket aggregation module.

Groups raw 5-minute samples into coarser buckets per location.
"""

import logging
import statistics
from datetime import datetime
from typing import Dict, Any, List, Optional

from ..core import constants, DateUtils
from ..models import Sample, LocationSeries
from .grouping import get_strategy

AGGREGATION_MODES = ("sum", "avg")


class TimeBucketAggregator:
    """Aggregate samples into fixed time buckets."""

    def __init__(
        self,
        timezone_str: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize time-bucket aggregator.

        Args:
            timezone_str: Timezone whose wall clock defines bucket boundaries
            logger: Logger instance
        """
        self.tz = DateUtils.parse_timezone(timezone_str)
        self.logger = logger or logging.getLogger(__name__)

    def bucket_start(self, timestamp: datetime, group_by: str) -> datetime:
        """
        Get the UTC start of the bucket containing ``timestamp``.

        Args:
            timestamp: Aware sample timestamp
            group_by: Granularity name (e.g. '15min', 'hour', 'day')

        Returns:
            Aware UTC datetime of the bucket start
        """
        strategy = get_strategy(group_by)
        local = timestamp.astimezone(self.tz).replace(tzinfo=None)
        key = strategy.get_group_key(local)
        return DateUtils.to_utc(DateUtils.localize_wall_time(key, self.tz))

    def aggregate(
        self,
        samples: List[Sample],
        group_by: str,
        aggregation: str = "sum"
    ) -> List[Sample]:
        """
        Aggregate samples into buckets.

        Counts in and out are flows, so they are always summed. Outside
        traffic follows ``aggregation``. Visit duration and returning
        customer share are rates and are always averaged over the samples
        that report them.

        Args:
            samples: Samples for one location
            group_by: Granularity name
            aggregation: 'sum' or 'avg'

        Returns:
            One sample per bucket, ascending by bucket start
        """
        if aggregation not in AGGREGATION_MODES:
            raise ValueError(
                f"Unknown aggregation '{aggregation}'. Available: {', '.join(AGGREGATION_MODES)}"
            )
        get_strategy(group_by)

        if not samples:
            return []

        groups: Dict[datetime, Dict[str, Any]] = {}

        for sample in samples:
            key = self.bucket_start(sample.timestamp, group_by)
            group = groups.setdefault(key, {
                "count_in": 0,
                "count_out": 0,
                "outside_traffic": [],
                "avg_visit_duration": [],
                "returning_customer": [],
            })
            group["count_in"] += sample.count_in
            group["count_out"] += sample.count_out
            if sample.outside_traffic is not None:
                group["outside_traffic"].append(sample.outside_traffic)
            if sample.avg_visit_duration is not None:
                group["avg_visit_duration"].append(sample.avg_visit_duration)
            if sample.returning_customer is not None:
                group["returning_customer"].append(sample.returning_customer)

        buckets = []
        for key in sorted(groups):
            group = groups[key]
            traffic = group["outside_traffic"]
            if not traffic:
                outside_traffic = None
            elif aggregation == "avg":
                outside_traffic = statistics.mean(traffic)
            else:
                outside_traffic = sum(traffic)

            buckets.append(Sample(
                timestamp=key,
                count_in=group["count_in"],
                count_out=group["count_out"],
                returning_customer=_mean_or_none(group["returning_customer"]),
                avg_visit_duration=_mean_or_none(group["avg_visit_duration"]),
                outside_traffic=outside_traffic,
            ))

        self.logger.debug(
            f"Aggregated {len(samples)} samples into {len(buckets)} {group_by} buckets"
        )
        return buckets

    def aggregate_series(
        self,
        series: List[LocationSeries],
        group_by: str,
        aggregation: str = "sum"
    ) -> List[LocationSeries]:
        """
        Aggregate every location series independently.

        Args:
            series: Per-location series
            group_by: Granularity name
            aggregation: 'sum' or 'avg'

        Returns:
            Per-location bucketed series
        """
        return [
            location.with_samples(self.aggregate(location.samples, group_by, aggregation))
            for location in series
        ]


def _mean_or_none(values: List[float]) -> Optional[float]:
    return statistics.mean(values) if values else None
