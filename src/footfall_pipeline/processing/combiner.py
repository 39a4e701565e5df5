"""
Cross-location aggregation module.

Combines the transformed series of all selected locations into one.
"""

import logging
import statistics
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from ..models import AggregatedSeries, LocationTransformedSeries, TransformedSeries
from .transformer import calculate_affluence


class LocationCombiner:
    """Sum or average transformed series across locations."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize combiner.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def combine(self, series: List[LocationTransformedSeries]) -> AggregatedSeries:
        """
        Combine per-location series bucket by bucket.

        Buckets are matched on their start instant, not on their position:
        a location may lack buckets anywhere in the window (for instance a
        sensor that reported nothing for part of it). The combined timeline
        is the sorted union of every location's bucket starts. Counts,
        returning customers and outside traffic are summed, with a missing
        bucket counting as zero. Visit duration is averaged over locations
        reporting a positive value for the bucket. Affluence is recomputed
        from the summed totals.

        Args:
            series: Per-location transformed series

        Returns:
            Combined series; empty when no locations are given
        """
        labels: Dict[datetime, str] = {}
        for location in series:
            for start, label in zip(location.data.bucket_starts, location.data.timestamps):
                labels.setdefault(start, label)

        starts = sorted(labels)
        positions = [
            {start: i for i, start in enumerate(location.data.bucket_starts)}
            for location in series
        ]

        partial = [
            location.location_id
            for location, index in zip(series, positions)
            if len(index) < len(starts)
        ]
        if partial:
            self.logger.debug(
                f"Locations {partial} lack some of the {len(starts)} buckets; "
                f"missing buckets count as zero"
            )

        count_in, count_out, returning, traffic, duration, affluence = [], [], [], [], [], []
        for start in starts:
            rows: List[Tuple[TransformedSeries, int]] = [
                (location.data, index[start])
                for location, index in zip(series, positions)
                if start in index
            ]
            total_in = sum(data.count_in[i] for data, i in rows)
            total_traffic = sum(data.outside_traffic[i] for data, i in rows)
            reporting = [
                data.avg_visit_duration[i] for data, i in rows
                if data.avg_visit_duration[i] and data.avg_visit_duration[i] > 0
            ]

            count_in.append(total_in)
            count_out.append(sum(data.count_out[i] for data, i in rows))
            returning.append(sum(data.returning_customers[i] for data, i in rows))
            traffic.append(total_traffic)
            duration.append(statistics.mean(reporting) if reporting else 0)
            affluence.append(calculate_affluence(total_in, total_traffic))

        return AggregatedSeries(
            bucket_starts=starts,
            timestamps=[labels[start] for start in starts],
            count_in=count_in,
            count_out=count_out,
            returning_customers=returning,
            avg_visit_duration=duration,
            outside_traffic=traffic,
            affluence=affluence,
        )


def combine_locations(series: List[LocationTransformedSeries]) -> AggregatedSeries:
    """Functional shortcut for :meth:`LocationCombiner.combine`."""
    return LocationCombiner().combine(series)
