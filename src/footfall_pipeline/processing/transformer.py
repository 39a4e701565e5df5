"""
Transform module.

Turns bucketed per-location samples into display-ready, index-aligned series.
"""

import logging
from typing import List, Optional

from ..core import constants, DateUtils
from ..models import Sample, LocationSeries, TransformedSeries, LocationTransformedSeries
from .validator import ReturningCustomerValidator


def calculate_affluence(count_in: float, outside_traffic: Optional[float]) -> float:
    """
    Share of passers-by who walked in, as a percentage.

    Args:
        count_in: Entries in the bucket
        outside_traffic: Foot traffic passing outside (None when not reported)

    Returns:
        ``count_in / outside_traffic * 100``, or 0 when there is no traffic
    """
    if outside_traffic is None or outside_traffic <= 0:
        return 0.0
    return count_in / outside_traffic * 100


class DataTransformer:
    """Convert bucketed samples into a TransformedSeries."""

    def __init__(
        self,
        timezone_str: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize transformer.

        Args:
            timezone_str: Timezone used for display labels
            logger: Logger instance
        """
        self.tz = DateUtils.parse_timezone(timezone_str)
        self.logger = logger or logging.getLogger(__name__)
        self.validator = ReturningCustomerValidator(self.logger)

    def format_timestamp(self, sample: Sample) -> str:
        return sample.timestamp.astimezone(self.tz).strftime(constants.DISPLAY_TIMESTAMP_FORMAT)

    def transform(self, buckets: List[Sample]) -> TransformedSeries:
        """
        Transform one location's buckets.

        Args:
            buckets: Bucketed samples in ascending order

        Returns:
            Index-aligned display series
        """
        return TransformedSeries(
            bucket_starts=[b.timestamp for b in buckets],
            timestamps=[self.format_timestamp(b) for b in buckets],
            count_in=[b.count_in for b in buckets],
            count_out=[b.count_out for b in buckets],
            returning_customers=self.validator.display_values(
                [b.returning_customer for b in buckets]
            ),
            avg_visit_duration=[b.avg_visit_duration or 0 for b in buckets],
            outside_traffic=[b.outside_traffic or 0 for b in buckets],
            affluence=[calculate_affluence(b.count_in, b.outside_traffic) for b in buckets],
        )

    def transform_series(self, series: List[LocationSeries]) -> List[LocationTransformedSeries]:
        """
        Transform every location.

        Args:
            series: Per-location bucketed series

        Returns:
            Per-location transformed series
        """
        return [
            LocationTransformedSeries(
                location_id=location.location_id,
                location_name=location.location_name,
                data=self.transform(location.samples),
            )
            for location in series
        ]
