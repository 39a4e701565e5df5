"""
Data processing module for the footfall pipeline.

Provides gap filling, range filtering, time-bucket aggregation,
transformation, validation and cross-location combination of sensor data.
"""

import logging
from typing import List, Optional, Tuple

from ..core import constants
from ..models import (
    LocationSeries,
    LocationTransformedSeries,
    AggregatedSeries,
    TimeWindow,
)
from .gap_filler import GapFiller, fill_missing_samples
from .range_filter import filter_by_window, filter_by_hour_range
from .grouping import TIME_GROUPING_STRATEGIES, get_strategy
from .aggregator import TimeBucketAggregator, AGGREGATION_MODES
from .validator import ReturningCustomerValidator, weighted_returning_customer_average
from .transformer import DataTransformer, calculate_affluence
from .combiner import LocationCombiner, combine_locations
from .metrics import OverviewCalculator, OverviewMetrics, calculate_overview_metrics


class DataProcessor:
    """
    Unified data processor for the synchronous pipeline stages.

    Runs filter, bucket aggregation, transform and cross-location
    combination over already-resident samples.
    """

    def __init__(
        self,
        timezone_str: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize data processor.

        Args:
            timezone_str: Timezone for bucket boundaries and display labels
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.timezone_str = timezone_str
        self.aggregator = TimeBucketAggregator(timezone_str, logger)
        self.transformer = DataTransformer(timezone_str, logger)
        self.combiner = LocationCombiner(logger)

    def process(
        self,
        series: List[LocationSeries],
        window: TimeWindow,
        group_by: str = constants.DEFAULT_GROUP_BY,
        aggregation: str = constants.DEFAULT_AGGREGATION,
        hour_range: Optional[Tuple[int, int]] = None
    ) -> Tuple[List[LocationTransformedSeries], AggregatedSeries]:
        """
        Turn cached per-location samples into display series.

        Args:
            series: Per-location samples held by the cache
            window: Requested window to clip to
            group_by: Bucket granularity
            aggregation: 'sum' or 'avg'
            hour_range: Optional (start_hour, end_hour) of day to keep

        Returns:
            Tuple of (per-location transformed series, combined series)
        """
        visible = filter_by_window(series, window)
        if hour_range is not None:
            visible = filter_by_hour_range(visible, hour_range[0], hour_range[1], self.timezone_str)
        buckets = self.aggregator.aggregate_series(visible, group_by, aggregation)
        per_location: List[LocationTransformedSeries] = self.transformer.transform_series(buckets)
        combined: AggregatedSeries = self.combiner.combine(per_location)

        self.logger.debug(
            f"Processed {len(per_location)} location(s) into {len(combined)} {group_by} buckets"
        )
        return per_location, combined


__all__ = [
    "GapFiller",
    "fill_missing_samples",
    "filter_by_window",
    "filter_by_hour_range",
    "TIME_GROUPING_STRATEGIES",
    "get_strategy",
    "TimeBucketAggregator",
    "AGGREGATION_MODES",
    "ReturningCustomerValidator",
    "weighted_returning_customer_average",
    "DataTransformer",
    "calculate_affluence",
    "LocationCombiner",
    "combine_locations",
    "OverviewCalculator",
    "OverviewMetrics",
    "calculate_overview_metrics",
    "DataProcessor",
]
