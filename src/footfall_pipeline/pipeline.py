"""
Footfall pipeline session.

Answers series requests from resident data, fetching only the part of the
requested window the cache does not cover yet.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, Tuple

import pytz

from .core import constants
from .models import (
    SeriesRequest,
    SeriesResult,
    TimeWindow,
    ComparisonPeriods,
    MetricComparison,
)
from .cache import LocationCache, FetchPlan, evaluate_fetch_necessity, calculate_fetch_range
from .processing import DataProcessor, filter_by_window, get_strategy, AGGREGATION_MODES
from .algorithms import ComparisonCalculator
from .services import RangeFetcher, SampleFetchError, LastUpdatedStore

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class FootfallPipeline:
    """
    One dashboard session over a sensor selection.

    ``get_series`` is a coroutine whose only suspension point is the fetch.
    At most one fetch runs at a time: a request arriving meanwhile is
    answered from resident data with ``loading=True`` and should be
    re-issued once the fetch has finished.
    """

    def __init__(
        self,
        fetcher: RangeFetcher,
        timezone_str: str = constants.DEFAULT_TIMEZONE,
        clock: Optional[Clock] = None,
        last_updated: Optional[LastUpdatedStore] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize pipeline session.

        Args:
            fetcher: Range fetcher used to fill the cache
            timezone_str: Timezone for buckets, labels and comparison days
            clock: Zero-argument callable returning the current aware time
            last_updated: Store updated after every successful merge
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.fetcher = fetcher
        self.clock = clock or utc_now
        self.last_updated = last_updated
        self.cache = LocationCache(logger=self.logger)
        self.processor = DataProcessor(timezone_str, self.logger)
        self.comparison = ComparisonCalculator(timezone_str, self.logger)

    async def get_series(self, request: SeriesRequest) -> SeriesResult:
        """
        Produce per-location and combined series for a request.

        Args:
            request: Sensor selection, window, granularity and aggregation

        Returns:
            SeriesResult; ``error`` is set when the fetch failed, in which
            case whatever was already resident is still returned

        Raises:
            ValueError: If the granularity or aggregation is unknown
        """
        get_strategy(request.group_by)
        if request.aggregation not in AGGREGATION_MODES:
            raise ValueError(
                f"Unknown aggregation '{request.aggregation}'. "
                f"Available: {', '.join(AGGREGATION_MODES)}"
            )

        if not self.cache.matches(request.sensor_ids):
            self.logger.info(
                f"Sensor selection changed to {sorted(request.sensor_ids)}, resetting cache"
            )
            self.cache.reset(request.sensor_ids)

        if not request.sensor_ids:
            return SeriesResult()

        loading = False
        error = None

        resident = [
            sample
            for location in filter_by_window(self.cache.series, request.window)
            for sample in location.samples
        ]
        if evaluate_fetch_necessity(request.window, self.cache.fetched_window, resident, self.clock()):
            plan = calculate_fetch_range(request.window, self.cache.fetched_window)
            if plan.should_fetch:
                loading, error = await self._fetch_and_merge(request, plan)

        per_location, combined = self.processor.process(
            self.cache.series,
            request.window,
            request.group_by,
            request.aggregation,
            request.hour_range,
        )
        return SeriesResult(
            per_location=per_location,
            combined=combined,
            loading=loading,
            error=error,
        )

    async def _fetch_and_merge(
        self,
        request: SeriesRequest,
        plan: FetchPlan
    ) -> Tuple[bool, Optional[str]]:
        """
        Fetch the planned range and merge it into the cache.

        Returns:
            Tuple of (loading, error)
        """
        with self.cache.fetch_slot() as acquired:
            if not acquired:
                return True, None

            generation = self.cache.generation
            self.logger.info(
                f"Fetching {plan.window} for sensors {sorted(request.sensor_ids)}"
            )

            try:
                fetched = await self.fetcher.fetch(
                    request.sensor_ids, plan.fetch_start, plan.fetch_end
                )
            except SampleFetchError as e:
                self.logger.error(f"Error fetching sensor data: {e}")
                return False, constants.FETCH_ERROR_MESSAGE

            merged = self.cache.merge(fetched, plan.window, request.window, generation)
            if merged and self.last_updated is not None:
                self.last_updated.set(self.clock())
            return False, None

    def get_comparison(self, window: TimeWindow) -> ComparisonPeriods:
        """Equal-length period preceding ``window``."""
        return self.comparison.comparison_periods(window)

    def get_metric_comparison(self, current: float, previous: float) -> MetricComparison:
        """Compare a metric between the current and previous period."""
        return self.comparison.metric_comparison(current, previous)

    def reset(self) -> None:
        """Discard the cached selection and all of its samples."""
        self.cache.reset(frozenset())
