"""
Overview metrics module.

Headline figures for the dashboard overview computed from a combined series.
"""

import logging
import math
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from ..models import TransformedSeries, TimeWindow
from .transformer import calculate_affluence
from .validator import ReturningCustomerValidator


@dataclass(frozen=True)
class OverviewMetrics:
    """Headline metrics over one window."""

    total_in: float
    total_out: float
    entry_rate: int  # % of movements that were entries
    avg_daily_in: int
    avg_daily_out: int
    percentage_change: int  # first bucket to last bucket, count-in
    most_crowded: Optional[Tuple[str, float]]  # (display label, count-in)
    least_crowded: Optional[Tuple[str, float]]
    returning_customer_rate: Optional[float]
    affluence: float

    def as_dict(self) -> dict:
        return {
            "totalIn": self.total_in,
            "totalOut": self.total_out,
            "entryRate": self.entry_rate,
            "avgDailyIn": self.avg_daily_in,
            "avgDailyOut": self.avg_daily_out,
            "percentageChange": self.percentage_change,
            "mostCrowdedDay": self.most_crowded,
            "leastCrowdedDay": self.least_crowded,
            "returningCustomerRate": self.returning_customer_rate,
            "affluence": self.affluence,
        }


def _half_up(value: float) -> int:
    # Dashboard figures round halves up, not to even
    return int(math.floor(value + 0.5))


def window_days(window: TimeWindow) -> int:
    """Number of (partial) days a window spans, at least 1."""
    return max(1, math.ceil(window.duration / timedelta(days=1)))


class OverviewCalculator:
    """Compute overview metrics from a transformed or combined series."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize calculator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.validator = ReturningCustomerValidator(self.logger)

    @staticmethod
    def most_and_least_crowded(
        series: TransformedSeries
    ) -> Tuple[Optional[Tuple[str, float]], Optional[Tuple[str, float]]]:
        """
        Find the busiest and quietest buckets by count-in.

        The quietest bucket is the smallest positive one; a series with no
        positive bucket falls back to its first zero bucket.

        Args:
            series: Series to scan

        Returns:
            Tuple of (most_crowded, least_crowded), each (label, value) or None
        """
        if series.is_empty:
            return None, None

        pairs = list(zip(series.timestamps, series.count_in))
        most = max(pairs, key=lambda pair: pair[1])

        positive = [pair for pair in pairs if pair[1] > 0]
        if positive:
            least = min(positive, key=lambda pair: pair[1])
        else:
            least = next((pair for pair in pairs if pair[1] == 0), None)

        return most, least

    def calculate(self, series: TransformedSeries, window: TimeWindow) -> OverviewMetrics:
        """
        Calculate overview metrics.

        Args:
            series: Combined (or single-location) series for ``window``
            window: Window the series covers

        Returns:
            OverviewMetrics
        """
        total_in = sum(series.count_in)
        total_out = sum(series.count_out)
        movements = total_in + total_out
        days = window_days(window)

        percentage_change = 0
        if len(series) > 1 and series.count_in[0] > 0:
            first, last = series.count_in[0], series.count_in[-1]
            percentage_change = _half_up((last - first) / first * 100)

        most, least = self.most_and_least_crowded(series)

        metrics = OverviewMetrics(
            total_in=total_in,
            total_out=total_out,
            entry_rate=_half_up(total_in / movements * 100) if movements > 0 else 0,
            avg_daily_in=_half_up(total_in / days),
            avg_daily_out=_half_up(total_out / days),
            percentage_change=percentage_change,
            most_crowded=most,
            least_crowded=least,
            returning_customer_rate=self.validator.weighted_average(
                series.returning_customers, series.count_in
            ),
            affluence=calculate_affluence(total_in, sum(series.outside_traffic)),
        )
        self.logger.debug(
            f"Overview over {days} day(s): in={total_in}, out={total_out}, "
            f"entry rate={metrics.entry_rate}%"
        )
        return metrics


def calculate_overview_metrics(series: TransformedSeries, window: TimeWindow) -> OverviewMetrics:
    """Functional shortcut for :meth:`OverviewCalculator.calculate`."""
    return OverviewCalculator().calculate(series, window)
