"""
Period comparison algorithms.

Derives the equal-length period preceding a window and compares headline
metrics between the two.
"""

import logging
import math
from datetime import timedelta
from typing import Dict, Any, Optional

from ..core import constants, DateUtils
from ..models import TimeWindow, ComparisonPeriods, MetricComparison, Trend

ONE_MILLISECOND = timedelta(milliseconds=1)


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class ComparisonCalculator:
    """
    Compare a window against the period immediately before it.

    Day boundaries are taken in the configured timezone.
    """

    def __init__(
        self,
        timezone_str: str = constants.DEFAULT_TIMEZONE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize comparison calculator.

        Args:
            timezone_str: Timezone whose midnight defines day boundaries
            logger: Logger instance
        """
        self.timezone_str = timezone_str
        self.tz = DateUtils.parse_timezone(timezone_str)
        self.logger = logger or logging.getLogger(__name__)

    def comparison_periods(self, current: TimeWindow) -> ComparisonPeriods:
        """
        Calculate the previous period for ``current``.

        The previous period ends at 23:59:59.999 of the day before
        ``current.start`` and starts at midnight of the day reached by going
        back the duration of ``current``.

        Args:
            current: Window being viewed

        Returns:
            ComparisonPeriods with current and previous windows
        """
        previous_end = DateUtils.end_of_day(current.start - ONE_MILLISECOND, self.timezone_str)
        previous_start = DateUtils.start_of_day(
            previous_end - current.duration + ONE_MILLISECOND, self.timezone_str
        )
        previous = TimeWindow(previous_start, previous_end)

        self.logger.debug(f"Comparison period for {current}: {previous}")
        return ComparisonPeriods(current=current, previous=previous)

    @staticmethod
    def metric_comparison(current: float, previous: float) -> MetricComparison:
        """
        Compare one metric between two periods.

        Args:
            current: Value in the current period
            previous: Value in the previous period

        Returns:
            MetricComparison; the percentage is rounded to 2 decimals and is
            100 when the previous value was zero and the current one is not
        """
        delta = current - previous

        if previous != 0:
            delta_percentage = delta / previous * 100
        elif current > 0:
            delta_percentage = constants.ZERO_BASELINE_PERCENTAGE
        else:
            delta_percentage = 0.0

        if delta > 0:
            trend = Trend.UP
        elif delta < 0:
            trend = Trend.DOWN
        else:
            trend = Trend.STABLE

        return MetricComparison(
            current=current,
            previous=previous,
            delta=delta,
            delta_percentage=_round_half_up(delta_percentage, 2),
            trend=trend,
        )

    def period_label(self, previous: TimeWindow) -> str:
        """
        Short label for the previous period, e.g. "Previous 7 days".

        Args:
            previous: Previous window

        Returns:
            "Aug 7" for a single day, "Previous N days" up to a month,
            otherwise "Jul 1 - Aug 7"
        """
        days = math.ceil(previous.duration / timedelta(days=1))

        if days == 1:
            return self._short_date(previous.start)
        if days <= 31:
            return f"Previous {days} day{'s' if days > 1 else ''}"
        return f"{self._short_date(previous.start)} - {self._short_date(previous.end)}"

    def _short_date(self, instant) -> str:
        local = instant.astimezone(self.tz)
        return f"{local.strftime('%b')} {local.day}"


def calculate_comparison_periods(
    current: TimeWindow,
    timezone_str: str = constants.DEFAULT_TIMEZONE
) -> ComparisonPeriods:
    """Functional shortcut for :meth:`ComparisonCalculator.comparison_periods`."""
    return ComparisonCalculator(timezone_str).comparison_periods(current)


def calculate_metric_comparison(current: float, previous: float) -> MetricComparison:
    """Functional shortcut for :meth:`ComparisonCalculator.metric_comparison`."""
    return ComparisonCalculator.metric_comparison(current, previous)


def get_comparison_period_label(
    previous: TimeWindow,
    timezone_str: str = constants.DEFAULT_TIMEZONE
) -> str:
    """Functional shortcut for :meth:`ComparisonCalculator.period_label`."""
    return ComparisonCalculator(timezone_str).period_label(previous)


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0")


def format_delta_display(comparison: MetricComparison) -> Dict[str, Any]:
    """
    Format a comparison for display.

    Args:
        comparison: Metric comparison

    Returns:
        Dictionary with 'deltaText' (e.g. "+1,250"), 'percentageText'
        (e.g. "+12.5%") and 'isPositive'
    """
    is_positive = comparison.trend == Trend.UP
    sign = "+" if is_positive else ""

    return {
        "deltaText": f"{sign}{_format_number(comparison.delta)}",
        "percentageText": f"{sign}{comparison.delta_percentage:.1f}%",
        "isPositive": is_positive,
    }


def is_metric_comparable(metric_type: str) -> bool:
    """Whether a headline metric is meaningful to compare between periods."""
    return metric_type not in constants.NON_COMPARABLE_METRICS
