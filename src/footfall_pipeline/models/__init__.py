"""
Data models for the footfall pipeline.

Contains DTOs for samples, windows, transformed series, comparisons and requests.
"""

from .sample import Sample, LocationSeries
from .window import TimeWindow
from .series import TransformedSeries, AggregatedSeries, LocationTransformedSeries
from .comparison import Trend, ComparisonPeriods, MetricComparison
from .request import SeriesRequest, SeriesResult

__all__ = [
    "Sample",
    "LocationSeries",
    "TimeWindow",
    "TransformedSeries",
    "AggregatedSeries",
    "LocationTransformedSeries",
    "Trend",
    "ComparisonPeriods",
    "MetricComparison",
    "SeriesRequest",
    "SeriesResult",
]
