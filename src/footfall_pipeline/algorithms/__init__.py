"""
Comparison algorithms for the footfall pipeline.

Provides previous-period derivation and metric comparison.
"""

from .comparison import (
    ComparisonCalculator,
    calculate_comparison_periods,
    calculate_metric_comparison,
    get_comparison_period_label,
    format_delta_display,
    is_metric_comparable,
)

__all__ = [
    "ComparisonCalculator",
    "calculate_comparison_periods",
    "calculate_metric_comparison",
    "get_comparison_period_label",
    "format_delta_display",
    "is_metric_comparable",
]
