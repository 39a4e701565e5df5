"""
Cache module for the footfall pipeline.

Provides the fetch policy and the per-session location cache.
"""

from .fetch_policy import FetchPlan, evaluate_fetch_necessity, calculate_fetch_range
from .location_cache import CacheState, LocationCache

__all__ = [
    "FetchPlan",
    "evaluate_fetch_necessity",
    "calculate_fetch_range",
    "CacheState",
    "LocationCache",
]
