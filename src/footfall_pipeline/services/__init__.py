"""
Business logic services for the footfall pipeline.

Services wrap the sample sources and provide fetching with gap filling.
"""

from .sample_source import (
    SampleFetchError,
    SampleSource,
    ApiSampleSource,
    SyntheticSampleSource,
    CatalogueLocation,
    DEMO_CATALOGUE,
)
from .range_fetcher import RangeFetcher
from .last_updated import LastUpdatedStore

__all__ = [
    "SampleFetchError",
    "SampleSource",
    "ApiSampleSource",
    "SyntheticSampleSource",
    "CatalogueLocation",
    "DEMO_CATALOGUE",
    "RangeFetcher",
    "LastUpdatedStore",
]
