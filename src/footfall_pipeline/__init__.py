"""
Footfall Pipeline

This package provides the incremental time-series pipeline behind a footfall
and occupancy dashboard: fetch planning, caching, gap filling, time-bucket
aggregation, cross-location merging and derived metrics.
"""

__version__ = "0.1.0"
__description__ = "Incremental time-series pipeline for footfall sensor data"


def __getattr__(name):
    """Lazy import to avoid importing dependencies when not needed."""
    if name == "FootfallPipeline":
        from .pipeline import FootfallPipeline
        return FootfallPipeline
    if name == "FootfallPipelineApp":
        from .main import FootfallPipelineApp
        return FootfallPipelineApp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "FootfallPipeline",
    "FootfallPipelineApp",
]
