"""
Application-wide constants for the footfall pipeline.

This module defines default values and constants used throughout the application.
Grouping-specific values live next to their strategies.
"""

# Raw sampling cadence of the sensors (minutes)
DEFAULT_CADENCE_MINUTES = 5

# Default request settings
DEFAULT_GROUP_BY = "hour"
DEFAULT_AGGREGATION = "sum"
DEFAULT_TIMEZONE = "UTC"

# HTTP defaults
DEFAULT_API_TIMEOUT = 10  # seconds
DEFAULT_API_MAX_RETRIES = 3

# Display format for bucket timestamps (e.g. "Aug 08, 14:00")
DISPLAY_TIMESTAMP_FORMAT = "%b %d, %H:%M"

# Error message surfaced to the caller when the sample source fails
FETCH_ERROR_MESSAGE = "Failed to fetch sensor data"

# Percentage reported when the previous period was zero and the current is not
ZERO_BASELINE_PERCENTAGE = 100.0

# Metrics that are not meaningful to compare between periods
NON_COMPARABLE_METRICS = ("mostCrowdedDay", "leastCrowdedDay")

# Synthetic data ranges, [low, high) per location and tick
SYNTHETIC_COUNT_IN_RANGE = (5, 30)
SYNTHETIC_COUNT_OUT_RANGE = (3, 23)
SYNTHETIC_OUTSIDE_TRAFFIC_RANGE = (50, 150)
SYNTHETIC_VISIT_DURATION_RANGE = (10.0, 40.0)  # minutes
SYNTHETIC_RETURNING_RANGE = (20, 80)  # percent

# Default store for the "last updated" marker
DEFAULT_LAST_UPDATED_FILE = ".footfall_last_updated.json"
