"""
Pytest configuration and shared fixtures for all tests.
"""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
import json
import pytz

# Add the project root to sys.path so we can import from src
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.footfall_pipeline.models import Sample, LocationSeries, TimeWindow  # noqa: E402


@pytest.fixture(scope="session")
def fixtures_dir():
    """Get the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_data(fixtures_dir):
    """Load a sensor data API response from fixtures."""
    data_file = fixtures_dir / "sample_data.json"
    with open(data_file) as f:
        return json.load(f)


@pytest.fixture
def utc():
    """Build an aware UTC datetime: utc(2024, 8, 8, 10, 5)."""
    def _utc(*args):
        return datetime(*args, tzinfo=pytz.UTC)
    return _utc


@pytest.fixture
def make_series():
    """Build a LocationSeries with a sample every ``step`` minutes."""
    def _make_series(location_id, start, count, step=5, count_in=10, count_out=5, **extended):
        samples = [
            Sample(
                timestamp=start + timedelta(minutes=step * i),
                count_in=count_in,
                count_out=count_out,
                **extended
            )
            for i in range(count)
        ]
        return LocationSeries(location_id, f"Location {location_id}", samples)
    return _make_series


@pytest.fixture
def day_window(utc):
    """Window covering whole UTC days: day_window(2024, 8, 1, days=14)."""
    def _day_window(year, month, day, days=1):
        start = utc(year, month, day)
        end = start + timedelta(days=days) - timedelta(milliseconds=1)
        return TimeWindow(start, end)
    return _day_window


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test requiring API access"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test (no external dependencies)"
    )
