"""
Service layer tests.

Tests the sample sources, the range fetcher and the last-updated store.
"""

import asyncio
import random
import unittest
from datetime import datetime, timedelta
from unittest.mock import Mock, patch

import pytest
import pytz
import requests  # type: ignore

from src.footfall_pipeline.api import FootfallAPI
from src.footfall_pipeline.core import constants
from src.footfall_pipeline.models import LocationSeries, Sample
from src.footfall_pipeline.processing import GapFiller
from src.footfall_pipeline.services import (
    ApiSampleSource,
    LastUpdatedStore,
    RangeFetcher,
    SampleFetchError,
    SampleSource,
    SyntheticSampleSource,
)
from src.footfall_pipeline.services.sample_source import FALLBACK_LOCATION

START = datetime(2024, 8, 8, 10, 0, tzinfo=pytz.UTC)


class TestSyntheticSampleSource:
    """Test cases for demo data generation."""

    def setup_method(self):
        self.source = SyntheticSampleSource(rng=random.Random(42), logger=Mock())

    def test_one_series_per_relevant_location(self):
        series = self.source.fetch({8, 19}, START, START + timedelta(minutes=30))

        assert [(s.location_id, s.location_name) for s in series] == [
            (1, "Street market"), (4, "Riverside Outlets")
        ]
        assert all(len(s) == 7 for s in series)

    def test_only_matching_locations(self):
        series = self.source.fetch({20}, START, START + timedelta(minutes=30))

        assert [s.location_id for s in series] == [4]

    def test_unknown_sensors_use_fallback_location(self):
        series = self.source.fetch({999}, START, START + timedelta(minutes=10))

        assert len(series) == 1
        assert series[0].location_id == FALLBACK_LOCATION.location_id

    def test_empty_selection(self):
        assert self.source.fetch(set(), START, START + timedelta(hours=1)) == []

    def test_ticks_aligned_to_cadence(self):
        start = datetime(2024, 8, 14, 23, 59, 59, 999000, tzinfo=pytz.UTC)

        ticks = self.source.ticks(start, start + timedelta(minutes=12))

        assert ticks == [
            datetime(2024, 8, 15, 0, 0, tzinfo=pytz.UTC),
            datetime(2024, 8, 15, 0, 5, tzinfo=pytz.UTC),
            datetime(2024, 8, 15, 0, 10, tzinfo=pytz.UTC),
        ]

    def test_values_within_ranges(self):
        samples = self.source.fetch({7}, START, START + timedelta(hours=6))[0].samples

        for sample in samples:
            assert constants.SYNTHETIC_COUNT_IN_RANGE[0] <= sample.count_in < constants.SYNTHETIC_COUNT_IN_RANGE[1]
            assert constants.SYNTHETIC_COUNT_OUT_RANGE[0] <= sample.count_out < constants.SYNTHETIC_COUNT_OUT_RANGE[1]
            assert 20 <= sample.returning_customer < 80
            assert 10.0 <= sample.avg_visit_duration <= 40.0
            assert 50 <= sample.outside_traffic < 150

    def test_seeded_generator_is_reproducible(self):
        other = SyntheticSampleSource(rng=random.Random(42))
        end = START + timedelta(hours=1)

        assert self.source.fetch({7}, START, end) == other.fetch({7}, START, end)


class TestApiSampleSource(unittest.TestCase):
    """Test cases for the backend sample source."""

    def setUp(self):
        """Set up test fixtures."""
        self.api_client = Mock()
        self.source = ApiSampleSource(self.api_client, logger=Mock())
        self.end = START + timedelta(hours=1)

    def test_parses_response(self):
        self.api_client.get_sensor_data.return_value = [
            {
                "location_id": 1,
                "location_name": "Street market",
                "data": [{"timestamp": "2024-08-08T10:00:00Z", "total_count_in": 4, "total_count_out": 1}],
            }
        ]

        series = self.source.fetch([7], START, self.end)

        self.api_client.get_sensor_data.assert_called_once_with([7], START, self.end)
        self.assertEqual(len(series), 1)
        self.assertEqual(series[0].samples[0].count_in, 4)

    def test_transport_error_is_wrapped(self):
        self.api_client.get_sensor_data.side_effect = requests.exceptions.ConnectionError("down")

        with self.assertRaises(SampleFetchError):
            self.source.fetch([7], START, self.end)

    def test_expired_session_is_wrapped(self):
        self.api_client.get_sensor_data.side_effect = RuntimeError("Not authenticated")

        with self.assertRaises(SampleFetchError):
            self.source.fetch([7], START, self.end)

    def test_non_list_payload_is_wrapped(self):
        api = FootfallAPI(base_url="https://footfall.test", token="abc", logger=Mock())
        source = ApiSampleSource(api, logger=Mock())
        response = Mock(status_code=200)
        response.json.return_value = {"message": "maintenance"}

        with patch.object(api.session, "request", return_value=response):
            with self.assertRaises(SampleFetchError):
                source.fetch([7], START, self.end)

    def test_malformed_payload_is_wrapped(self):
        self.api_client.get_sensor_data.return_value = [{"data": []}]

        with self.assertRaises(SampleFetchError):
            self.source.fetch([7], START, self.end)


class _StaticSource(SampleSource):
    def __init__(self, series):
        self.series = series
        self.calls = []

    def fetch(self, sensor_ids, start, end):
        self.calls.append((sorted(sensor_ids), start, end))
        return self.series


class TestRangeFetcher:
    """Test cases for source selection and gap filling."""

    def _series(self):
        samples = [
            Sample(START, 3, 1),
            Sample(START + timedelta(minutes=15), 2, 2),
        ]
        return [LocationSeries(1, "Street market", samples)]

    def test_uses_real_source_when_authenticated(self):
        source = _StaticSource(self._series())
        synthetic = _StaticSource([])
        fetcher = RangeFetcher(
            source=source,
            session=Mock(is_authenticated=True),
            synthetic_source=synthetic,
            logger=Mock()
        )

        assert fetcher.select_source() is source

    def test_uses_synthetic_source_otherwise(self):
        source = _StaticSource(self._series())
        synthetic = _StaticSource([])
        fetcher = RangeFetcher(
            source=source,
            session=Mock(is_authenticated=False),
            synthetic_source=synthetic,
            logger=Mock()
        )

        assert fetcher.select_source() is synthetic
        assert RangeFetcher(source=source, synthetic_source=synthetic).select_source() is synthetic

    def test_fetch_fills_gaps(self):
        source = _StaticSource(self._series())
        fetcher = RangeFetcher(
            source=source,
            session=Mock(is_authenticated=True),
            gap_filler=GapFiller(timedelta(minutes=5)),
            logger=Mock()
        )

        series = asyncio.run(fetcher.fetch({7}, START, START + timedelta(minutes=20)))

        assert source.calls == [([7], START, START + timedelta(minutes=20))]
        assert [s.timestamp.minute for s in series[0].samples] == [0, 5, 10, 15]
        assert [s.count_in for s in series[0].samples] == [3, 0, 0, 2]

    def test_fetch_error_propagates(self):
        source = Mock()
        source.fetch.side_effect = SampleFetchError("boom")
        fetcher = RangeFetcher(source=source, session=Mock(is_authenticated=True), logger=Mock())

        with pytest.raises(SampleFetchError):
            asyncio.run(fetcher.fetch({7}, START, START + timedelta(hours=1)))


class TestLastUpdatedStore:
    """Test cases for the last-updated marker."""

    def test_empty_store(self, tmp_path):
        assert LastUpdatedStore(str(tmp_path / "marker.json")).get() is None

    def test_set_and_get(self, tmp_path):
        store = LastUpdatedStore(str(tmp_path / "state" / "marker.json"))

        stored = store.set(START)

        assert stored == START
        assert store.get() == START

    def test_clear(self, tmp_path):
        store = LastUpdatedStore(str(tmp_path / "marker.json"))
        store.set()

        store.clear()

        assert store.get() is None
