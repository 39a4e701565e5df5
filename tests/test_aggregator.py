"""
Tests for time grouping, time-bucket aggregation and range filtering.
"""

from datetime import datetime

import pytest

from src.footfall_pipeline.models import Sample, LocationSeries, TimeWindow
from src.footfall_pipeline.processing import (
    TimeBucketAggregator,
    TIME_GROUPING_STRATEGIES,
    get_strategy,
    filter_by_window,
    filter_by_hour_range,
)


class TestGroupingStrategies:
    """Test cases for bucket key derivation."""

    @pytest.mark.parametrize("group_by,expected", [
        ("5min", datetime(2024, 8, 8, 14, 35)),
        ("10min", datetime(2024, 8, 8, 14, 30)),
        ("15min", datetime(2024, 8, 8, 14, 30)),
        ("30min", datetime(2024, 8, 8, 14, 30)),
        ("hour", datetime(2024, 8, 8, 14, 0)),
        ("day", datetime(2024, 8, 8)),
        ("week", datetime(2024, 8, 4)),
        ("month", datetime(2024, 8, 1)),
    ])
    def test_group_key(self, group_by, expected):
        local = datetime(2024, 8, 8, 14, 37, 12)

        assert get_strategy(group_by).get_group_key(local) == expected

    def test_week_starting_on_sunday_maps_to_itself(self):
        assert get_strategy("week").get_group_key(datetime(2024, 8, 4, 9)) == datetime(2024, 8, 4)

    def test_all_granularities_registered(self):
        assert set(TIME_GROUPING_STRATEGIES) == {
            "5min", "10min", "15min", "30min", "hour", "day", "week", "month"
        }

    def test_unknown_granularity(self):
        with pytest.raises(ValueError, match="Unknown granularity"):
            get_strategy("fortnight")


class TestTimeBucketAggregator:
    """Test cases for TimeBucketAggregator."""

    @pytest.fixture
    def aggregator(self):
        return TimeBucketAggregator("UTC")

    @pytest.fixture
    def samples(self, utc):
        return [
            Sample(utc(2024, 8, 8, 10, 0), 10, 4, returning_customer=40,
                   avg_visit_duration=20.0, outside_traffic=100),
            Sample(utc(2024, 8, 8, 10, 5), 6, 2, returning_customer=None,
                   avg_visit_duration=30.0, outside_traffic=50),
            Sample(utc(2024, 8, 8, 10, 20), 4, 4, returning_customer=60,
                   avg_visit_duration=None, outside_traffic=None),
            Sample(utc(2024, 8, 8, 11, 0), 1, 1),
        ]

    def test_counts_always_summed(self, aggregator, samples):
        for mode in ("sum", "avg"):
            buckets = aggregator.aggregate(samples, "hour", mode)

            assert [b.count_in for b in buckets] == [20, 1]
            assert [b.count_out for b in buckets] == [10, 1]

    def test_outside_traffic_follows_mode(self, aggregator, samples):
        summed = aggregator.aggregate(samples, "hour", "sum")
        averaged = aggregator.aggregate(samples, "hour", "avg")

        assert summed[0].outside_traffic == 150
        assert averaged[0].outside_traffic == 75

    def test_rates_always_averaged_over_reporters(self, aggregator, samples):
        bucket = aggregator.aggregate(samples, "hour", "sum")[0]

        assert bucket.returning_customer == 50
        assert bucket.avg_visit_duration == 25.0

    def test_bucket_without_extended_attributes(self, aggregator, samples):
        bucket = aggregator.aggregate(samples, "hour", "sum")[1]

        assert bucket.returning_customer is None
        assert bucket.outside_traffic is None

    def test_bucket_keys_are_utc_bucket_starts(self, aggregator, samples, utc):
        buckets = aggregator.aggregate(samples, "15min", "sum")

        assert [b.timestamp for b in buckets] == [
            utc(2024, 8, 8, 10, 0),
            utc(2024, 8, 8, 10, 15),
            utc(2024, 8, 8, 11, 0),
        ]

    def test_day_buckets_follow_timezone(self, utc):
        aggregator = TimeBucketAggregator("Europe/Madrid")
        samples = [
            Sample(utc(2024, 8, 8, 21, 30), 1, 0),  # 23:30 in Madrid
            Sample(utc(2024, 8, 8, 22, 30), 2, 0),  # 00:30 next day in Madrid
        ]

        buckets = aggregator.aggregate(samples, "day", "sum")

        assert [b.timestamp for b in buckets] == [utc(2024, 8, 7, 22), utc(2024, 8, 8, 22)]
        assert [b.count_in for b in buckets] == [1, 2]

    def test_empty_input(self, aggregator):
        assert aggregator.aggregate([], "day") == []

    def test_unknown_mode(self, aggregator, samples):
        with pytest.raises(ValueError, match="Unknown aggregation"):
            aggregator.aggregate(samples, "hour", "median")

    def test_aggregate_series_per_location(self, aggregator, make_series, utc):
        series = [
            make_series(1, utc(2024, 8, 8, 10), 12),
            make_series(4, utc(2024, 8, 8, 10), 24),
        ]

        buckets = aggregator.aggregate_series(series, "hour")

        assert [len(s) for s in buckets] == [1, 2]
        assert buckets[0].samples[0].count_in == 120
        assert buckets[1].location_id == 4


class TestRangeFilter:
    """Test cases for range filtering."""

    @pytest.fixture
    def series(self, make_series, utc):
        return [make_series(1, utc(2024, 8, 8, 8), 36, step=10)]

    def test_window_bounds_inclusive(self, series, utc):
        window = TimeWindow(utc(2024, 8, 8, 9), utc(2024, 8, 8, 10))

        visible = filter_by_window(series, window)

        timestamps = [s.timestamp for s in visible[0].samples]
        assert timestamps[0] == window.start
        assert timestamps[-1] == window.end
        assert len(timestamps) == 7

    def test_does_not_mutate_input(self, series, utc):
        filter_by_window(series, TimeWindow(utc(2024, 8, 8, 9), utc(2024, 8, 8, 10)))

        assert len(series[0]) == 36

    def test_empty_result_keeps_location(self, series, utc):
        visible = filter_by_window(series, TimeWindow(utc(2024, 9, 1), utc(2024, 9, 2)))

        assert visible[0].location_id == 1
        assert visible[0].samples == []

    def test_hour_range(self, series):
        visible = filter_by_hour_range(series, 9, 10)

        hours = {s.timestamp.hour for s in visible[0].samples}
        assert hours == {9, 10}

    def test_hour_range_in_timezone(self, series):
        visible = filter_by_hour_range(series, 11, 11, "Europe/Madrid")

        assert {s.timestamp.hour for s in visible[0].samples} == {9}

    @pytest.mark.parametrize("start,end", [(-1, 5), (5, 24), (12, 9)])
    def test_hour_range_validation(self, series, start, end):
        with pytest.raises(ValueError):
            filter_by_hour_range(series, start, end)

    def test_empty_selection(self, utc):
        assert filter_by_window([], TimeWindow(utc(2024, 8, 1), utc(2024, 8, 2))) == []
