"""
Tests for the fetch policy.

Tests fetch necessity rules and fetch range reconciliation.
"""

from datetime import timedelta

import pytest

from src.footfall_pipeline.cache import evaluate_fetch_necessity, calculate_fetch_range
from src.footfall_pipeline.models import Sample, TimeWindow


class TestEvaluateFetchNecessity:
    """Test cases for evaluate_fetch_necessity."""

    @pytest.fixture
    def fetched(self, day_window):
        return day_window(2024, 8, 1, days=14)

    @pytest.fixture
    def now(self, utc):
        return utc(2024, 9, 1)

    @pytest.fixture
    def resident(self, utc):
        return [Sample(utc(2024, 8, 10), 1, 1)]

    def test_first_load_always_fetches(self, day_window, now):
        assert evaluate_fetch_necessity(day_window(2024, 8, 1), None, [], now) is True

    @pytest.mark.parametrize("start_day,days", [
        (1, 14),
        (1, 1),
        (8, 7),
        (5, 3),
        (14, 1),
    ])
    def test_subset_of_fetched_window_does_not_fetch(
        self, day_window, fetched, resident, now, start_day, days
    ):
        requested = day_window(2024, 8, start_day, days=days)
        assert fetched.contains(requested)

        assert evaluate_fetch_necessity(requested, fetched, resident, now) is False

    def test_identical_window_does_not_fetch_even_without_samples(self, fetched, now):
        assert evaluate_fetch_necessity(fetched, fetched, [], now) is False

    def test_extending_left_fetches(self, day_window, fetched, resident, now):
        requested = day_window(2024, 7, 30, days=5)

        assert evaluate_fetch_necessity(requested, fetched, resident, now) is True

    def test_extending_right_into_the_past_fetches(self, day_window, fetched, resident, now):
        requested = day_window(2024, 8, 10, days=10)

        assert evaluate_fetch_necessity(requested, fetched, resident, now) is True

    def test_extending_right_into_the_future_falls_through(self, day_window, fetched, resident, utc):
        """An end in the future skips the edge rule; the window is still not covered."""
        now = utc(2024, 8, 16, 12)
        requested = day_window(2024, 8, 10, days=10)

        assert evaluate_fetch_necessity(requested, fetched, resident, now) is True

    def test_subset_without_resident_samples_fetches(self, day_window, fetched, now):
        requested = day_window(2024, 8, 3, days=2)

        assert evaluate_fetch_necessity(requested, fetched, [], now) is True


class TestCalculateFetchRange:
    """Test cases for calculate_fetch_range."""

    @pytest.fixture
    def fetched(self, day_window):
        return day_window(2024, 8, 1, days=14)

    def test_no_fetched_window_fetches_request(self, day_window):
        requested = day_window(2024, 8, 1, days=14)

        plan = calculate_fetch_range(requested, None)

        assert plan.should_fetch
        assert (plan.fetch_start, plan.fetch_end) == (requested.start, requested.end)

    def test_inside_fetched_window_does_not_fetch(self, day_window, fetched):
        plan = calculate_fetch_range(day_window(2024, 8, 5, days=3), fetched)

        assert plan.should_fetch is False

    def test_right_extension_starts_at_fetched_end(self, day_window, fetched):
        requested = day_window(2024, 8, 8, days=10)

        plan = calculate_fetch_range(requested, fetched)

        assert plan.should_fetch
        assert plan.fetch_start == fetched.end
        assert plan.fetch_end == requested.end
        assert plan.window.duration < requested.duration

    def test_left_extension_ends_at_fetched_start(self, day_window, fetched):
        requested = day_window(2024, 7, 28, days=7)

        plan = calculate_fetch_range(requested, fetched)

        assert plan.should_fetch
        assert plan.fetch_start == requested.start
        assert plan.fetch_end == fetched.start

    def test_both_edges_fetch_whole_request(self, day_window, fetched):
        requested = day_window(2024, 7, 28, days=30)

        plan = calculate_fetch_range(requested, fetched)

        assert plan.should_fetch
        assert plan.window == requested

    def test_plan_window(self, utc):
        window = TimeWindow(utc(2024, 8, 1), utc(2024, 8, 2))
        plan = calculate_fetch_range(window, None)

        assert plan.window.duration == timedelta(days=1)
