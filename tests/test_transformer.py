"""
Tests for the transform stage.

Tests returning-customer validation, affluence and display series.
"""

import pytest

from src.footfall_pipeline.models import Sample, LocationSeries
from src.footfall_pipeline.processing import (
    DataTransformer,
    ReturningCustomerValidator,
    calculate_affluence,
    weighted_returning_customer_average,
)


class TestReturningCustomerValidator:
    """Test cases for ReturningCustomerValidator."""

    @pytest.fixture
    def validator(self):
        return ReturningCustomerValidator()

    def test_zero_after_non_zero_is_dropout(self, validator):
        assert validator.validate([50, 0, 0, 50]) == [True, False, True, True]
        assert validator.display_values([50, 0, 0, 50]) == [50, 0, 0, 50]

    def test_consecutive_zeros_are_valid(self, validator):
        assert validator.validate([0, 0]) == [True, True]

    def test_first_value_always_valid(self, validator):
        assert validator.validate([0]) == [True]
        assert ReturningCustomerValidator.is_valid(0, 75, 0)

    def test_missing_value_is_invalid(self, validator):
        assert validator.validate([40, None, 30]) == [True, False, True]
        assert validator.display_values([40, None, 30]) == [40, 0, 30]

    def test_zero_after_missing_value_is_valid(self, validator):
        assert ReturningCustomerValidator.is_valid(0, None, 3)

    def test_weighted_average_skips_invalid_and_unweighted(self, validator):
        values = [50, 0, 20, 80]
        weights = [10, 30, 10, 0]

        # index 1 is a dropout, index 3 has no entries
        assert validator.weighted_average(values, weights) == pytest.approx(35.0)

    def test_weighted_average_nothing_qualifies(self):
        assert weighted_returning_customer_average([None, None], [5, 5]) is None
        assert weighted_returning_customer_average([], []) is None

    def test_weighted_average_length_mismatch(self, validator):
        with pytest.raises(ValueError):
            validator.weighted_average([1, 2], [1])


class TestAffluence:
    """Test cases for calculate_affluence."""

    def test_ratio_as_percentage(self):
        assert calculate_affluence(30, 120) == pytest.approx(25.0)

    @pytest.mark.parametrize("traffic", [0, None])
    def test_no_traffic_gives_zero(self, traffic):
        assert calculate_affluence(30, traffic) == 0


class TestDataTransformer:
    """Test cases for DataTransformer."""

    @pytest.fixture
    def buckets(self, utc):
        return [
            Sample(utc(2024, 8, 8, 14), 30, 20, returning_customer=50,
                   avg_visit_duration=12.5, outside_traffic=120),
            Sample(utc(2024, 8, 8, 15), 10, 15, returning_customer=0,
                   avg_visit_duration=None, outside_traffic=0),
            Sample(utc(2024, 8, 8, 16), 0, 0),
        ]

    def test_transform_aligns_arrays(self, buckets, utc):
        series = DataTransformer("UTC").transform(buckets)

        assert len(series) == 3
        assert series.bucket_starts[0] == utc(2024, 8, 8, 14)
        assert series.timestamps == ["Aug 08, 14:00", "Aug 08, 15:00", "Aug 08, 16:00"]
        assert series.count_in == [30, 10, 0]
        assert series.count_out == [20, 15, 0]
        assert series.returning_customers == [50, 0, 0]
        assert series.avg_visit_duration == [12.5, 0, 0]
        assert series.outside_traffic == [120, 0, 0]
        assert series.affluence == [pytest.approx(25.0), 0, 0]

    def test_display_labels_use_timezone(self, buckets):
        series = DataTransformer("Europe/Madrid").transform(buckets)

        assert series.timestamps[0] == "Aug 08, 16:00"

    def test_transform_series_keeps_locations(self, buckets):
        result = DataTransformer().transform_series([
            LocationSeries(1, "Street market", buckets),
            LocationSeries(4, "Riverside Outlets", []),
        ])

        assert [(r.location_id, r.location_name) for r in result] == [
            (1, "Street market"), (4, "Riverside Outlets")
        ]
        assert result[1].data.is_empty
