"""
Data validation module.

Flags sensor dropouts in returning-customer readings and computes the
traffic-weighted returning-customer share.
"""

import logging
from typing import List, Optional, Sequence


class ReturningCustomerValidator:
    """Validate returning-customer readings of a bucketed series."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize validator.

        Args:
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def is_valid(
        current: Optional[float],
        previous: Optional[float],
        index: int
    ) -> bool:
        """
        Decide whether a returning-customer reading is trustworthy.

        A zero right after a non-zero reading is a sensor dropout. A zero
        after another zero is a genuine quiet period. The first bucket has
        nothing to compare against and is always accepted.

        Args:
            current: Reading for this bucket (None when not reported)
            previous: Raw reading of the previous bucket
            index: Position of the bucket in the series

        Returns:
            True if the reading can be displayed as-is
        """
        if current is None:
            return False

        if index == 0:
            return True

        if current == 0 and previous is not None and previous != 0:
            return False

        return True

    def validate(self, values: Sequence[Optional[float]]) -> List[bool]:
        """
        Validate every reading of a series.

        Args:
            values: Raw readings in bucket order

        Returns:
            Validity flag per bucket
        """
        flags = [
            self.is_valid(value, values[i - 1] if i > 0 else None, i)
            for i, value in enumerate(values)
        ]
        dropouts = sum(
            1 for value, ok in zip(values, flags) if not ok and value is not None
        )
        if dropouts:
            self.logger.debug(f"Coerced {dropouts} returning-customer dropouts to zero")
        return flags

    def display_values(self, values: Sequence[Optional[float]]) -> List[float]:
        """
        Readings ready for display: invalid ones become 0.

        Args:
            values: Raw readings in bucket order

        Returns:
            Display values
        """
        return [
            value if ok else 0
            for value, ok in zip(values, self.validate(values))
        ]

    def weighted_average(
        self,
        values: Sequence[Optional[float]],
        weights: Sequence[float]
    ) -> Optional[float]:
        """
        Average returning-customer share weighted by entries.

        Invalid readings and buckets with no entries are left out of both
        numerator and denominator.

        Args:
            values: Returning-customer readings per bucket
            weights: Count-in per bucket

        Returns:
            Weighted average in the unit of ``values``, or None when no
            bucket qualifies
        """
        if len(values) != len(weights):
            raise ValueError(
                f"values and weights differ in length ({len(values)} != {len(weights)})"
            )

        weighted_sum = 0.0
        total_weight = 0.0
        for value, weight, ok in zip(values, weights, self.validate(values)):
            if not ok or weight <= 0:
                continue
            weighted_sum += value * weight
            total_weight += weight

        if total_weight == 0:
            return None
        return weighted_sum / total_weight


def weighted_returning_customer_average(
    values: Sequence[Optional[float]],
    weights: Sequence[float]
) -> Optional[float]:
    """Functional shortcut for :meth:`ReturningCustomerValidator.weighted_average`."""
    return ReturningCustomerValidator().weighted_average(values, weights)
