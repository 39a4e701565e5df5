"""
Gap filling module.

Makes a sparse sensor series contiguous at the raw sampling cadence by
inserting zero-valued synthetic samples.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from ..core import constants
from ..models import Sample, LocationSeries


class GapFiller:
    """Insert zero-valued samples wherever the sensor skipped a cadence tick."""

    def __init__(
        self,
        cadence: timedelta = timedelta(minutes=constants.DEFAULT_CADENCE_MINUTES),
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize gap filler.

        Args:
            cadence: Raw sampling interval of the sensors
            logger: Logger instance
        """
        if cadence <= timedelta(0):
            raise ValueError(f"Cadence must be positive, got {cadence}")
        self.cadence = cadence
        self.logger = logger or logging.getLogger(__name__)

    def fill(self, samples: List[Sample], start: datetime, end: datetime) -> List[Sample]:
        """
        Fill missing cadence ticks between ``start`` and ``end``.

        The result is sorted, has no two neighbours more than one cadence
        apart, and reaches to within one tick of both window edges. With no
        samples there is nothing to anchor the ticks to, so the result is
        empty.

        Args:
            samples: Unsorted samples for one location
            start: Start of the requested window
            end: End of the requested window

        Returns:
            Sorted samples with synthetic zero-valued samples inserted
        """
        if not samples:
            return []

        # Later duplicates win, matching the cache merge rule
        by_timestamp = {sample.timestamp: sample for sample in samples}
        ordered = [by_timestamp[ts] for ts in sorted(by_timestamp)]

        missing: List[Sample] = []

        for previous, current in zip(ordered, ordered[1:]):
            tick = previous.timestamp
            while tick + self.cadence < current.timestamp:
                tick += self.cadence
                missing.append(Sample.synthetic(tick))

        tick = ordered[0].timestamp
        while tick - self.cadence > start:
            tick -= self.cadence
            missing.append(Sample.synthetic(tick))

        tick = ordered[-1].timestamp
        while tick + self.cadence < end:
            tick += self.cadence
            missing.append(Sample.synthetic(tick))

        if missing:
            self.logger.debug(
                f"Filled {len(missing)} missing ticks around {len(ordered)} samples"
            )

        return sorted(ordered + missing, key=lambda sample: sample.timestamp)

    def fill_series(
        self,
        series: List[LocationSeries],
        start: datetime,
        end: datetime
    ) -> List[LocationSeries]:
        """
        Fill every location series over the same window.

        Args:
            series: Per-location series
            start: Start of the requested window
            end: End of the requested window

        Returns:
            New per-location series with gaps filled
        """
        return [
            location.with_samples(self.fill(location.samples, start, end))
            for location in series
        ]


def fill_missing_samples(
    samples: List[Sample],
    start: datetime,
    end: datetime,
    cadence: timedelta = timedelta(minutes=constants.DEFAULT_CADENCE_MINUTES)
) -> List[Sample]:
    """Functional shortcut for :meth:`GapFiller.fill`."""
    return GapFiller(cadence).fill(samples, start, end)
