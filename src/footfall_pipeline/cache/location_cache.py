"""
Location cache module.

Holds the raw per-location samples of one sensor selection together with
the window they are known to be complete for.
"""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional

from ..models import LocationSeries, Sample, TimeWindow


class CacheState(str, Enum):
    """Lifecycle state of a location cache."""

    EMPTY = "empty"
    POPULATED = "populated"


class LocationCache:
    """
    Session-held sample cache for one sensor selection.

    Changing the sensor selection discards everything, even when the new
    selection is a subset of the old one. Each reset bumps ``generation``
    so a fetch started for the previous selection can be recognised and
    dropped when it completes.
    """

    def __init__(
        self,
        sensor_ids: Iterable[int] = (),
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize an empty cache.

        Args:
            sensor_ids: Sensor selection the cache belongs to
            logger: Logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.sensor_ids: FrozenSet[int] = frozenset(sensor_ids)
        self.generation = 0
        self.state = CacheState.EMPTY
        self.fetched_window: Optional[TimeWindow] = None
        self._locations: Dict[int, LocationSeries] = {}
        self._in_flight = False

    @property
    def series(self) -> List[LocationSeries]:
        """Resident per-location series, in the order locations were first seen."""
        return list(self._locations.values())

    @property
    def is_fetching(self) -> bool:
        return self._in_flight

    def __len__(self) -> int:
        return sum(len(location) for location in self._locations.values())

    def reset(self, sensor_ids: Optional[Iterable[int]] = None) -> None:
        """
        Discard all samples and the fetched window.

        Args:
            sensor_ids: New sensor selection (keeps the current one when None)
        """
        if sensor_ids is not None:
            self.sensor_ids = frozenset(sensor_ids)
        self.generation += 1
        self.state = CacheState.EMPTY
        self.fetched_window = None
        self._locations = {}
        self.logger.debug(
            f"Cache reset for sensors {sorted(self.sensor_ids)} (generation {self.generation})"
        )

    def matches(self, sensor_ids: Iterable[int]) -> bool:
        return self.sensor_ids == frozenset(sensor_ids)

    def begin_fetch(self) -> bool:
        """
        Claim the single fetch slot.

        Returns:
            True if the slot was free, False if a fetch is already running
        """
        if self._in_flight:
            self.logger.debug("Fetch already in flight, dropping request")
            return False
        self._in_flight = True
        return True

    def end_fetch(self) -> None:
        self._in_flight = False

    @contextmanager
    def fetch_slot(self) -> Iterator[bool]:
        """
        Context manager around :meth:`begin_fetch` / :meth:`end_fetch`.

        Yields:
            Whether the slot was acquired; it is released on exit only if so
        """
        acquired = self.begin_fetch()
        try:
            yield acquired
        finally:
            if acquired:
                self.end_fetch()

    def merge(
        self,
        new_series: List[LocationSeries],
        fetched_range: TimeWindow,
        requested: TimeWindow,
        generation: Optional[int] = None
    ) -> bool:
        """
        Merge freshly fetched series into the cache.

        Locations are matched by id; locations only present on one side are
        kept as they are. Within a location the samples are re-sorted and a
        repeated timestamp keeps the newly fetched sample.

        The first merge sets the fetched window to exactly ``requested``.
        Later merges widen it to cover ``fetched_range``.

        Args:
            new_series: Per-location series returned by the fetch
            fetched_range: Range that was fetched
            requested: Window the fetch was made for
            generation: Generation the fetch was started in; a mismatch
                means the selection changed meanwhile

        Returns:
            True if merged, False if discarded as stale
        """
        if generation is not None and generation != self.generation:
            self.logger.info(
                f"Discarding fetch for {fetched_range} from generation {generation} "
                f"(cache is at generation {self.generation})"
            )
            return False

        for incoming in new_series:
            existing = self._locations.get(incoming.location_id)
            if existing is None:
                self._locations[incoming.location_id] = incoming.with_samples(
                    _dedupe(incoming.samples)
                )
            else:
                self._locations[incoming.location_id] = existing.with_samples(
                    _dedupe(existing.samples + incoming.samples)
                )

        if self.fetched_window is None:
            self.fetched_window = requested
        else:
            self.fetched_window = self.fetched_window.union(fetched_range)

        self.state = CacheState.POPULATED
        self.logger.debug(
            f"Merged {sum(len(s) for s in new_series)} samples for "
            f"{len(new_series)} location(s); fetched window is now {self.fetched_window}"
        )
        return True


def _dedupe(samples: List[Sample]) -> List[Sample]:
    by_timestamp = {sample.timestamp: sample for sample in samples}
    return [by_timestamp[ts] for ts in sorted(by_timestamp)]
