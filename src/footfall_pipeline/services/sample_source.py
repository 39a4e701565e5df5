"""
Sample sources.

A sample source returns raw per-location samples for a set of sensors over
a range. The API source talks to the backend; the synthetic source produces
plausible demo data when no one is logged in.
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import FrozenSet, Iterable, List, Optional, Tuple, TYPE_CHECKING

import pytz
import requests  # type: ignore

from ..core import constants
from ..models import Sample, LocationSeries
from ..api.helpers import parse_sensor_data_response

if TYPE_CHECKING:
    from ..api import SensorDataAPI


class SampleFetchError(Exception):
    """Raised when samples cannot be retrieved from the backend."""


class SampleSource:
    """Base class for sample sources."""

    def fetch(
        self,
        sensor_ids: Iterable[int],
        start: datetime,
        end: datetime
    ) -> List[LocationSeries]:
        """
        Fetch raw samples.

        Args:
            sensor_ids: Sensor IDs to fetch
            start: Start of the range (inclusive)
            end: End of the range (inclusive)

        Returns:
            Per-location series

        Raises:
            SampleFetchError: On transport or authorization failure
        """
        raise NotImplementedError


class ApiSampleSource(SampleSource):
    """Sample source backed by the footfall backend."""

    def __init__(self, api_client: "SensorDataAPI", logger: Optional[logging.Logger] = None):
        """
        Initialize API sample source.

        Args:
            api_client: API client instance
            logger: Logger instance
        """
        self.api_client = api_client
        self.logger = logger or logging.getLogger(__name__)

    def fetch(
        self,
        sensor_ids: Iterable[int],
        start: datetime,
        end: datetime
    ) -> List[LocationSeries]:
        try:
            payload = self.api_client.get_sensor_data(sensor_ids, start, end)
        except (requests.exceptions.RequestException, RuntimeError, ValueError) as e:
            raise SampleFetchError(f"Sensor data request failed: {e}") from e

        try:
            series = parse_sensor_data_response(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise SampleFetchError(f"Malformed sensor data response: {e}") from e

        self.logger.info(
            f"Received {sum(len(s) for s in series)} samples for {len(series)} location(s)"
        )
        return series


@dataclass(frozen=True)
class CatalogueLocation:
    """Demo location and the sensors installed there."""

    location_id: int
    name: str
    sensor_ids: FrozenSet[int]


DEMO_CATALOGUE: Tuple[CatalogueLocation, ...] = (
    CatalogueLocation(1, "Street market", frozenset({7, 8, 9, 10, 11})),
    CatalogueLocation(4, "Riverside Outlets", frozenset({18, 19, 20, 21})),
)

FALLBACK_LOCATION = CatalogueLocation(0, "Demo location", frozenset())


class SyntheticSampleSource(SampleSource):
    """Random but plausible samples at the raw cadence, for demo sessions."""

    def __init__(
        self,
        catalogue: Tuple[CatalogueLocation, ...] = DEMO_CATALOGUE,
        cadence: timedelta = timedelta(minutes=constants.DEFAULT_CADENCE_MINUTES),
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize synthetic sample source.

        Args:
            catalogue: Demo locations to generate data for
            cadence: Interval between generated samples
            rng: Random generator (seed it for reproducible data)
            logger: Logger instance
        """
        self.catalogue = catalogue
        self.cadence = cadence
        self.rng = rng or random.Random()
        self.logger = logger or logging.getLogger(__name__)

    def relevant_locations(self, sensor_ids: Iterable[int]) -> List[CatalogueLocation]:
        ids = frozenset(sensor_ids)
        if not ids:
            return []
        locations = [location for location in self.catalogue if location.sensor_ids & ids]
        return locations or [FALLBACK_LOCATION]

    def ticks(self, start: datetime, end: datetime) -> List[datetime]:
        """Cadence-aligned instants within [start, end]."""
        epoch = datetime(1970, 1, 1, tzinfo=pytz.UTC)
        offset = (start - epoch) % self.cadence
        tick = start if not offset else start + (self.cadence - offset)

        ticks = []
        while tick <= end:
            ticks.append(tick)
            tick += self.cadence
        return ticks

    def sample(self, timestamp: datetime) -> Sample:
        rng = self.rng
        return Sample(
            timestamp=timestamp,
            count_in=rng.randrange(*constants.SYNTHETIC_COUNT_IN_RANGE),
            count_out=rng.randrange(*constants.SYNTHETIC_COUNT_OUT_RANGE),
            returning_customer=rng.randrange(*constants.SYNTHETIC_RETURNING_RANGE),
            avg_visit_duration=rng.uniform(*constants.SYNTHETIC_VISIT_DURATION_RANGE),
            outside_traffic=rng.randrange(*constants.SYNTHETIC_OUTSIDE_TRAFFIC_RANGE),
        )

    def fetch(
        self,
        sensor_ids: Iterable[int],
        start: datetime,
        end: datetime
    ) -> List[LocationSeries]:
        ticks = self.ticks(start, end)
        series = [
            LocationSeries(
                location_id=location.location_id,
                location_name=location.name,
                samples=[self.sample(tick) for tick in ticks],
            )
            for location in self.relevant_locations(sensor_ids)
        ]
        self.logger.debug(
            f"Generated {len(ticks)} synthetic ticks for {len(series)} location(s)"
        )
        return series
