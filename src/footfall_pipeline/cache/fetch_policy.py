"""
Fetch policy module.

Decides whether the cached window already satisfies a request and, if not,
which sub-range has to be fetched.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sized

from ..models import TimeWindow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchPlan:
    """Range to fetch for a request."""

    fetch_start: datetime
    fetch_end: datetime
    should_fetch: bool

    @property
    def window(self) -> TimeWindow:
        return TimeWindow(self.fetch_start, self.fetch_end)


def evaluate_fetch_necessity(
    requested: TimeWindow,
    fetched: Optional[TimeWindow],
    samples_in_range: Sized,
    now: datetime
) -> bool:
    """
    Decide whether the sample source has to be called for ``requested``.

    Rules are checked in order:

    1. Nothing fetched yet: fetch.
    2. The request starts before the fetched window, or ends after it
       without ending in the future: fetch.
    3. The request equals the fetched window: no fetch.
    4. Samples are resident and the request lies inside the fetched
       window: no fetch.
    5. Anything else: fetch.

    Args:
        requested: Window the caller is viewing
        fetched: Window the cache holds complete data for (None when empty)
        samples_in_range: Resident samples already inside ``requested``
        now: Current instant

    Returns:
        True if a fetch is needed
    """
    if fetched is None:
        logger.debug("First fetch: nothing cached yet")
        return True

    extends_left = requested.start < fetched.start
    extends_right = requested.end > fetched.end
    if extends_left or (extends_right and requested.end <= now):
        logger.debug(f"Requested {requested} extends beyond fetched {fetched}")
        return True

    if requested == fetched:
        return False

    if len(samples_in_range) > 0 and fetched.contains(requested):
        return False

    return True


def calculate_fetch_range(
    requested: TimeWindow,
    fetched: Optional[TimeWindow]
) -> FetchPlan:
    """
    Compute the smallest range that makes the cache complete over ``requested``.

    When both edges extend past the fetched window the whole requested
    window is fetched again.

    Args:
        requested: Window the caller is viewing
        fetched: Window the cache holds complete data for (None when empty)

    Returns:
        FetchPlan with the range to fetch
    """
    if fetched is None:
        return FetchPlan(requested.start, requested.end, True)

    extends_left = requested.start < fetched.start
    extends_right = requested.end > fetched.end

    if not extends_left and not extends_right:
        return FetchPlan(requested.start, requested.end, False)

    if extends_left and not extends_right:
        return FetchPlan(requested.start, fetched.start, True)

    if extends_right and not extends_left:
        return FetchPlan(fetched.end, requested.end, True)

    return FetchPlan(requested.start, requested.end, True)
