"""
"Last updated" marker store.

Remembers when sensor data was last refreshed, in a small JSON file.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import pytz

from ..core import constants, DateUtils


class LastUpdatedStore:
    """JSON-file store for the last successful refresh time."""

    KEY = "lastUpdated"

    def __init__(
        self,
        path: str = constants.DEFAULT_LAST_UPDATED_FILE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize store.

        Args:
            path: Path of the JSON file
            logger: Logger instance
        """
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)

    def get(self) -> Optional[datetime]:
        """
        Read the stored marker.

        Returns:
            Aware UTC datetime, or None if nothing has been stored
        """
        if not self.path.exists():
            return None

        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)

        value = data.get(self.KEY)
        return DateUtils.parse_timestamp(value) if value else None

    def set(self, instant: Optional[datetime] = None) -> datetime:
        """
        Store a marker.

        Args:
            instant: Time to store (defaults to now)

        Returns:
            The stored UTC datetime
        """
        instant = DateUtils.to_utc(instant or datetime.now(pytz.UTC))
        self.path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump({self.KEY: instant.isoformat()}, f)

        self.logger.debug(f"Last updated marker set to {instant.isoformat()}")
        return instant

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()
