"""
API layer for the footfall sensor backend.

Provides low-level API client for authentication and sensor data operations.
"""

import logging
from typing import Optional

from ..core import constants
from .client import APIClient
from .auth import AuthAPI
from .sensor_data import SensorDataAPI
from . import helpers


class FootfallAPI(AuthAPI, SensorDataAPI):
    """
    Unified API client for the footfall backend.

    Combines authentication and sensor data operations.
    """

    def __init__(
        self,
        base_url: str,
        email: Optional[str] = None,
        password: Optional[str] = None,
        token: Optional[str] = None,
        timeout: int = constants.DEFAULT_API_TIMEOUT,
        max_retries: int = constants.DEFAULT_API_MAX_RETRIES,
        verify_ssl: bool = True,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize unified API client.

        Args:
            base_url: Base URL for the API
            email: Email for authentication
            password: Password for authentication
            token: Pre-issued bearer token
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(
            base_url=base_url,
            email=email,
            password=password,
            token=token,
            timeout=timeout,
            max_retries=max_retries,
            verify_ssl=verify_ssl,
            logger=logger
        )


__all__ = [
    "APIClient",
    "AuthAPI",
    "SensorDataAPI",
    "FootfallAPI",
    "helpers",
]
