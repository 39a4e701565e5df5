"""
Authentication operations for the footfall backend API.

Obtains, refreshes and drops the bearer token used by data endpoints.
"""

import os
import logging
from typing import Dict, Any, Optional

import requests  # type: ignore

from ..core import constants
from .client import APIClient


class AuthAPI(APIClient):
    """API client with authentication capabilities."""

    logger: logging.Logger

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
        Initialize API client with authentication.

        Args:
            base_url: Base URL for the API
            email: Email for authentication
            password: Password for authentication
            token: Pre-issued bearer token (skips login)
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            verify_ssl: Whether to verify SSL certificates
            logger: Logger instance
        """
        super().__init__(base_url, timeout, max_retries, verify_ssl, logger)

        self.email = email or os.getenv("API_EMAIL")
        self.password = password or os.getenv("API_PASSWORD")

        if token:
            self.use_token(token)

    def use_token(self, token: str, refresh_token: Optional[str] = None) -> None:
        """
        Authenticate with an already issued bearer token.

        Args:
            token: Bearer token
            refresh_token: Refresh token, if one was issued with it
        """
        if not token:
            raise ValueError("Token must not be empty")

        self.token = token
        self.refresh_token = refresh_token
        self.is_authenticated = True
        self._update_headers()

    def login(self) -> Dict[str, Any]:
        """
        Login with email and password.

        Returns:
            Login response containing 'token' and 'refreshToken'

        Raises:
            ValueError: If credentials are missing or no token is returned
            requests.exceptions.RequestException: On login failure
        """
        self.logger.info("Logging in to footfall backend")

        if not self.email or not self.password:
            raise ValueError("Email and password are required for authentication")

        try:
            data = self.post(
                "/auth/login",
                {"email": self.email, "password": self.password},
                skip_auth_check=True
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Login failed: {e}")
            self.is_authenticated = False
            raise

        if not data or not data.get("token"):
            self.logger.error("No token received in login response")
            raise ValueError("No token received in login response")

        self.use_token(data["token"], data.get("refreshToken"))
        self.logger.info(f"Successfully logged in as {self.email}")
        return data

    def refresh(self) -> Dict[str, Any]:
        """
        Exchange the refresh token for a new bearer token.

        Returns:
            Refresh response containing the new 'token'

        Raises:
            RuntimeError: If there is no refresh token
            requests.exceptions.RequestException: On refresh failure
        """
        if not self.refresh_token:
            raise RuntimeError("No refresh token, cannot refresh session")

        self.logger.debug("Refreshing session")

        try:
            data = self.post(
                "/auth/refresh",
                {"refreshToken": self.refresh_token},
                skip_auth_check=True
            )
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Session refresh failed: {e}")
            self.logout()
            raise

        if not data or not data.get("token"):
            raise ValueError("No token received in refresh response")

        self.use_token(data["token"], data.get("refreshToken", self.refresh_token))
        self.logger.debug("Session refreshed successfully")
        return data

    def logout(self) -> None:
        """Drop the bearer token; later data requests fall back to demo data."""
        if not self.is_authenticated:
            self.logger.debug("Not authenticated, nothing to log out")
            return

        self.token = None
        self.refresh_token = None
        self.is_authenticated = False
        self._update_headers()
        self.logger.info("Logged out")
