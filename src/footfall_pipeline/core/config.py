"""
Configuration module for the footfall pipeline.

Loads configuration from JSON file and environment variables.
"""

import json
import os
from typing import Dict, Any, Optional
from pathlib import Path

from . import constants


class Config:
    """Configuration manager for the application."""

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Path to configuration JSON file. If None, uses CONFIG_FILE env var
                        or defaults to 'config.json'
        """
        self.config_file = config_file or os.getenv("CONFIG_FILE", "config.json")
        self.config: Dict[str, Any] = {}
        self._load_config()
        self._override_from_env()
        self._validate_config()

    def _load_config(self) -> None:
        """Load configuration from JSON file."""
        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        with open(config_path, "r", encoding="utf-8") as f:
            self.config = json.load(f)

    def _override_from_env(self) -> None:
        """Override configuration with environment variables."""
        if os.getenv("API_BASE_URL"):
            self.config.setdefault("api", {})["base_url"] = os.getenv("API_BASE_URL")

        # Authentication
        for env_var, key in (
            ("API_EMAIL", "email"),
            ("API_PASSWORD", "password"),
            ("API_TOKEN", "token"),
        ):
            if os.getenv(env_var):
                self.config.setdefault("authentication", {})[key] = os.getenv(env_var)

        if os.getenv("PIPELINE_TIMEZONE"):
            self.config.setdefault("pipeline", {})["timezone"] = os.getenv("PIPELINE_TIMEZONE")

        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

    def _validate_config(self) -> None:
        """Validate that required configuration keys are present."""
        required_config = {
            "api": ["base_url", "timeout", "max_retries"],
            "pipeline": [],
        }

        missing_sections = [
            section for section in required_config if section not in self.config
        ]
        if missing_sections:
            raise ValueError(
                f"Missing required configuration sections: {', '.join(missing_sections)}"
            )

        missing_keys = []
        for section, keys in required_config.items():
            for key in keys:
                if key not in self.config[section]:
                    missing_keys.append(f"{section}.{key}")

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}"
            )

        # Credentials are optional (unauthenticated sessions use synthetic data),
        # but a half-configured login is a mistake
        auth = self.config.get("authentication", {})
        if bool(auth.get("email")) != bool(auth.get("password")):
            raise ValueError(
                "Authentication configuration must include both 'email' and 'password'"
            )

        cadence = self.get("pipeline.cadence_minutes", constants.DEFAULT_CADENCE_MINUTES)
        if not isinstance(cadence, int) or cadence <= 0:
            raise ValueError(f"Invalid pipeline.cadence_minutes: {cadence}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key (supports dot notation).

        Args:
            key: Configuration key (e.g., 'api.base_url')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split(".")
        value = self.config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    @property
    def api_base_url(self) -> str:
        """Get API base URL."""
        return self.get("api.base_url", "")

    @property
    def api_timeout(self) -> int:
        """Get API timeout in seconds."""
        return self.get("api.timeout", constants.DEFAULT_API_TIMEOUT)

    @property
    def api_max_retries(self) -> int:
        """Get maximum API retry attempts."""
        return self.get("api.max_retries", constants.DEFAULT_API_MAX_RETRIES)

    @property
    def api_verify_ssl(self) -> bool:
        """Get API SSL verification setting."""
        return self.get("api.verify_ssl", True)

    @property
    def auth_email(self) -> Optional[str]:
        """Get authentication email."""
        return self.get("authentication.email")

    @property
    def auth_password(self) -> Optional[str]:
        """Get authentication password."""
        return self.get("authentication.password")

    @property
    def auth_token(self) -> Optional[str]:
        """Get a pre-issued bearer token."""
        return self.get("authentication.token")

    @property
    def has_credentials(self) -> bool:
        """Check whether any way of authenticating is configured."""
        return bool(self.auth_token or (self.auth_email and self.auth_password))

    @property
    def timezone(self) -> str:
        """Get the timezone used for bucket and day boundaries."""
        return self.get("pipeline.timezone", constants.DEFAULT_TIMEZONE)

    @property
    def cadence_minutes(self) -> int:
        """Get the raw sampling cadence in minutes."""
        return self.get("pipeline.cadence_minutes", constants.DEFAULT_CADENCE_MINUTES)

    @property
    def default_group_by(self) -> str:
        """Get the default bucket granularity."""
        return self.get("pipeline.default_group_by", constants.DEFAULT_GROUP_BY)

    @property
    def default_aggregation(self) -> str:
        """Get the default aggregation mode."""
        return self.get("pipeline.default_aggregation", constants.DEFAULT_AGGREGATION)

    @property
    def last_updated_file(self) -> str:
        """Get the path of the last-updated marker file."""
        return self.get("pipeline.last_updated_file", constants.DEFAULT_LAST_UPDATED_FILE)

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, env={self.get('environment')})"
