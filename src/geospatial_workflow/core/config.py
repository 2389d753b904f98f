"""
Configuration module for the geospatial workflow.

Loads configuration from JSON file and environment variables.
"""

import json
import os
from typing import Dict, Any, List, Optional
from pathlib import Path

from . import constants
from .logger import parse_log_level


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
        if os.getenv("GEOSPATIAL_API_URL"):
            self.config.setdefault("api", {})["base_url"] = os.getenv("GEOSPATIAL_API_URL")

        if os.getenv("GEOSPATIAL_API_KEY"):
            self.config.setdefault("api", {})["api_key"] = os.getenv("GEOSPATIAL_API_KEY")

        if os.getenv("ENVIRONMENT"):
            self.config["environment"] = os.getenv("ENVIRONMENT")

        if os.getenv("LOG_LEVEL"):
            self.config.setdefault("logging", {})["level"] = os.getenv("LOG_LEVEL")

        if os.getenv("LOG_FILE"):
            self.config.setdefault("logging", {})["file"] = os.getenv("LOG_FILE")

    def _validate_config(self) -> None:
        """Validate that required configuration keys are present."""
        required_config = {
            "api": ["base_url", "api_key"],
            "query": ["measures"],
        }

        missing_sections = [section for section in required_config if section not in self.config]
        if missing_sections:
            raise ValueError(
                f"Missing required configuration sections: {', '.join(missing_sections)}"
            )

        missing_keys = []
        for section, keys in required_config.items():
            for key in keys:
                if not self.config[section].get(key):
                    missing_keys.append(f"{section}.{key}")

        if missing_keys:
            raise ValueError(
                f"Missing required configuration keys: {', '.join(missing_keys)}"
            )

        if not isinstance(self.config["query"]["measures"], list):
            raise ValueError("query.measures must be a list of measure names")

        if self.config["query"].get("time_series"):
            missing_dates = [
                f"query.{key}" for key in ("start_date", "end_date")
                if not self.config["query"].get(key)
            ]
            if missing_dates:
                raise ValueError(
                    f"Time series queries require: {', '.join(missing_dates)}"
                )

        parse_log_level(self.log_level)

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
    def api_key(self) -> Optional[str]:
        """Get API subscription key."""
        return self.get("api.api_key")

    @property
    def api_timeout(self) -> int:
        """Get API timeout in seconds."""
        return self.get("api.timeout", 30)

    @property
    def api_max_retries(self) -> int:
        """Get maximum API retry attempts."""
        return self.get("api.max_retries", 3)

    @property
    def api_verify_ssl(self) -> bool:
        """Get API SSL verification setting."""
        return self.get("api.verify_ssl", True)

    @property
    def query_measures(self) -> List[str]:
        """Get the measure names to request."""
        return self.get("query.measures", [])

    @property
    def query_time_series(self) -> bool:
        """Check if the requested measures are time series."""
        return self.get("query.time_series", False)

    @property
    def query_geometry(self) -> Optional[Dict[str, Any]]:
        """Get the GeoJSON geometry of the region of interest."""
        return self.get("query.geometry")

    @property
    def query_start_date(self) -> Optional[str]:
        """Get the first date of a time series query."""
        return self.get("query.start_date")

    @property
    def query_end_date(self) -> Optional[str]:
        """Get the last date of a time series query."""
        return self.get("query.end_date")

    @property
    def co_registered(self) -> bool:
        """Check if the requested measures share one grid."""
        return self.get("query.co_registered", True)

    @property
    def output_path(self) -> str:
        """Get output file path."""
        return self.get("output.path", constants.DEFAULT_OUTPUT_PATH)

    @property
    def output_driver(self) -> str:
        """Get output file driver."""
        return self.get("output.driver", constants.DEFAULT_OUTPUT_DRIVER)

    @property
    def max_field_length(self) -> int:
        """Get the maximum output field name length."""
        return self.get("output.max_field_length", constants.SHAPEFILE_MAX_FIELD_LENGTH)

    @property
    def crs(self) -> str:
        """Get the coordinate reference system of the output."""
        return self.get("output.crs", constants.DEFAULT_CRS)

    @property
    def log_level(self) -> str:
        """Get the logging level name."""
        return self.get("logging.level", "INFO")

    @property
    def log_file(self) -> Optional[str]:
        """Get the log file path, None when file logging is switched off."""
        return self.get("logging.file", constants.DEFAULT_LOG_FILE) or None

    @property
    def log_console(self) -> bool:
        """Check if log records are echoed to the console."""
        return self.get("logging.console", True)

    def __repr__(self) -> str:
        """String representation of config."""
        return f"Config(file={self.config_file}, env={self.get('environment')})"
