# config.py
import logging
import os
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class ConfigError(Exception):
    """Raised when a configuration value cannot be parsed."""

    pass


class CourtRadarConfig:
    """Court Radar configuration class that loads settings from environment variables."""

    def __init__(self):
        """Initialize the Court Radar configuration with environment variables."""
        self.logger = logging.getLogger(__name__)

        # Application environment
        self.APP_ENV = self._get_required("APP_ENV", "dev")
        self.LOG_LEVEL = self._get_optional("LOG_LEVEL", "INFO").upper()

        # Scan simulation policy
        self.SCAN_DURATION_MS = self._get_int("SCAN_DURATION_MS", 5000)
        self.SCAN_GRACE_MS = self._get_int("SCAN_GRACE_MS", 200)
        self.SCAN_MIN_CANDIDATES = self._get_int("SCAN_MIN_CANDIDATES", 5)
        self.SCAN_MAX_CANDIDATES = self._get_int("SCAN_MAX_CANDIDATES", 12)
        self.SCAN_MAX_PLACEMENT_ATTEMPTS = self._get_int(
            "SCAN_MAX_PLACEMENT_ATTEMPTS", 100
        )
        self.SCAN_OVERLAP_POLICY = self._get_optional(
            "SCAN_OVERLAP_POLICY", "restart"
        ).lower()
        self.SCAN_LOCALITY = self._get_optional(
            "SCAN_LOCALITY", "Paradise Valley, AZ"
        )

        # Saved prospect storage
        self.DATABASE_URL = self._get_optional(
            "DATABASE_URL", "sqlite:///./court_radar.db"
        )
        self.DATABASE_ECHO = self._get_bool("DATABASE_ECHO")

        # HTTP API
        self.API_HOST = self._get_optional("API_HOST", "0.0.0.0")
        self.API_PORT = self._get_int("API_PORT", 3000)
        self.CORS_ORIGINS = self._get_list("CORS_ORIGINS", "*")

        # Outreach branding
        self.OUTREACH_SENDER_NAME = self._get_optional(
            "OUTREACH_SENDER_NAME", "Mike Woelfel"
        )
        self.OUTREACH_COMPANY = self._get_optional(
            "OUTREACH_COMPANY", "Elite Sports Builders"
        )

        if self.SCAN_MIN_CANDIDATES > self.SCAN_MAX_CANDIDATES:
            raise ConfigError(
                "SCAN_MIN_CANDIDATES must not exceed SCAN_MAX_CANDIDATES"
            )
        if self.SCAN_OVERLAP_POLICY not in ("restart", "reject"):
            raise ConfigError(
                f"SCAN_OVERLAP_POLICY must be 'restart' or 'reject', "
                f"got {self.SCAN_OVERLAP_POLICY!r}"
            )

    @property
    def is_dev(self) -> bool:
        """Check if running in the development environment."""
        return self.APP_ENV == "dev"

    def scan_policy(self):
        """Build the scan policy described by this configuration.

        Returns:
            ScanPolicy populated from the SCAN_* settings.
        """
        from .scanner import ScanPolicy

        return ScanPolicy(
            min_candidates=self.SCAN_MIN_CANDIDATES,
            max_candidates=self.SCAN_MAX_CANDIDATES,
            max_placement_attempts=self.SCAN_MAX_PLACEMENT_ATTEMPTS,
            scan_duration_ms=self.SCAN_DURATION_MS,
            grace_ms=self.SCAN_GRACE_MS,
            locality=self.SCAN_LOCALITY,
        )

    def _get_required(self, name: str, default: Optional[str] = None) -> str:
        """Get a required configuration value from environment variables.

        Args:
            name: The name of the environment variable
            default: Optional default value if not found

        Returns:
            The value of the environment variable or default if provided

        Raises:
            ValueError: If the environment variable is not found and no default is provided
        """
        if name in os.environ:
            return os.environ[name]
        if default is not None:
            logging.debug(
                "Environment variable %s not found, using default value", name
            )
            return default
        raise ValueError(
            f"Environment variable {name} not found and no default provided"
        )

    def _get_optional(self, name: str, default: str = "") -> str:
        """Get an optional configuration value from environment variables.

        Args:
            name: The name of the environment variable
            default: Default value if not found (default: "")

        Returns:
            The value of the environment variable or the default value
        """
        if name in os.environ:
            return os.environ[name]
        return default

    def _get_int(self, name: str, default: int) -> int:
        """Get an integer configuration value from environment variables.

        Raises:
            ConfigError: If the value is set but is not a non-negative integer
        """
        raw = self._get_optional(name, str(default))
        try:
            value = int(raw)
        except ValueError:
            raise ConfigError(f"Environment variable {name} must be an integer, got {raw!r}")
        if value < 0:
            raise ConfigError(f"Environment variable {name} must not be negative")
        return value

    def _get_list(self, name: str, default: str = "") -> List[str]:
        """Get a comma separated list from environment variables."""
        raw = self._get_optional(name, default)
        return [item.strip() for item in raw.split(",") if item.strip()]

    def _get_bool(self, name: str) -> bool:
        """Get a boolean configuration value from environment variables.

        Args:
            name: The name of the environment variable

        Returns:
            True if the environment variable exists and is set to 'true' or '1', False otherwise
        """
        return name in os.environ and os.environ[name].lower() in ["true", "1"]


# Create a global instance of CourtRadarConfig
config = CourtRadarConfig()
