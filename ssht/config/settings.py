"""Application settings from environment variables.

Centralized environment variable parsing and validation.
"""

import logging
import os
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

LOG_FORMATS = ("text", "json")


@dataclass
class Settings:
    """Application settings from environment.

    Handles parsing, validation, and defaults for all env vars.
    Command-line flags override these after loading.
    """

    # Dispatch
    max_concurrency: int = field(default=10)

    # Connection pool
    connect_timeout: int = field(default=30)
    keepalive_interval: int = field(default=15)
    keepalive_count_max: int = field(default=3)
    known_hosts: str | None = field(default=None)

    # Inventory
    config_path: str | None = field(default=None)

    # Logging
    log_level: str = field(default="INFO")
    log_format: str = field(default="text")
    log_file: str | None = field(default=None)
    log_colors: bool = field(default=True)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from SSHT_* environment variables.

        Returns:
            Settings instance with values from environment
        """
        return cls(
            max_concurrency=cls._get_positive_int("SSHT_MAX_CONCURRENCY", 10),
            connect_timeout=cls._get_positive_int("SSHT_CONNECT_TIMEOUT", 30),
            keepalive_interval=cls._get_positive_int("SSHT_KEEPALIVE_INTERVAL", 15),
            keepalive_count_max=cls._get_positive_int("SSHT_KEEPALIVE_COUNT_MAX", 3),
            known_hosts=cls._get_known_hosts(),
            config_path=os.getenv("SSHT_CONFIG") or None,
            log_level=os.getenv("SSHT_LOG_LEVEL", "INFO").upper(),
            log_format=cls._get_log_format(),
            log_file=os.getenv("SSHT_LOG_FILE") or None,
            log_colors=cls._get_bool("SSHT_LOG_COLORS", True),
        )

    @staticmethod
    def _get_positive_int(key: str, default: int) -> int:
        """Get a positive integer from environment.

        Args:
            key: Environment variable key
            default: Default value if not set or invalid

        Returns:
            Integer value from environment or default
        """
        value = os.getenv(key)
        if value is None:
            return default

        try:
            parsed = int(value)
        except ValueError:
            logger.warning("Invalid int for %s: %s, using default %d", key, value, default)
            return default

        if parsed <= 0:
            logger.warning("%s must be > 0, got %d, using default %d", key, parsed, default)
            return default
        return parsed

    @staticmethod
    def _get_bool(key: str, default: bool) -> bool:
        value = os.getenv(key)
        if value is None:
            return default
        return value.lower() in ("1", "true", "yes", "on")

    @staticmethod
    def _get_known_hosts() -> str | None:
        """Get known_hosts path; unset, empty or "none" disables verification."""
        value = os.getenv("SSHT_KNOWN_HOSTS", "").strip()
        if not value or value.lower() == "none":
            return None
        return os.path.expanduser(value)

    @staticmethod
    def _get_log_format() -> str:
        log_format = os.getenv("SSHT_LOG_FORMAT", "text").lower()
        if log_format in LOG_FORMATS:
            return log_format
        logger.warning("Unknown SSHT_LOG_FORMAT %r, using text", log_format)
        return "text"
