# ============================================================================
# FUNCTION APP CONFIGURATION
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Function - Configuration management
# PURPOSE: Environment-based configuration for the replication function
# CREATED: 19 OCT 2026
# ============================================================================
"""
Function App Configuration

Loads configuration from app settings (environment variables) once per
worker process. The replication service receives the resulting object;
it never reads the environment itself.

Storage accounts are addressed by connection string:
- SourceStorageAccountConnection      -> account blobs are copied from
- DestinationStorageAccountConnection -> account replicas are written to
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional

from core.config import COPY_DEFAULTS, SAS_DEFAULTS, TRIGGER_DEFAULTS
from core.contracts import ConfigurationError

logger = logging.getLogger(__name__)

SOURCE_CONNECTION_SETTING = "SourceStorageAccountConnection"
DESTINATION_CONNECTION_SETTING = "DestinationStorageAccountConnection"


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, convert):
    value = os.environ.get(name, "").strip()
    if not value:
        return default
    try:
        return convert(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


def _positive_or_none(value: Optional[int]) -> Optional[int]:
    # Zero or negative means "no limit"
    if value is None or value <= 0:
        return None
    return value


@dataclass
class ReplicationConfig:
    """Configuration for the replication function."""

    # Storage accounts
    source_connection_string: Optional[str] = field(default=None, repr=False)
    destination_connection_string: Optional[str] = field(default=None, repr=False)

    # Trigger
    queue_name: str = TRIGGER_DEFAULTS.queue_name

    # Copy orchestration
    poll_interval_seconds: float = COPY_DEFAULTS.poll_interval_seconds
    max_poll_attempts: Optional[int] = COPY_DEFAULTS.max_poll_attempts
    verify_source_exists: bool = COPY_DEFAULTS.verify_source_exists

    # SAS
    sas_expiry_hours: int = SAS_DEFAULTS.expiry_hours

    def __post_init__(self):
        self.max_poll_attempts = _positive_or_none(self.max_poll_attempts)

        if self.poll_interval_seconds < 0:
            raise ConfigurationError(
                "poll_interval_seconds (REPLICATION_POLL_INTERVAL_SECONDS) must not be negative, "
                f"got {self.poll_interval_seconds}"
            )
        # SAS expiry must land strictly after the issue time
        if self.sas_expiry_hours < 1:
            raise ConfigurationError(
                "sas_expiry_hours (REPLICATION_SAS_EXPIRY_HOURS) must be at least 1, "
                f"got {self.sas_expiry_hours}"
            )

    @classmethod
    def from_env(cls) -> "ReplicationConfig":
        """
        Load configuration from environment variables.

        Raises:
            ConfigurationError: a numeric setting is unparsable or out of range
        """
        return cls(
            source_connection_string=os.environ.get(SOURCE_CONNECTION_SETTING),
            destination_connection_string=os.environ.get(DESTINATION_CONNECTION_SETTING),
            queue_name=os.environ.get("REPLICATION_QUEUE_NAME", TRIGGER_DEFAULTS.queue_name),
            poll_interval_seconds=_env_number(
                "REPLICATION_POLL_INTERVAL_SECONDS", COPY_DEFAULTS.poll_interval_seconds, float
            ),
            max_poll_attempts=_env_number(
                "REPLICATION_MAX_POLL_ATTEMPTS", COPY_DEFAULTS.max_poll_attempts, int
            ),
            verify_source_exists=_env_bool(
                "REPLICATION_VERIFY_SOURCE_EXISTS", COPY_DEFAULTS.verify_source_exists
            ),
            sas_expiry_hours=_env_number(
                "REPLICATION_SAS_EXPIRY_HOURS", SAS_DEFAULTS.expiry_hours, int
            ),
        )

    @property
    def has_source_config(self) -> bool:
        return bool(self.source_connection_string)

    @property
    def has_destination_config(self) -> bool:
        return bool(self.destination_connection_string)

    def missing_settings(self) -> list:
        """Names of required app settings that are not set."""
        missing = []
        if not self.has_source_config:
            missing.append(SOURCE_CONNECTION_SETTING)
        if not self.has_destination_config:
            missing.append(DESTINATION_CONNECTION_SETTING)
        return missing

    def require_connections(self) -> None:
        """
        Fail if either storage connection string is missing.

        Raises:
            ConfigurationError: naming the missing settings
        """
        missing = self.missing_settings()
        if missing:
            raise ConfigurationError(f"Missing required app settings: {', '.join(missing)}")


# Global config singleton
_config: Optional[ReplicationConfig] = None


def get_config() -> ReplicationConfig:
    """Get the global configuration singleton."""
    global _config
    if _config is None:
        _config = ReplicationConfig.from_env()
    return _config


def reset_config() -> None:
    """Drop the cached configuration (for testing)."""
    global _config
    _config = None


__all__ = [
    "ReplicationConfig",
    "get_config",
    "reset_config",
    "SOURCE_CONNECTION_SETTING",
    "DESTINATION_CONNECTION_SETTING",
]
