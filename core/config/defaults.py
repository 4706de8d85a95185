# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for the trigger, copy polling and SAS grants
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Values the replicator falls back to when the app settings do not override
them. The function configuration (function/config.py) reads environment
variables on top of these.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides live in FunctionConfig-style loaders
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TriggerDefaults:
    """Defaults for the queue trigger binding."""
    queue_name: str = "copyblobs"
    # App setting holding the queue's storage connection
    queue_connection_setting: str = "AzureWebJobsStorage"


@dataclass(frozen=True)
class CopyDefaults:
    """
    Defaults for server-side copy orchestration.

    max_poll_attempts of None polls until the copy leaves PENDING.
    """
    poll_interval_seconds: float = 0.5
    max_poll_attempts: Optional[int] = None
    verify_source_exists: bool = False


@dataclass(frozen=True)
class SasDefaults:
    """Defaults for the ad-hoc source blob SAS."""
    expiry_hours: int = 1
    read: bool = True
    write: bool = True
    create: bool = True


TRIGGER_DEFAULTS = TriggerDefaults()
COPY_DEFAULTS = CopyDefaults()
SAS_DEFAULTS = SasDefaults()


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "TriggerDefaults",
    "CopyDefaults",
    "SasDefaults",
    "TRIGGER_DEFAULTS",
    "COPY_DEFAULTS",
    "SAS_DEFAULTS",
]
