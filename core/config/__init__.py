# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration defaults
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized defaults for the blob replicator.
"""

from core.config.defaults import (
    TriggerDefaults,
    CopyDefaults,
    SasDefaults,
    TRIGGER_DEFAULTS,
    COPY_DEFAULTS,
    SAS_DEFAULTS,
)

__all__ = [
    "TriggerDefaults",
    "CopyDefaults",
    "SasDefaults",
    "TRIGGER_DEFAULTS",
    "COPY_DEFAULTS",
    "SAS_DEFAULTS",
]
