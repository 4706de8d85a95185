# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Function - Startup validation
# PURPOSE: Validate app settings before registering the queue trigger
# CREATED: 19 OCT 2026
# ============================================================================
"""
Startup Validation

Validates configuration before registering the replication blueprint:
fail fast, log clearly, degrade gracefully.

If validation fails, only /livez and /readyz endpoints are available and
queue messages stay on the queue until the settings are fixed.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from azure.storage.blob import BlobServiceClient

from core.contracts import ConfigurationError
from function.config import (
    DESTINATION_CONNECTION_SETTING,
    SOURCE_CONNECTION_SETTING,
    ReplicationConfig,
    get_config,
)

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of a startup validation check."""

    name: str
    passed: bool
    error_type: Optional[str] = None
    error_message: Optional[str] = None


def _not_run(name: str) -> ValidationResult:
    return ValidationResult(name, False, "NotRun", "Validation not yet run")


@dataclass
class StartupState:
    """Track all startup validation checks."""

    config: ValidationResult = field(default_factory=lambda: _not_run("config"))
    env_vars: ValidationResult = field(default_factory=lambda: _not_run("env_vars"))
    source_storage: ValidationResult = field(default_factory=lambda: _not_run("source_storage"))
    destination_storage: ValidationResult = field(
        default_factory=lambda: _not_run("destination_storage")
    )

    def _checks(self) -> List[ValidationResult]:
        return [self.config, self.env_vars, self.source_storage, self.destination_storage]

    @property
    def all_passed(self) -> bool:
        """Check if all validations passed."""
        return all(c.passed for c in self._checks())

    def failed_checks(self) -> List[ValidationResult]:
        """Get list of failed validation checks."""
        return [c for c in self._checks() if not c.passed]

    def failed_check_names(self) -> List[str]:
        """Get names of failed checks."""
        return [c.name for c in self.failed_checks()]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "all_passed": self.all_passed,
            "checks": {
                c.name: {
                    "passed": c.passed,
                    "error": c.error_message if not c.passed else None,
                }
                for c in self._checks()
            },
        }


# Global singleton
STARTUP_STATE = StartupState()


def validate_startup() -> bool:
    """
    Run all startup validation checks.

    Returns True if all checks pass.
    Updates global STARTUP_STATE with results.
    """
    logger.info("Starting validation checks...")

    # 0. Settings load (numeric values parse and are in range)
    try:
        config = get_config()
    except ConfigurationError as e:
        STARTUP_STATE.config = ValidationResult(
            name="config",
            passed=False,
            error_type=type(e).__name__,
            error_message=str(e),
        )
        logger.error(f"  [FAIL] Configuration: {e}")
        for name in ("env_vars", "source_storage", "destination_storage"):
            setattr(
                STARTUP_STATE,
                name,
                ValidationResult(name, False, "Skipped", "Configuration failed to load"),
            )
        logger.error(f"Validation FAILED: {STARTUP_STATE.failed_check_names()}")
        return False

    STARTUP_STATE.config = ValidationResult(name="config", passed=True)
    logger.info("  [PASS] Configuration")

    # 1. Required app settings
    STARTUP_STATE.env_vars = _validate_env_vars(config)
    if STARTUP_STATE.env_vars.passed:
        logger.info("  [PASS] Environment variables")
    else:
        logger.error(f"  [FAIL] Environment variables: {STARTUP_STATE.env_vars.error_message}")

    # 2. Connection strings parse (no network call)
    STARTUP_STATE.source_storage = _validate_connection_string(
        "source_storage", SOURCE_CONNECTION_SETTING, config.source_connection_string
    )
    STARTUP_STATE.destination_storage = _validate_connection_string(
        "destination_storage", DESTINATION_CONNECTION_SETTING, config.destination_connection_string
    )
    for check in (STARTUP_STATE.source_storage, STARTUP_STATE.destination_storage):
        if check.passed:
            logger.info(f"  [PASS] {check.name} connection string")
        else:
            logger.error(f"  [FAIL] {check.name} connection string: {check.error_message}")

    if STARTUP_STATE.all_passed:
        logger.info("All validation checks PASSED")
    else:
        logger.error(f"Validation FAILED: {STARTUP_STATE.failed_check_names()}")

    return STARTUP_STATE.all_passed


def _validate_env_vars(config: ReplicationConfig) -> ValidationResult:
    """Validate required environment variables."""
    missing = config.missing_settings()
    if missing:
        return ValidationResult(
            name="env_vars",
            passed=False,
            error_type="MissingEnvVar",
            error_message=f"{', '.join(missing)} required",
        )
    return ValidationResult(name="env_vars", passed=True)


def _validate_connection_string(
    name: str,
    setting: str,
    connection_string: Optional[str],
) -> ValidationResult:
    """
    Validate that a storage connection string can be parsed.

    Note: connectivity is not checked, it would be too slow for cold start.
    """
    if not connection_string:
        return ValidationResult(
            name=name,
            passed=False,
            error_type="Skipped",
            error_message=f"{setting} not set",
        )

    try:
        client = BlobServiceClient.from_connection_string(connection_string)
        client.close()
    except ValueError as e:
        return ValidationResult(
            name=name,
            passed=False,
            error_type=type(e).__name__,
            error_message=f"{setting} is not a valid storage connection string: {e}",
        )
    return ValidationResult(name=name, passed=True)


__all__ = ["STARTUP_STATE", "validate_startup", "ValidationResult", "StartupState"]
