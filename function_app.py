# ============================================================================
# BLOB REPLICATOR - Azure Function App
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Function App - Queue-triggered blob replication
# PURPOSE: Entry point for the Azure Functions host
# CREATED: 19 OCT 2026
# ============================================================================
"""
Blob Replicator Function App

Azure Functions V2 entry point providing:
- Queue trigger (copyblobs) replicating storage events from the source
  storage account to the destination storage account
- Health probes

Required app settings:
- SourceStorageAccountConnection
- DestinationStorageAccountConnection
- AzureWebJobsStorage (queue connection, set by the platform)

Endpoints:
- /api/livez - Liveness probe (always available)
- /api/readyz - Readiness probe (checks startup validation)
"""

import azure.functions as func
import json
import logging
import os

from __version__ import __version__

# ============================================================================
# CREATE APP FIRST (before any imports that might fail)
# ============================================================================

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger(__name__)
logger.info("=" * 60)
logger.info(f"Blob Replicator Function App Starting (v{__version__})")
logger.info("=" * 60)

SERVICE_NAME = "blob-replicator"


def _json_response(data: dict, status_code: int = 200) -> func.HttpResponse:
    """Create JSON HTTP response."""
    return func.HttpResponse(
        json.dumps(data, default=str),
        status_code=status_code,
        headers={"Content-Type": "application/json"},
    )


# ============================================================================
# EARLY PROBES (Before validation - always available)
# ============================================================================


@app.route(route="livez", methods=["GET"])
def liveness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """
    Liveness probe - always returns 200 if function is running.

    GET /api/livez
    """
    return _json_response({"alive": True, "service": SERVICE_NAME, "version": __version__})


@app.route(route="readyz", methods=["GET"])
def readiness_probe(req: func.HttpRequest) -> func.HttpResponse:
    """
    Readiness probe - returns 200 if startup validation passed.

    GET /api/readyz

    Returns 503 with the failed checks otherwise.
    """
    from function.startup import STARTUP_STATE

    if STARTUP_STATE.all_passed:
        return _json_response({"ready": True, "service": SERVICE_NAME})

    return _json_response(
        {
            "ready": False,
            "service": SERVICE_NAME,
            "failed_checks": STARTUP_STATE.failed_check_names(),
            "details": STARTUP_STATE.to_dict(),
        },
        status_code=503,
    )


# ============================================================================
# STARTUP VALIDATION
# ============================================================================
# If validation fails, only /livez and /readyz are available.

from core.logging import configure_logging
from function.config import get_config
from function.startup import validate_startup, STARTUP_STATE

# Not from get_config(): logging is needed before the settings are validated
configure_logging(level=os.environ.get("LOG_LEVEL", "INFO"))

logger.info("Running startup validation...")
validate_startup()

if not STARTUP_STATE.all_passed:
    logger.error("=" * 60)
    logger.error("STARTUP VALIDATION FAILED")
    logger.error("=" * 60)
    logger.error("Only /api/livez and /api/readyz endpoints available")
    for check in STARTUP_STATE.failed_checks():
        logger.error(f"  FAILED: {check.name} - {check.error_message}")
    logger.error("=" * 60)
else:
    logger.info("Startup validation PASSED")


# ============================================================================
# BLUEPRINT REGISTRATION (Conditional on startup success)
# ============================================================================

if STARTUP_STATE.all_passed:
    logger.info("Registering blueprints...")

    from function.blueprints.replication_bp import replication_bp
    app.register_functions(replication_bp)
    logger.info(f"  Registered: replication_bp (queue: {get_config().queue_name})")

    logger.info("=" * 60)
    logger.info("Blob Replicator Function App Ready")
    logger.info("=" * 60)
else:
    logger.warning("=" * 60)
    logger.warning("SKIPPING blueprint registration - startup validation failed")
    logger.warning("=" * 60)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = ["app"]
