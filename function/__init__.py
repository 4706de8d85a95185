# ============================================================================
# FUNCTION APP MODULE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Function - Azure Function App components
# PURPOSE: Queue-triggered blob replication function
# CREATED: 19 OCT 2026
# ============================================================================
"""
Function App Module

Contains all components specific to the Azure Function App deployment:
- Blueprints (queue trigger)
- Configuration (app settings)
- Startup validation
"""

__all__ = []
