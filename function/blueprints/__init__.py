# ============================================================================
# FUNCTION APP BLUEPRINTS
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Function - Trigger blueprints
# PURPOSE: Azure Functions V2 blueprints for triggers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Function App Blueprints

Azure Functions V2 blueprints. The replication blueprint is registered
only when startup validation passes.

Blueprints are imported by function_app.py directly so that a failed
import cannot take down the probes.
"""

__all__ = []
