# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# CREATED: 19 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Pydantic models for the blob replicator:
    - EventMetadata: inbound queue message
    - BlobIdentity: container + blob name derived from the event subject
    - CopyState: observed server-side copy state
    - ReplicationResult: outcome of one invocation
"""

from core.models.event_metadata import EventMetadata, BlobIdentity
from core.models.copy_state import CopyState
from core.models.replication_result import ReplicationResult

__all__ = [
    # Inbound
    "EventMetadata",
    "BlobIdentity",
    # Storage
    "CopyState",
    # Outcome
    "ReplicationResult",
]
