# ============================================================================
# SERVICES MODULE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core - Business logic layer
# PURPOSE: Event parsing and replication handling
# CREATED: 19 OCT 2026
# ============================================================================
"""
Services Module

Business logic for blob replication.
Services coordinate between the inbound event and the storage repositories.

Usage:
    from services import ReplicationService

    service = ReplicationService(get_config())
    result = await service.handle(event)
"""

from .event_parser import parse_subject, parse_event
from .replication_service import ReplicationService, replicate_event

__all__ = [
    "parse_subject",
    "parse_event",
    "ReplicationService",
    "replicate_event",
]
