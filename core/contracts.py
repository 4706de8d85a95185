# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Foundation - Core enums and exceptions
# PURPOSE: Event kinds, copy statuses and the replication error hierarchy
# CREATED: 19 OCT 2026
# EXPORTS: BlobEventKind, CopyStatus, ReplicationError, MalformedSubjectError,
#          CopyPollTimeoutError, ConfigurationError
# DEPENDENCIES: enum
# ============================================================================
"""
Base contracts for the blob replicator.

These cross every boundary of the function:
- Queue (Event Grid message delivered through a storage queue)
- Storage (copy status reported by the destination account)
- Python (internal dispatch and results)
"""

from enum import Enum
from typing import Optional


# ============================================================================
# EVENT GRID EVENT TYPES
# ============================================================================

BLOB_CREATED_EVENT_TYPE = "Microsoft.Storage.BlobCreated"
BLOB_DELETED_EVENT_TYPE = "Microsoft.Storage.BlobDeleted"


# ============================================================================
# STATUS ENUMS
# ============================================================================

class BlobEventKind(str, Enum):
    """
    Closed set of event kinds the replicator dispatches on.

    Anything that is not a blob creation or deletion maps to OTHER,
    which is handled as a successful no-op.
    """
    BLOB_CREATED = "blob_created"
    BLOB_DELETED = "blob_deleted"
    OTHER = "other"

    @classmethod
    def from_event_type(cls, event_type: Optional[str]) -> "BlobEventKind":
        """Map an Event Grid eventType string to a kind (exact match)."""
        if event_type == BLOB_CREATED_EVENT_TYPE:
            return cls.BLOB_CREATED
        if event_type == BLOB_DELETED_EVENT_TYPE:
            return cls.BLOB_DELETED
        return cls.OTHER


class CopyStatus(str, Enum):
    """
    Server-side copy states reported by the storage service.

    State transitions:
        PENDING -> SUCCESS
                -> FAILED
                -> ABORTED
    """
    PENDING = "pending"          # Copy in flight
    SUCCESS = "success"          # Copy finished, destination is complete
    FAILED = "failed"            # Copy failed on the service side
    ABORTED = "aborted"          # Copy aborted by a caller

    def is_terminal(self) -> bool:
        """Check if this is a terminal state (no further transitions)."""
        return self in (CopyStatus.SUCCESS, CopyStatus.FAILED, CopyStatus.ABORTED)

    def is_successful(self) -> bool:
        """Check if this represents a completed copy."""
        return self == CopyStatus.SUCCESS


class ReplicationAction(str, Enum):
    """What a single invocation did to the destination account."""
    COPIED = "copied"
    DELETED = "deleted"
    SKIPPED = "skipped"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class ReplicationError(Exception):
    """Base exception for replication errors."""
    pass


class MalformedSubjectError(ReplicationError, LookupError):
    """Raised when an event subject does not name a container and a blob."""
    def __init__(self, subject: str, marker: str):
        self.subject = subject
        self.marker = marker
        super().__init__(
            f"Subject has no value after marker '{marker}': {subject!r}"
        )


class CopyPollTimeoutError(ReplicationError):
    """Raised when a copy is still pending after the configured poll attempts."""
    def __init__(self, container: str, blob_name: str, attempts: int):
        self.container = container
        self.blob_name = blob_name
        self.attempts = attempts
        super().__init__(
            f"Copy of {container}/{blob_name} still pending after {attempts} polls"
        )


class ConfigurationError(ReplicationError, ValueError):
    """Raised when required configuration is missing."""
    pass


__all__ = [
    "BLOB_CREATED_EVENT_TYPE",
    "BLOB_DELETED_EVENT_TYPE",
    "BlobEventKind",
    "CopyStatus",
    "ReplicationAction",
    "ReplicationError",
    "MalformedSubjectError",
    "CopyPollTimeoutError",
    "ConfigurationError",
]
