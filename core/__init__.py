# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core module initialization
# PURPOSE: Export core contracts and models
# CREATED: 19 OCT 2026
# ============================================================================

from core.contracts import (
    BlobEventKind,
    CopyStatus,
    ReplicationAction,
    ReplicationError,
    MalformedSubjectError,
    CopyPollTimeoutError,
    ConfigurationError,
)
from core.models import (
    EventMetadata,
    BlobIdentity,
    CopyState,
    ReplicationResult,
)

__all__ = [
    # Enums
    "BlobEventKind",
    "CopyStatus",
    "ReplicationAction",
    # Errors
    "ReplicationError",
    "MalformedSubjectError",
    "CopyPollTimeoutError",
    "ConfigurationError",
    # Models
    "EventMetadata",
    "BlobIdentity",
    "CopyState",
    "ReplicationResult",
]
