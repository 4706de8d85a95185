# ============================================================================
# REPLICATION RESULT MODEL
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core model - Outcome of one invocation
# PURPOSE: Report what the replication handler did for an event
# CREATED: 19 OCT 2026
# EXPORTS: ReplicationResult
# DEPENDENCIES: pydantic
# ============================================================================
"""
Replication Result Model

Returned by ReplicationService.handle(). The function host discards it;
it exists for logging and tests.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from core.contracts import BlobEventKind, ReplicationAction
from core.models.copy_state import CopyState
from core.models.event_metadata import BlobIdentity


class ReplicationResult(BaseModel):
    """Outcome of handling one storage event."""

    event_id: str
    event_kind: BlobEventKind
    action: ReplicationAction
    identity: BlobIdentity

    # Copy path
    copy_state: Optional[CopyState] = None
    poll_count: int = Field(default=0, ge=0)
    source_url: Optional[str] = Field(
        default=None,
        description="Source blob URL without the SAS token",
    )

    # Delete path
    deleted: Optional[bool] = None

    reason: Optional[str] = None

    @classmethod
    def copied(
        cls,
        event_id: str,
        identity: BlobIdentity,
        copy_state: CopyState,
        poll_count: int,
        source_url: Optional[str] = None,
    ) -> "ReplicationResult":
        return cls(
            event_id=event_id,
            event_kind=BlobEventKind.BLOB_CREATED,
            action=ReplicationAction.COPIED,
            identity=identity,
            copy_state=copy_state,
            poll_count=poll_count,
            source_url=source_url,
        )

    @classmethod
    def deleted_result(
        cls,
        event_id: str,
        identity: BlobIdentity,
        deleted: bool,
    ) -> "ReplicationResult":
        return cls(
            event_id=event_id,
            event_kind=BlobEventKind.BLOB_DELETED,
            action=ReplicationAction.DELETED,
            identity=identity,
            deleted=deleted,
        )

    @classmethod
    def skipped(
        cls,
        event_id: str,
        event_kind: BlobEventKind,
        identity: BlobIdentity,
        reason: str,
    ) -> "ReplicationResult":
        return cls(
            event_id=event_id,
            event_kind=event_kind,
            action=ReplicationAction.SKIPPED,
            identity=identity,
            reason=reason,
        )

    @property
    def copy_succeeded(self) -> bool:
        return self.copy_state is not None and self.copy_state.status.is_successful()

    def to_log_dict(self) -> Dict[str, Any]:
        """Flat dict for checkpoint logging."""
        data: Dict[str, Any] = {
            "event_id": self.event_id,
            "event_kind": self.event_kind.value,
            "action": self.action.value,
            "container": self.identity.container,
            "blob_name": self.identity.blob_name,
        }
        if self.copy_state is not None:
            data["copy_status"] = self.copy_state.status.value
            data["poll_count"] = self.poll_count
        if self.deleted is not None:
            data["deleted"] = self.deleted
        if self.reason:
            data["reason"] = self.reason
        return data


__all__ = ["ReplicationResult"]
