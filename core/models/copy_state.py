# ============================================================================
# COPY STATE MODEL
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core model - Observed server-side copy state
# PURPOSE: Snapshot of a destination blob's copy properties
# CREATED: 19 OCT 2026
# EXPORTS: CopyState
# DEPENDENCIES: pydantic
# ============================================================================
"""
Copy State Model

Transient state of an in-flight server-side copy, as reported by the
destination account. Not owned by the replicator, only observed.

The SDK reports progress as a "<bytes copied>/<total bytes>" string;
both numbers are optional while the service has not started the copy.
"""

from typing import Any, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field

from core.contracts import CopyStatus


def _parse_progress(progress: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
    if not progress:
        return None, None
    copied, _, total = progress.partition("/")
    try:
        return int(copied), int(total) if total else None
    except ValueError:
        return None, None


class CopyState(BaseModel):
    """Copy properties of a destination blob at one point in time."""

    status: CopyStatus
    bytes_copied: Optional[int] = Field(default=None, ge=0)
    total_bytes: Optional[int] = Field(default=None, ge=0)
    copy_id: Optional[str] = None
    status_description: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_properties(cls, copy_properties: Any) -> "CopyState":
        """
        Build from the SDK's CopyProperties (BlobProperties.copy).

        A blob with no copy status was not created by a copy operation;
        it is reported as SUCCESS so that pollers stop.
        """
        raw_status = getattr(copy_properties, "status", None)
        status = CopyStatus(raw_status.lower()) if raw_status else CopyStatus.SUCCESS
        bytes_copied, total_bytes = _parse_progress(getattr(copy_properties, "progress", None))
        return cls(
            status=status,
            bytes_copied=bytes_copied,
            total_bytes=total_bytes,
            copy_id=getattr(copy_properties, "id", None),
            status_description=getattr(copy_properties, "status_description", None),
        )

    @property
    def is_pending(self) -> bool:
        return self.status == CopyStatus.PENDING

    def progress_text(self) -> str:
        """Human-readable progress, zero when unknown."""
        return f"{self.bytes_copied or 0} of {self.total_bytes or 0}"


__all__ = ["CopyState"]
