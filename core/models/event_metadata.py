# ============================================================================
# EVENT METADATA MODEL
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Core model - Inbound queue message
# PURPOSE: Pydantic model for Event Grid storage events on the copy queue
# CREATED: 19 OCT 2026
# EXPORTS: EventMetadata, BlobIdentity
# DEPENDENCIES: pydantic
# ============================================================================
"""
Event Metadata Model

The message delivered by the queue trigger. Event Grid routes storage
events into the copy queue; only three fields are consumed:

    id         - opaque identifier, used for logging
    subject    - /blobServices/default/containers/<container>/blobs/<blob>
    eventType  - Microsoft.Storage.BlobCreated, Microsoft.Storage.BlobDeleted, ...

Everything else on the Event Grid envelope (data, topic, eventTime, ...)
is ignored. Explicit deserialization via model_validate_json().
"""

from pydantic import BaseModel, ConfigDict, Field

from core.contracts import BlobEventKind


class BlobIdentity(BaseModel):
    """A blob addressed by container and name, derived from an event subject."""

    container: str = Field(..., min_length=1)
    blob_name: str = Field(..., min_length=1)

    model_config = ConfigDict(frozen=True)

    @property
    def path(self) -> str:
        return f"{self.container}/{self.blob_name}"

    def __str__(self) -> str:
        return self.path


class EventMetadata(BaseModel):
    """
    Storage event as delivered on the copy queue.

    Immutable for the duration of an invocation.
    """

    id: str = Field(..., description="Event identifier, used only for logging")
    subject: str = Field(..., description="Slash-delimited resource path")
    event_type: str = Field(
        ...,
        alias="eventType",
        description="Event Grid event type discriminator",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def event_kind(self) -> BlobEventKind:
        """Closed event kind for dispatch."""
        return BlobEventKind.from_event_type(self.event_type)


__all__ = ["EventMetadata", "BlobIdentity"]
