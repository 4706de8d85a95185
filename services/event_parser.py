# ============================================================================
# EVENT PARSER
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Service - Subject parsing
# PURPOSE: Derive container and blob name from an Event Grid subject
# CREATED: 19 OCT 2026
# ============================================================================
"""
Event Parser

Storage event subjects look like:

    /blobServices/default/containers/<container>/blobs/<blob>

The container is the token after the first "containers" segment and the
blob name is the token after the first "blobs" segment. Only that single
token is taken, so a virtual directory path is truncated at its first
slash.
"""

from typing import List, Tuple

from core.contracts import BlobEventKind, MalformedSubjectError
from core.models import BlobIdentity, EventMetadata

CONTAINERS_MARKER = "containers"
BLOBS_MARKER = "blobs"


def _value_after(tokens: List[str], marker: str, subject: str) -> str:
    try:
        position = tokens.index(marker)
        value = tokens[position + 1]
    except (ValueError, IndexError):
        raise MalformedSubjectError(subject, marker) from None

    if not value:
        raise MalformedSubjectError(subject, marker)
    return value


def parse_subject(subject: str) -> BlobIdentity:
    """
    Parse an event subject into a BlobIdentity.

    Args:
        subject: Slash-delimited resource path

    Returns:
        BlobIdentity with non-empty container and blob name

    Raises:
        MalformedSubjectError: if a marker is missing, is the last segment,
            or is followed by an empty segment
    """
    tokens = subject.split("/")
    container = _value_after(tokens, CONTAINERS_MARKER, subject)
    blob_name = _value_after(tokens, BLOBS_MARKER, subject)
    return BlobIdentity(container=container, blob_name=blob_name)


def parse_event(event: EventMetadata) -> Tuple[BlobIdentity, BlobEventKind]:
    """Resolve the blob identity and dispatch kind of an event."""
    return parse_subject(event.subject), event.event_kind


__all__ = ["parse_subject", "parse_event", "CONTAINERS_MARKER", "BLOBS_MARKER"]
