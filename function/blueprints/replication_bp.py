# ============================================================================
# REPLICATION BLUEPRINT
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Function - Queue trigger
# PURPOSE: Queue-triggered entry point for storage event replication
# CREATED: 19 OCT 2026
# ============================================================================
"""
Replication Blueprint

Queue trigger on the copy queue (default "copyblobs"). Event Grid delivers
storage events to the queue; each message is one event:

    {"id": "...", "subject": ".../containers/<c>/blobs/<b>", "eventType": "..."}

Any exception fails the invocation. The Functions host then retries the
message and eventually moves it to the poison queue.
"""

import logging

import azure.functions as func

from core.config import TRIGGER_DEFAULTS
from core.logging import log_context
from core.models import EventMetadata, ReplicationResult
from function.config import get_config
from services.replication_service import replicate_event

logger = logging.getLogger(__name__)
replication_bp = func.Blueprint()


def decode_event(msg: func.QueueMessage) -> EventMetadata:
    """
    Decode a queue message body into EventMetadata.

    Raises:
        pydantic.ValidationError: body is not a JSON event with id, subject, eventType
    """
    return EventMetadata.model_validate_json(msg.get_body())


@replication_bp.function_name(name="TriggerBlobCopy")
@replication_bp.queue_trigger(
    arg_name="msg",
    queue_name=get_config().queue_name,
    connection=TRIGGER_DEFAULTS.queue_connection_setting,
)
async def trigger_blob_copy(msg: func.QueueMessage) -> None:
    """
    Replicate one storage event from the source to the destination account.

    BlobCreated -> server-side copy, BlobDeleted -> delete replica,
    anything else -> no-op.
    """
    with log_context(invocation_id=msg.id):
        try:
            event = decode_event(msg)
        except Exception as e:
            logger.error(f"Invalid queue message {msg.id} (dequeue_count={msg.dequeue_count}): {e}")
            raise

        result: ReplicationResult = await replicate_event(event, get_config())
        logger.info(
            f"Event {event.id} handled: action={result.action.value}, "
            f"blob={result.identity.path}"
        )


__all__ = ["replication_bp", "trigger_blob_copy", "decode_event"]
