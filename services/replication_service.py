# ============================================================================
# REPLICATION SERVICE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Service - Replication handler
# PURPOSE: Apply one storage event to the destination account
# CREATED: 19 OCT 2026
# ============================================================================
"""
Replication Service

Handles one storage event end to end:

    1. Parse container/blob from the subject and the event kind
    2. Open source and destination repositories from the configuration
    3. Ensure the destination container exists (every event kind)
    4. Dispatch:
        BLOB_CREATED -> SAS-signed server-side copy, poll until not pending
        BLOB_DELETED -> delete the replica if it exists
        OTHER        -> nothing

Copy outcomes FAILED and ABORTED end the poll like SUCCESS does. They are
logged at WARNING and reported in the result, never raised. Errors from
the storage SDK propagate to the function host unchanged.
"""

import asyncio
import logging
from contextlib import AsyncExitStack
from typing import Awaitable, Callable, Optional, Tuple

from core.contracts import BlobEventKind, CopyPollTimeoutError
from core.logging import log_checkpoint, log_context
from core.models import BlobIdentity, CopyState, EventMetadata, ReplicationResult
from function.config import ReplicationConfig
from infrastructure.storage import BlobRepository, strip_query
from services.event_parser import parse_event

logger = logging.getLogger(__name__)

RepositoryFactory = Callable[[str, str], BlobRepository]
SleepFunc = Callable[[float], Awaitable[None]]


class ReplicationService:
    """
    Replicates blob creations and deletions from a source account to a
    destination account.

    Repositories are opened per invocation through `repository_factory`
    (connection string, label) and closed before handle() returns.
    """

    def __init__(
        self,
        config: ReplicationConfig,
        repository_factory: Optional[RepositoryFactory] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        self.config = config
        self._repository_factory = repository_factory or BlobRepository.from_connection_string
        self._sleep = sleep or asyncio.sleep

    async def handle(self, event: EventMetadata) -> ReplicationResult:
        """
        Handle one storage event.

        Raises:
            MalformedSubjectError: subject does not name a container and blob
            ConfigurationError: a connection string is missing
            ValueError: a connection string cannot be parsed
            CopyPollTimeoutError: copy still pending after max_poll_attempts
            azure.core.exceptions.AzureError: storage call failed
        """
        logger.info(f"Queue trigger function processed: {event.id}")

        identity, kind = parse_event(event)

        with log_context(
            event_id=event.id,
            event_type=event.event_type,
            container=identity.container,
            blob_name=identity.blob_name,
        ):
            logger.info(f"Container is: {identity.container}")
            logger.info(f"Blob name is: {identity.blob_name}")
            log_checkpoint("replication_started", {"event_kind": kind.value}, logger=logger)

            self.config.require_connections()

            async with AsyncExitStack() as stack:
                source = await stack.enter_async_context(
                    self._repository_factory(self.config.source_connection_string, "source")
                )
                destination = await stack.enter_async_context(
                    self._repository_factory(self.config.destination_connection_string, "destination")
                )

                await destination.ensure_container(identity.container)

                if kind == BlobEventKind.BLOB_CREATED:
                    result = await self._replicate(event, identity, source, destination)
                elif kind == BlobEventKind.BLOB_DELETED:
                    result = await self._delete_replica(event, identity, destination)
                else:
                    logger.info(f"EventType not replicated, no action taken: {event.event_type}")
                    result = ReplicationResult.skipped(
                        event.id, kind, identity, reason=f"unhandled event type {event.event_type}"
                    )
                    log_checkpoint("event_skipped", result.to_log_dict(), logger=logger)

            return result

    # ========================================================================
    # CREATION: COPY AND POLL
    # ========================================================================

    async def _replicate(
        self,
        event: EventMetadata,
        identity: BlobIdentity,
        source: BlobRepository,
        destination: BlobRepository,
    ) -> ReplicationResult:
        """A new blob was created, replicate it to the destination account."""
        logger.info(f"EventType: {event.event_type}")

        if self.config.verify_source_exists and not await source.blob_exists(
            identity.container, identity.blob_name
        ):
            logger.info("Source blob does not exist, no copy made")
            result = ReplicationResult.skipped(
                event.id, BlobEventKind.BLOB_CREATED, identity, reason="source blob not found"
            )
            log_checkpoint("event_skipped", result.to_log_dict(), logger=logger)
            return result

        source_url = source.get_blob_sas_url(
            identity.container,
            identity.blob_name,
            hours=self.config.sas_expiry_hours,
        )
        source_display = strip_query(source_url)
        destination_display = destination.blob_url(identity.container, identity.blob_name)

        with log_context(operation="copy"):
            logger.info(f"Copying {source_display} to {destination_display}")
            await destination.start_copy(identity.container, identity.blob_name, source_url)
            log_checkpoint("copy_started", {"source": source_display}, logger=logger)

            copy_state, poll_count = await self.wait_for_copy(destination, identity)

            if copy_state.status.is_successful():
                logger.info(f"Blob: {identity.blob_name} Complete")
                logger.info(f"Copied blob {source_display} to {destination_display}")
            else:
                logger.warning(
                    f"Blob: {identity.blob_name} copy ended with status "
                    f"{copy_state.status.value}: {copy_state.status_description or 'no description'}"
                )

            result = ReplicationResult.copied(
                event.id, identity, copy_state, poll_count, source_url=source_display
            )
            log_checkpoint("copy_completed", result.to_log_dict(), logger=logger)
            return result

    async def wait_for_copy(
        self,
        destination: BlobRepository,
        identity: BlobIdentity,
    ) -> Tuple[CopyState, int]:
        """
        Poll the destination blob until its copy is no longer pending.

        Fetches once immediately, then sleeps poll_interval_seconds between
        fetches. Unbounded unless max_poll_attempts is set.

        Returns:
            (final copy state, number of re-fetches after the first)

        Raises:
            CopyPollTimeoutError: still pending after max_poll_attempts re-fetches
        """
        max_attempts = self.config.max_poll_attempts
        copy_state = await destination.get_copy_state(identity.container, identity.blob_name)
        poll_count = 0

        while copy_state.is_pending:
            if max_attempts is not None and poll_count >= max_attempts:
                logger.error(
                    f"Blob: {identity.blob_name} still pending after {poll_count} polls, giving up"
                )
                raise CopyPollTimeoutError(identity.container, identity.blob_name, poll_count)

            logger.info(f"Blob: {identity.blob_name}, Copied: {copy_state.progress_text()}")
            await self._sleep(self.config.poll_interval_seconds)
            copy_state = await destination.get_copy_state(identity.container, identity.blob_name)
            poll_count += 1

        return copy_state, poll_count

    # ========================================================================
    # DELETION
    # ========================================================================

    async def _delete_replica(
        self,
        event: EventMetadata,
        identity: BlobIdentity,
        destination: BlobRepository,
    ) -> ReplicationResult:
        """Blob was deleted, delete the replica if it exists."""
        logger.info(f"EventType: {event.event_type}")

        deleted = await destination.delete_blob_if_exists(identity.container, identity.blob_name)
        logger.info(
            f"Deleted blob {destination.blob_url(identity.container, identity.blob_name)}"
            if deleted
            else f"Replica {identity.path} did not exist, nothing deleted"
        )

        result = ReplicationResult.deleted_result(event.id, identity, deleted)
        log_checkpoint("replica_deleted", result.to_log_dict(), logger=logger)
        return result


async def replicate_event(
    event: EventMetadata,
    config: Optional[ReplicationConfig] = None,
) -> ReplicationResult:
    """Handle one event with the process-wide configuration."""
    if config is None:
        from function.config import get_config
        config = get_config()
    return await ReplicationService(config).handle(event)


__all__ = ["ReplicationService", "replicate_event"]
