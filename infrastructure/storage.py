# ============================================================================
# BLOB STORAGE INFRASTRUCTURE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Infrastructure - Azure Blob Storage operations
# PURPOSE: Async blob operations for the replication handler
# CREATED: 19 OCT 2026
# ============================================================================
"""
Blob Storage Infrastructure

Provides BlobRepository for one Azure Blob Storage account:
- ensure_container: Create a container if it does not exist
- get_blob_sas_url: Blob URL with an ad-hoc or stored-policy SAS token
- start_copy: Start a server-side copy into a blob
- get_copy_state: Fetch a blob's copy status and progress
- delete_blob_if_exists: Idempotent delete
- blob_exists: Check if a blob exists

Accounts are addressed by connection string. Clients are async
(azure.storage.blob.aio) so every network call yields to the host's
event loop. One repository per account per invocation; close it (or use
it as an async context manager) when the invocation ends.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from azure.core.exceptions import ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobSasPermissions, generate_blob_sas
from azure.storage.blob.aio import BlobServiceClient

from core.config import SAS_DEFAULTS
from core.models import CopyState

logger = logging.getLogger(__name__)


# ============================================================================
# SAS URL CONSTRUCTION
# ============================================================================

def build_blob_sas_url(
    blob_url: str,
    account_name: str,
    account_key: str,
    container: str,
    blob_name: str,
    hours: int = SAS_DEFAULTS.expiry_hours,
    policy_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Append a blob-scoped SAS token to a blob URL.

    Without policy_id the grant is ad hoc: read+write+create, expiring
    `hours` from now, no start time (effective as soon as the service
    receives the request, avoiding clock skew). With policy_id every
    constraint comes from the container's stored access policy.

    Args:
        blob_url: Base URL of the blob
        account_name: Storage account name
        account_key: Storage account key used to sign
        container: Container name
        blob_name: Blob name (the blob need not exist yet)
        hours: Ad-hoc token validity in hours
        policy_id: Optional stored access policy identifier
        now: Override for the current time

    Returns:
        Full blob URL with SAS token

    Raises:
        ValueError: if an ad-hoc grant is requested with hours < 1
    """
    if policy_id is None:
        if hours < 1:
            raise ValueError(f"SAS expiry must be at least 1 hour, got {hours}")
        issued_at = now or datetime.now(timezone.utc)
        sas_token = generate_blob_sas(
            account_name=account_name,
            container_name=container,
            blob_name=blob_name,
            account_key=account_key,
            permission=BlobSasPermissions(
                read=SAS_DEFAULTS.read,
                write=SAS_DEFAULTS.write,
                create=SAS_DEFAULTS.create,
            ),
            expiry=issued_at + timedelta(hours=hours),
        )
    else:
        sas_token = generate_blob_sas(
            account_name=account_name,
            container_name=container,
            blob_name=blob_name,
            account_key=account_key,
            policy_id=policy_id,
        )

    return f"{blob_url}?{sas_token}"


def strip_query(url: str) -> str:
    """Drop the query string (SAS token) from a URL for logging."""
    return url.split("?", 1)[0]


# ============================================================================
# BLOB REPOSITORY
# ============================================================================

class BlobRepository:
    """
    Async Azure Blob Storage repository for a single account.

    Usage:
        async with BlobRepository.from_connection_string(conn, label="source") as repo:
            await repo.ensure_container("demo")
            url = repo.get_blob_sas_url("demo", "a.txt")
    """

    def __init__(self, blob_service: BlobServiceClient, label: str = "storage"):
        self.label = label
        self._blob_service = blob_service

    @classmethod
    def from_connection_string(cls, connection_string: str, label: str = "storage") -> "BlobRepository":
        """
        Create a repository from a storage connection string.

        Raises:
            ValueError: if the connection string is blank or malformed
        """
        blob_service = BlobServiceClient.from_connection_string(connection_string)
        logger.debug(f"BlobServiceClient initialized for {label}: {blob_service.account_name}")
        return cls(blob_service, label=label)

    @property
    def account_name(self) -> Optional[str]:
        return self._blob_service.account_name

    async def close(self) -> None:
        await self._blob_service.close()

    async def __aenter__(self) -> "BlobRepository":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _get_blob_client(self, container: str, blob_name: str):
        # Reference construction is local; no network call
        return self._blob_service.get_container_client(container).get_blob_client(blob_name)

    def blob_url(self, container: str, blob_name: str) -> str:
        return self._get_blob_client(container, blob_name).url

    # ========================================================================
    # CONTAINER OPERATIONS
    # ========================================================================

    async def ensure_container(self, container: str) -> bool:
        """
        Create the container if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        container_client = self._blob_service.get_container_client(container)
        try:
            await container_client.create_container()
        except ResourceExistsError:
            logger.debug(f"Container already exists on {self.label}: {container}")
            return False

        logger.info(f"Created container on {self.label}: {container}")
        return True

    # ========================================================================
    # SAS URL GENERATION
    # ========================================================================

    def get_blob_sas_url(
        self,
        container: str,
        blob_name: str,
        hours: int = SAS_DEFAULTS.expiry_hours,
        policy_id: Optional[str] = None,
    ) -> str:
        """
        Generate the blob URL with a SAS token signed by the account key.

        Raises:
            ValueError: if the connection string carried no account key
        """
        credential = self._blob_service.credential
        account_key = getattr(credential, "account_key", None)
        if not account_key:
            raise ValueError(
                f"Cannot sign a SAS for {self.label} account '{self.account_name}': "
                "connection string has no AccountKey"
            )

        return build_blob_sas_url(
            blob_url=self.blob_url(container, blob_name),
            account_name=self.account_name,
            account_key=account_key,
            container=container,
            blob_name=blob_name,
            hours=hours,
            policy_id=policy_id,
        )

    # ========================================================================
    # BLOB OPERATIONS
    # ========================================================================

    async def blob_exists(self, container: str, blob_name: str) -> bool:
        """Check if a blob exists."""
        return await self._get_blob_client(container, blob_name).exists()

    async def start_copy(self, container: str, blob_name: str, source_url: str) -> Dict[str, Any]:
        """
        Start a server-side copy from source_url into container/blob_name.

        Returns:
            Copy response (copy_id, copy_status, etag, ...)
        """
        blob_client = self._get_blob_client(container, blob_name)
        result = await blob_client.start_copy_from_url(source_url)
        logger.debug(
            f"Copy started on {self.label}: {container}/{blob_name} "
            f"(copy_id={result.get('copy_id')}, status={result.get('copy_status')})"
        )
        return result

    async def get_copy_state(self, container: str, blob_name: str) -> CopyState:
        """Fetch the blob's properties from the service and return its copy state."""
        props = await self._get_blob_client(container, blob_name).get_blob_properties()
        return CopyState.from_properties(props.copy)

    async def delete_blob_if_exists(self, container: str, blob_name: str) -> bool:
        """
        Delete a blob.

        Returns:
            True if deleted, False if it did not exist
        """
        try:
            await self._get_blob_client(container, blob_name).delete_blob()
        except ResourceNotFoundError:
            logger.debug(f"Blob not found on {self.label}, nothing to delete: {container}/{blob_name}")
            return False

        logger.info(f"Deleted blob on {self.label}: {container}/{blob_name}")
        return True


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "BlobRepository",
    "build_blob_sas_url",
    "strip_query",
]
