# ============================================================================
# INFRASTRUCTURE MODULE
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Infrastructure - Storage operations
# PURPOSE: Azure Blob Storage access for source and destination accounts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Infrastructure module for the blob replicator.

Provides:
- BlobRepository: async Azure Blob Storage operations for one account
- build_blob_sas_url: blob URL with an ad-hoc or stored-policy SAS token

Usage:
    from infrastructure import BlobRepository

    async with BlobRepository.from_connection_string(conn, label="destination") as repo:
        await repo.ensure_container("demo")
"""

from infrastructure.storage import (
    BlobRepository,
    build_blob_sas_url,
    strip_query,
)

__all__ = [
    "BlobRepository",
    "build_blob_sas_url",
    "strip_query",
]
