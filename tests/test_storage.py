# ============================================================================
# BLOB STORAGE TESTS
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Tests - Blob repository and SAS construction
# PURPOSE: Verify SAS grants and idempotent storage operations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Blob Storage Tests

Covers:
1. Ad-hoc SAS: expiry after issue time, read+write+create permissions
2. Stored-policy SAS: token references the policy, no ad-hoc constraints
3. BlobRepository idempotence (container create, blob delete)
4. Copy-state fetch and copy start against a mocked SDK client

Run with:
    pytest tests/test_storage.py -v
"""

import asyncio
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from azure.core.exceptions import HttpResponseError, ResourceExistsError, ResourceNotFoundError

from core.contracts import CopyStatus
from infrastructure.storage import BlobRepository, build_blob_sas_url, strip_query

ACCOUNT_NAME = "replsource"
ACCOUNT_KEY = "dGVzdGtleXRlc3RrZXl0ZXN0a2V5dGVzdGtleXRlc3RrZXk="
BLOB_URL = f"https://{ACCOUNT_NAME}.blob.core.windows.net/demo/a.txt"
CONNECTION_STRING = (
    "DefaultEndpointsProtocol=https;"
    f"AccountName={ACCOUNT_NAME};AccountKey={ACCOUNT_KEY};"
    "EndpointSuffix=core.windows.net"
)


def _query(url: str) -> dict:
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


def _parse_sas_time(value: str) -> datetime:
    return datetime.strptime(value, "%Y-%m-%dT%H:%M:%SZ").replace(tzinfo=timezone.utc)


@pytest.fixture
def mock_service():
    """Mocked aio BlobServiceClient with one container and one blob client."""
    blob_client = MagicMock()
    blob_client.url = BLOB_URL
    container_client = MagicMock()
    container_client.get_blob_client.return_value = blob_client

    service = MagicMock()
    service.account_name = ACCOUNT_NAME
    service.credential = SimpleNamespace(account_name=ACCOUNT_NAME, account_key=ACCOUNT_KEY)
    service.get_container_client.return_value = container_client
    service.close = AsyncMock()
    return SimpleNamespace(service=service, container=container_client, blob=blob_client)


# ============================================================================
# SAS URL CONSTRUCTION
# ============================================================================

class TestBuildBlobSasUrl:

    def test_expiry_after_issue_time(self):
        issued = datetime.now(timezone.utc).replace(microsecond=0)
        url = build_blob_sas_url(BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt", now=issued)

        expiry = _parse_sas_time(_query(url)["se"])
        assert expiry > issued
        assert expiry == issued + timedelta(hours=1)

    def test_default_permissions(self):
        url = build_blob_sas_url(BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt")

        permissions = set(_query(url)["sp"])
        assert {"r", "w", "c"} <= permissions

    def test_blob_scoped_with_signature(self):
        url = build_blob_sas_url(BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt")
        query = _query(url)

        assert url.startswith(BLOB_URL + "?")
        assert query["sr"] == "b"
        assert query["sig"]
        assert "st" not in query

    def test_custom_expiry_hours(self):
        issued = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
        url = build_blob_sas_url(
            BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt", hours=6, now=issued
        )
        assert _query(url)["se"] == "2026-10-19T18:00:00Z"

    @pytest.mark.parametrize("hours", [0, -1])
    def test_non_positive_expiry_rejected(self, hours):
        with pytest.raises(ValueError, match="at least 1 hour"):
            build_blob_sas_url(BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt", hours=hours)

    def test_stored_policy(self):
        url = build_blob_sas_url(
            BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt", policy_id="replication-read"
        )
        query = _query(url)

        assert query["si"] == "replication-read"
        assert "sp" not in query
        assert "se" not in query

    def test_strip_query(self):
        url = build_blob_sas_url(BLOB_URL, ACCOUNT_NAME, ACCOUNT_KEY, "demo", "a.txt")
        assert strip_query(url) == BLOB_URL
        assert strip_query(BLOB_URL) == BLOB_URL


# ============================================================================
# REPOSITORY
# ============================================================================

class TestBlobRepositorySas:

    def test_get_blob_sas_url(self, mock_service):
        repo = BlobRepository(mock_service.service, label="source")

        url = repo.get_blob_sas_url("demo", "a.txt")

        assert url.startswith(BLOB_URL + "?")
        assert {"r", "w", "c"} <= set(_query(url)["sp"])
        mock_service.service.get_container_client.assert_called_with("demo")
        mock_service.container.get_blob_client.assert_called_with("a.txt")

    def test_requires_account_key(self, mock_service):
        mock_service.service.credential = None
        repo = BlobRepository(mock_service.service, label="source")

        with pytest.raises(ValueError, match="AccountKey"):
            repo.get_blob_sas_url("demo", "a.txt")


class TestBlobRepositoryContainer:

    def test_creates_missing_container(self, mock_service):
        mock_service.container.create_container = AsyncMock()
        repo = BlobRepository(mock_service.service, label="destination")

        assert asyncio.run(repo.ensure_container("demo")) is True
        mock_service.container.create_container.assert_awaited_once()

    def test_existing_container_is_success(self, mock_service):
        mock_service.container.create_container = AsyncMock(
            side_effect=ResourceExistsError("ContainerAlreadyExists")
        )
        repo = BlobRepository(mock_service.service, label="destination")

        assert asyncio.run(repo.ensure_container("demo")) is False

    def test_other_errors_propagate(self, mock_service):
        mock_service.container.create_container = AsyncMock(
            side_effect=HttpResponseError("AuthorizationPermissionMismatch")
        )
        repo = BlobRepository(mock_service.service, label="destination")

        with pytest.raises(HttpResponseError):
            asyncio.run(repo.ensure_container("demo"))


class TestBlobRepositoryBlobs:

    def test_delete_existing(self, mock_service):
        mock_service.blob.delete_blob = AsyncMock()
        repo = BlobRepository(mock_service.service, label="destination")

        assert asyncio.run(repo.delete_blob_if_exists("demo", "a.txt")) is True

    def test_delete_missing_is_noop(self, mock_service):
        mock_service.blob.delete_blob = AsyncMock(side_effect=ResourceNotFoundError("BlobNotFound"))
        repo = BlobRepository(mock_service.service, label="destination")

        assert asyncio.run(repo.delete_blob_if_exists("demo", "a.txt")) is False

    def test_delete_failure_propagates(self, mock_service):
        mock_service.blob.delete_blob = AsyncMock(side_effect=HttpResponseError("LeaseIdMissing"))
        repo = BlobRepository(mock_service.service, label="destination")

        with pytest.raises(HttpResponseError):
            asyncio.run(repo.delete_blob_if_exists("demo", "a.txt"))

    def test_start_copy(self, mock_service):
        mock_service.blob.start_copy_from_url = AsyncMock(
            return_value={"copy_id": "cid", "copy_status": "pending"}
        )
        repo = BlobRepository(mock_service.service, label="destination")

        result = asyncio.run(repo.start_copy("demo", "a.txt", BLOB_URL + "?sig=x"))

        assert result["copy_id"] == "cid"
        mock_service.blob.start_copy_from_url.assert_awaited_once_with(BLOB_URL + "?sig=x")

    def test_get_copy_state(self, mock_service):
        mock_service.blob.get_blob_properties = AsyncMock(return_value=SimpleNamespace(
            copy=SimpleNamespace(status="pending", progress="10/40", id="cid", status_description=None)
        ))
        repo = BlobRepository(mock_service.service, label="destination")

        state = asyncio.run(repo.get_copy_state("demo", "a.txt"))

        assert state.status == CopyStatus.PENDING
        assert (state.bytes_copied, state.total_bytes) == (10, 40)

    def test_blob_exists(self, mock_service):
        mock_service.blob.exists = AsyncMock(return_value=True)
        repo = BlobRepository(mock_service.service, label="source")

        assert asyncio.run(repo.blob_exists("demo", "a.txt")) is True

    def test_async_context_closes_client(self, mock_service):
        async def run():
            async with BlobRepository(mock_service.service) as repo:
                return repo

        asyncio.run(run())
        mock_service.service.close.assert_awaited_once()


class TestFromConnectionString:

    def test_parses_account(self):
        async def run():
            async with BlobRepository.from_connection_string(CONNECTION_STRING, label="source") as repo:
                return repo.account_name, repo.blob_url("demo", "a.txt")

        account_name, url = asyncio.run(run())
        assert account_name == ACCOUNT_NAME
        assert url == BLOB_URL

    def test_malformed_raises_value_error(self):
        with pytest.raises(ValueError):
            BlobRepository.from_connection_string("not-a-connection-string")
