# ============================================================================
# TEST FIXTURES
# ============================================================================
# EPOCH: 1 - BLOB REPLICATION
# STATUS: Tests - Shared fixtures
# PURPOSE: In-memory storage accounts and configuration for replication tests
# CREATED: 19 OCT 2026
# ============================================================================
"""
Shared fixtures.

FakeStorage holds named in-memory accounts. Its repository_factory has the
same (connection_string, label) signature as
BlobRepository.from_connection_string, so ReplicationService runs unchanged
against it.
"""

from typing import Dict, List, Optional
from urllib.parse import urlparse

import pytest
from azure.core.exceptions import ResourceNotFoundError

from core.contracts import CopyStatus
from core.models import CopyState, EventMetadata
from function.config import ReplicationConfig

SOURCE_CONN = "source-conn"
DESTINATION_CONN = "destination-conn"


class FakeAccount:
    """One storage account: container -> blob name -> content."""

    def __init__(self, name: str):
        self.name = name
        self.containers: Dict[str, Dict[str, bytes]] = {}
        self.create_container_calls = 0

    def put(self, container: str, blob_name: str, data: bytes) -> None:
        self.containers.setdefault(container, {})[blob_name] = data

    def get(self, container: str, blob_name: str) -> Optional[bytes]:
        return self.containers.get(container, {}).get(blob_name)

    def snapshot(self) -> Dict[str, Dict[str, bytes]]:
        return {c: dict(blobs) for c, blobs in self.containers.items()}


class FakeBlobRepository:
    """Mirror of infrastructure.storage.BlobRepository over a FakeAccount."""

    def __init__(self, storage: "FakeStorage", account: FakeAccount, label: str):
        self.storage = storage
        self.account = account
        self.label = label
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    def blob_url(self, container: str, blob_name: str) -> str:
        return f"https://{self.account.name}.blob.core.windows.net/{container}/{blob_name}"

    async def ensure_container(self, container: str) -> bool:
        self.account.create_container_calls += 1
        if container in self.account.containers:
            return False
        self.account.containers[container] = {}
        return True

    async def blob_exists(self, container: str, blob_name: str) -> bool:
        return self.account.get(container, blob_name) is not None

    def get_blob_sas_url(self, container, blob_name, hours=1, policy_id=None) -> str:
        self.storage.sas_requests.append((container, blob_name, hours, policy_id))
        return f"{self.blob_url(container, blob_name)}?sv=2024-01-01&sp=rcw&sig=fake"

    async def start_copy(self, container: str, blob_name: str, source_url: str) -> dict:
        parsed = urlparse(source_url)
        source_account = self.storage.accounts[parsed.hostname.split(".")[0]]
        source_container, source_blob = parsed.path.lstrip("/").split("/", 1)
        data = source_account.get(source_container, source_blob)
        if data is None:
            raise ResourceNotFoundError("The specified blob does not exist.")
        if container not in self.account.containers:
            raise ResourceNotFoundError("The specified container does not exist.")

        self.storage.copies.append((source_url, container, blob_name))
        self.storage.pending[(container, blob_name)] = (data, list(self.storage.copy_script))
        return {"copy_id": "copy-1", "copy_status": "pending"}

    async def get_copy_state(self, container: str, blob_name: str) -> CopyState:
        self.storage.copy_state_fetches += 1
        data, script = self.storage.pending[(container, blob_name)]
        status = script.pop(0) if len(script) > 1 else script[0]
        if status == CopyStatus.SUCCESS:
            self.account.put(container, blob_name, data)
        total = len(data)
        copied = total if status == CopyStatus.SUCCESS else total // 2
        return CopyState(status=status, bytes_copied=copied, total_bytes=total, copy_id="copy-1")

    async def delete_blob_if_exists(self, container: str, blob_name: str) -> bool:
        blobs = self.account.containers.get(container, {})
        if blob_name not in blobs:
            return False
        del blobs[blob_name]
        return True


class FakeStorage:
    """Source and destination accounts plus call recording."""

    def __init__(self):
        self.accounts: Dict[str, FakeAccount] = {
            "source": FakeAccount("source"),
            "destination": FakeAccount("destination"),
        }
        # Copy status sequence reported by get_copy_state; the last one repeats
        self.copy_script: List[CopyStatus] = [CopyStatus.SUCCESS]
        self.pending: Dict[tuple, tuple] = {}
        self.copies: List[tuple] = []
        self.sas_requests: List[tuple] = []
        self.copy_state_fetches = 0
        self.repositories: List[FakeBlobRepository] = []

    @property
    def source(self) -> FakeAccount:
        return self.accounts["source"]

    @property
    def destination(self) -> FakeAccount:
        return self.accounts["destination"]

    def repository_factory(self, connection_string: str, label: str) -> FakeBlobRepository:
        account_by_conn = {SOURCE_CONN: self.source, DESTINATION_CONN: self.destination}
        if connection_string not in account_by_conn:
            raise ValueError("Connection string is either blank or malformed.")
        repo = FakeBlobRepository(self, account_by_conn[connection_string], label)
        self.repositories.append(repo)
        return repo


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def replication_config():
    return ReplicationConfig(
        source_connection_string=SOURCE_CONN,
        destination_connection_string=DESTINATION_CONN,
    )


@pytest.fixture
def make_event():
    """Factory for EventMetadata instances."""
    def _make(
        event_type: str = "Microsoft.Storage.BlobCreated",
        container: str = "demo",
        blob_name: str = "a.txt",
        event_id: str = "evt-001",
        subject: Optional[str] = None,
    ) -> EventMetadata:
        if subject is None:
            subject = f"/blobServices/default/containers/{container}/blobs/{blob_name}"
        return EventMetadata(id=event_id, subject=subject, eventType=event_type)
    return _make


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every app setting the replicator reads."""
    for name in (
        "SourceStorageAccountConnection",
        "DestinationStorageAccountConnection",
        "REPLICATION_QUEUE_NAME",
        "REPLICATION_POLL_INTERVAL_SECONDS",
        "REPLICATION_MAX_POLL_ATTEMPTS",
        "REPLICATION_SAS_EXPIRY_HOURS",
        "REPLICATION_VERIFY_SOURCE_EXISTS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    from function.config import reset_config
    reset_config()
    yield monkeypatch
    reset_config()

