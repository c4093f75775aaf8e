import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from uploader.core.config import StorageConfig, get_settings
from uploader.core.errors import StorageError
from uploader.schemas import DiagnosticsReport, DiagnosticStep, FileListingEntry, UploadResult
from uploader.services.storage import StorageGateway


class DummyGateway(StorageGateway):
    """Records calls and answers from canned data instead of S3."""

    def __init__(self) -> None:  # type: ignore[super-init-not-called]
        self.config = StorageConfig(region="eu-central-1", bucket="test-bucket")
        self.upload_calls: list[tuple[bytes, str, str | None, int]] = []
        self.list_calls: list[int] = []
        self.files: list[FileListingEntry] = []
        self.error: StorageError | None = None

    async def upload_object(self, data, content_type, filename, size):  # type: ignore[override]
        self.upload_calls.append((data, content_type, filename, size))
        if self.error:
            raise self.error
        key = f"uploads/1700000000000-{filename}"
        return UploadResult(
            key=key,
            url=f"https://example.com/{key}",
            content_type=content_type,
            size=size,
        )

    async def list_recent_objects(self, limit=5):  # type: ignore[override]
        self.list_calls.append(limit)
        if self.error:
            raise self.error
        return self.files[:limit]

    async def probe_connectivity(self):  # type: ignore[override]
        return DiagnosticsReport(
            region=self.config.region,
            bucket=self.bucket,
            steps=[
                DiagnosticStep(step="HeadBucket", ok=False, code="403", message="Forbidden", http_status=403),
                DiagnosticStep(step="ListObjectsV2", ok=True, count=1, keys=["uploads/a.mp4"]),
            ],
        )


@pytest.fixture(scope="session", autouse=True)
def configure_environment():
    os.environ["ENV"] = "test"
    os.environ["AWS_REGION"] = "eu-central-1"
    os.environ["S3_BUCKET"] = "test-bucket"
    os.environ["AWS_ACCESS_KEY_ID"] = "test"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "test"
    os.environ["LOG_LEVEL"] = "WARNING"
    get_settings.cache_clear()


@pytest.fixture
def gateway() -> DummyGateway:
    return DummyGateway()


@pytest.fixture
def settings(configure_environment):
    return get_settings()


@pytest.fixture
def app_instance(settings, gateway):
    from uploader.main import create_app

    return create_app(settings=settings, gateway=gateway)


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture
def listing_entry():
    def _make(key: str, size: int = 10, minute: int = 0) -> FileListingEntry:
        return FileListingEntry(
            key=key,
            size=size,
            last_modified=datetime(2024, 5, 1, 12, minute, tzinfo=timezone.utc),
            url=f"https://signed.example.com/{key}",
        )

    return _make
