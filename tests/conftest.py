from collections.abc import Generator
from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient

from portfolio.settings import ManifestSettings, SiteSettings, StorageSettings
from tests.helpers import SAMPLE_KEYS, FakeS3Client


@pytest.fixture
def storage_settings() -> StorageSettings:
    return StorageSettings(
        account_id="test-account",
        access_key_id="test-access-key",
        secret_access_key="test-secret-key",
        bucket_name="test-bucket",
        public_url="https://photos.example.com",
    )


@pytest.fixture
def fake_s3(storage_settings: StorageSettings) -> FakeS3Client:
    return FakeS3Client(storage_settings)


@pytest.fixture
def stocked_s3(fake_s3: FakeS3Client) -> FakeS3Client:
    """Fake store holding the sample keys, one of them a hero banner."""
    modified = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    for key in SAMPLE_KEYS:
        fake_s3.add(key, data=f"bytes of {key}".encode(), last_modified=modified)
    return fake_s3


@pytest.fixture
def site_settings() -> SiteSettings:
    return SiteSettings(name="Test Portfolio", social_handle="tester")


@pytest.fixture
def client(fake_s3: FakeS3Client, site_settings: SiteSettings) -> Generator[TestClient]:
    """Test client for an app wired to the in-memory store."""
    from portfolio.main import create_app

    app = create_app(s3_client=fake_s3, manifest_settings=ManifestSettings(), site_settings=site_settings)
    with TestClient(app) as test_client:
        yield test_client
