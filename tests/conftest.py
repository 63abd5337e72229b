from unittest.mock import AsyncMock, MagicMock, patch

import cloudinary
import pytest
from fastapi.testclient import TestClient

from media_gateway.config import CloudinaryConfig
from media_gateway.main import app
from media_gateway.services.media import MediaService, get_media_service


@pytest.fixture
def config():
    return CloudinaryConfig(cloud_name="demo", api_key="key", api_secret="secret")


@pytest.fixture
def service(config):
    """Service wired to fake credentials; provider calls must be patched."""
    return MediaService(config, upload_folder="test")


@pytest.fixture
def mock_search():
    """Patch the Cloudinary Search builder used by the service."""
    with patch("media_gateway.services.media.Search") as search_cls:
        yield search_cls.return_value


@pytest.fixture
def mock_upload():
    with patch("cloudinary.uploader.upload") as upload:
        yield upload


@pytest.fixture
def mock_destroy():
    with patch("cloudinary.uploader.destroy") as destroy:
        destroy.return_value = {"result": "ok"}
        yield destroy


@pytest.fixture
def fake_service():
    """Stand-in service whose coroutine methods are AsyncMocks."""
    fake = MagicMock(spec=MediaService)
    for name in (
        "get_all_images",
        "get_all_folders",
        "upload_image",
        "upload_video",
        "delete_image",
        "delete_video",
    ):
        setattr(fake, name, AsyncMock())
    return fake


@pytest.fixture
def client():
    """TestClient using whatever service the test installs as override."""
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def use_service():
    def _install(svc):
        app.dependency_overrides[get_media_service] = lambda: svc
        return svc

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def blank_sdk_config(monkeypatch):
    """Clear any credentials the SDK picked up from CLOUDINARY_URL."""
    sdk_config = cloudinary.config()
    for name in ("cloud_name", "api_key", "api_secret"):
        monkeypatch.setattr(sdk_config, name, None, raising=False)
    return sdk_config


@pytest.fixture
def unconfigured_service(blank_sdk_config):
    """Service with no credentials at all, talking to the real SDK."""
    return MediaService(CloudinaryConfig())
