"""Web test fixtures: TestClient bound to a temporary uploads folder."""

from __future__ import annotations

import pytest

from mediastore.settings import Settings


@pytest.fixture()
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture()
def web_settings(upload_dir):
    return Settings(_env_file=None, upload_dir=str(upload_dir))


@pytest.fixture()
def client(monkeypatch, web_settings):
    from starlette.testclient import TestClient

    import web.app as app_module

    monkeypatch.setattr(app_module, "settings", web_settings)

    with TestClient(app_module.app) as test_client:
        yield test_client


@pytest.fixture()
def cloud_client(monkeypatch, upload_dir):
    """Client running in cloud mode against a mocked Cloudinary SDK."""
    from unittest.mock import patch

    from starlette.testclient import TestClient

    import web.app as app_module

    settings = Settings(
        _env_file=None,
        storage_mode="cloud",
        upload_dir=str(upload_dir),
        cloudinary_cloud_name="shop",
        cloudinary_api_key="key",
        cloudinary_api_secret="secret",
    )
    monkeypatch.setattr(app_module, "settings", settings)

    with patch("mediastore.storage.cloud.cloudinary") as mock_cloudinary:
        with TestClient(app_module.app) as test_client:
            test_client.cloudinary = mock_cloudinary
            yield test_client
