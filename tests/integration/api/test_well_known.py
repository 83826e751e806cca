"""Tests for the deep link assets served under /.well-known."""

import json

import pytest
from fastapi.testclient import TestClient

from push_relay.config.relay import RelaySettings
from push_relay.main import create_app

ASSET_LINKS = [
    {
        "relation": ["delegate_permission/common.handle_all_urls"],
        "target": {"namespace": "android_app", "package_name": "com.example.shop"},
    }
]


@pytest.mark.integration
def test_serves_asset_links(tmp_path):
    (tmp_path / "assetlinks.json").write_text(json.dumps(ASSET_LINKS))
    app = create_app(RelaySettings(_env_file=None, WELL_KNOWN_DIR=str(tmp_path)))

    response = TestClient(app).get("/.well-known/assetlinks.json")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == ASSET_LINKS


@pytest.mark.integration
def test_unknown_asset_is_not_found(tmp_path):
    app = create_app(RelaySettings(_env_file=None, WELL_KNOWN_DIR=str(tmp_path)))

    response = TestClient(app).get("/.well-known/apple-app-site-association")

    assert response.status_code == 404


@pytest.mark.integration
def test_missing_directory_is_not_mounted(tmp_path):
    app = create_app(RelaySettings(_env_file=None, WELL_KNOWN_DIR=str(tmp_path / "absent")))

    response = TestClient(app).get("/.well-known/assetlinks.json")

    assert response.status_code == 404
    assert TestClient(app).get("/health").status_code == 200
