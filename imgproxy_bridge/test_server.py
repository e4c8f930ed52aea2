import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def test_client():
    from imgproxy_bridge.server import app

    with TestClient(app) as client:
        yield client


def test_metrics_exposed(test_client):
    response = test_client.get("/metrics")
    assert response.status_code == 200
    assert "fastapi_app_info" in response.text


def test_missing_source_is_rejected(test_client):
    response = test_client.get("/_next/imgproxy")
    assert response.status_code == 400


def test_options_loaded_at_startup(test_client):
    state = test_client.app.state
    assert state.imgproxy_base_url.host == "imgproxy.test"
    assert state.handler_options.credential is None
