"""HTTP tests for the device endpoints."""

import os
import sys
import uuid
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))

from device_manager import create_app
from device_manager.db.session import build_engine
from device_manager.settings import AppSettings


@pytest.fixture()
def settings():
    return AppSettings(DB_URL="sqlite://", METRICS_ENABLED=False)


@pytest.fixture()
def client(settings):
    engine = build_engine("sqlite://")
    app = create_app(settings, engine=engine)
    with TestClient(app) as test_client:
        test_client.headers.update({"api-version": "1.0"})
        yield test_client
    engine.dispose()


def _payload(**overrides):
    data = {
        "serialNumber": str(uuid.uuid4()),
        "modelId": "MODEL123",
        "modelName": "Test Model",
        "manufacturer": "Test Manufacturer",
        "primaryUser": "user@example.com",
        "operatingSystem": "Windows 11",
        "deviceType": "Laptop",
        "deviceStatus": "Active",
    }
    data.update(overrides)
    return data


def test_insert_valid_device_returns_created(client):
    payload = _payload()

    response = client.post("/api/v1.0/device", json=payload)

    assert response.status_code == 201
    assert response.json() == payload
    assert response.headers["api-supported-versions"] == "1.0"
    assert response.headers["X-Request-ID"]


def test_insert_accepts_major_only_version_and_controller_casing(client):
    response = client.post("/api/v1/Device", json=_payload())
    assert response.status_code == 201


def test_insert_null_body_returns_bad_request(client):
    response = client.post(
        "/api/v1/device",
        content="null",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert "error" in response.json()


def test_insert_missing_field_returns_bad_request(client):
    payload = _payload()
    del payload["manufacturer"]

    response = client.post("/api/v1/device", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Request validation failed"
    assert any("manufacturer" in detail["loc"] for detail in body["details"])


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"serialNumber": "not-a-guid"}, "serialNumber"),
        ({"deviceType": "Tablet"}, "deviceType"),
        ({"deviceStatus": "Missing"}, "deviceStatus"),
        ({"primaryUser": "invalid-email"}, "primaryUser"),
        ({"primaryUser": "John Doe <john@example.com>"}, "primaryUser"),
    ],
)
def test_insert_invalid_field_returns_bad_request(client, overrides, field):
    response = client.post("/api/v1/device", json=_payload(**overrides))

    assert response.status_code == 400
    assert f"'{field}'" in response.json()["error"]


def test_insert_invalid_enum_lists_accepted_values(client):
    response = client.post("/api/v1/device", json=_payload(deviceType="Server"))
    assert "Laptop, Desktop" in response.json()["error"]


def test_insert_duplicate_serial_number_returns_conflict(client):
    payload = _payload()
    assert client.post("/api/v1/device", json=payload).status_code == 201

    response = client.post("/api/v1/device", json=_payload(serialNumber=payload["serialNumber"], modelId="OTHER"))

    assert response.status_code == 409
    assert response.json() == {"error": f"Device with Serial Number {payload['serialNumber']} already exists."}


def test_update_existing_device_returns_ok(client):
    payload = _payload()
    client.post("/api/v1/device", json=payload)
    changes = dict(payload, primaryUser="new.owner@example.com", deviceType="Desktop", deviceStatus="Retired")

    response = client.patch(f"/api/v1/device/{payload['serialNumber']}", json=changes)

    assert response.status_code == 200
    assert response.json() == changes


def test_update_rejects_immutable_field_changes_and_keeps_record(client):
    payload = _payload()
    client.post("/api/v1/device", json=payload)

    response = client.patch(
        f"/api/v1/device/{payload['serialNumber']}",
        json=dict(payload, modelName="Renamed", operatingSystem="Linux"),
    )
    assert response.status_code == 400
    assert "modelName" in response.json()["error"]

    # The stored record is untouched: a follow-up valid update sees the original values.
    follow_up = client.patch(f"/api/v1/device/{payload['serialNumber']}", json=payload)
    assert follow_up.status_code == 200
    assert follow_up.json() == payload


def test_update_nonexistent_serial_number_returns_not_found(client):
    payload = _payload()

    response = client.patch(f"/api/v1/Device/{payload['serialNumber']}", json=payload)

    assert response.status_code == 404
    assert "error" in response.json()


def test_update_path_body_mismatch_returns_bad_request(client):
    payload = _payload()
    client.post("/api/v1/device", json=payload)

    response = client.patch(f"/api/v1/device/{uuid.UUID(int=0)}", json=payload)

    assert response.status_code == 400
    assert "does not match" in response.json()["error"]


def test_update_malformed_path_serial_number_returns_bad_request(client):
    response = client.patch("/api/v1/device/not-a-guid", json=_payload())
    assert response.status_code == 400


def test_update_null_body_returns_bad_request(client):
    response = client.patch(
        f"/api/v1/device/{uuid.uuid4()}",
        content="null",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400


def test_unsupported_version_returns_bad_request(client):
    response = client.post("/api/v2.0/device", json=_payload(), headers={"api-version": "2.0"})

    assert response.status_code == 400
    assert "Unsupported API version" in response.json()["error"]


def test_version_header_must_match_url(client):
    response = client.post("/api/v1.0/device", json=_payload(), headers={"X-Api-Version": "2.0"})

    assert response.status_code == 400
    assert "does not match" in response.json()["error"]


def test_unexpected_errors_hide_internal_details(settings):
    class BrokenGateway:
        def fetch(self, serial_number):
            raise RuntimeError("connection refused to db-primary:5432")

        def insert(self, device):
            raise AssertionError("not reached")

        def update(self, device):
            raise AssertionError("not reached")

    app = create_app(settings, gateway=BrokenGateway())
    with TestClient(app, raise_server_exceptions=False) as test_client:
        response = test_client.post("/api/v1/device", json=_payload())

    assert response.status_code == 500
    assert response.json() == {"error": "An unexpected error occurred."}


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_metrics_endpoint_exposes_request_counters():
    settings = AppSettings(DB_URL="sqlite://", METRICS_ENABLED=True)
    engine = build_engine("sqlite://")
    app = create_app(settings, engine=engine)
    with TestClient(app) as test_client:
        test_client.get("/health")
        response = test_client.get("/metrics")
    engine.dispose()

    assert response.status_code == 200
    assert "http_requests_total" in response.text
