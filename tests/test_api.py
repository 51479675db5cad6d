"""Tests for the FastAPI wrapper."""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from conftest import make_alert
from resqnav.api import app
from resqnav.errors import AggregateFetchFailure
from resqnav.models import AggregationResult


@pytest.fixture
def client(tmp_path, monkeypatch, sample_shelters_csv_path) -> Generator[TestClient, None, None]:
    """TestClient with lifespan entered so app.state is initialised."""
    monkeypatch.setenv("RESQNAV_DB_PATH", str(tmp_path / "api.db"))
    monkeypatch.setenv("RESQNAV_SHELTERS_FILE", str(sample_shelters_csv_path))
    with TestClient(app) as c:
        yield c


class TestHealthEndpoint:
    def test_returns_ok(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ok"
        assert "version" in data
        assert "uptime_seconds" in data
        assert data["refresh_count"] == 0
        assert data["last_refresh"] is None
        assert data["active_alerts"] == 0


class TestRefreshEndpoint:
    def test_partial_failure_is_ok(self, client: TestClient) -> None:
        result = AggregationResult(
            alerts=(make_alert("eq_1"),),
            succeeded=("usgs",),
            failures={"reliefweb_flood": "HTTP 502"},
        )
        with patch("resqnav.api.refresh_alerts", return_value=result):
            resp = client.post("/alerts/refresh")

        assert resp.status_code == 200
        data = resp.json()
        assert data["alert_count"] == 1
        assert data["succeeded"] == ["usgs"]
        assert data["failures"] == {"reliefweb_flood": "HTTP 502"}
        assert client.get("/health").json()["refresh_count"] == 1

    def test_total_failure_is_503(self, client: TestClient) -> None:
        failures = {"usgs": "timed out"}
        result = AggregationResult(failures=failures, error=AggregateFetchFailure(failures))
        with patch("resqnav.api.refresh_alerts", return_value=result):
            resp = client.post("/alerts/refresh")

        assert resp.status_code == 503
        assert resp.json()["detail"].startswith("All 1 disaster feeds failed")


class TestAlertsEndpoint:
    def test_lists_active(self, client: TestClient, sample_alerts) -> None:
        client.app.state.store.upsert_all(sample_alerts)
        resp = client.get("/alerts")
        assert resp.status_code == 200
        ids = [a["external_id"] for a in resp.json()]
        assert "reliefweb_flood_102" not in ids
        assert len(ids) == 4

    def test_filters_by_severity(self, client: TestClient, sample_alerts) -> None:
        client.app.state.store.upsert_all(sample_alerts)
        resp = client.get("/alerts", params={"severity": "critical"})
        assert {a["kind"] for a in resp.json()} == {"seismic", "storm"}

    def test_rejects_unknown_severity(self, client: TestClient) -> None:
        resp = client.get("/alerts", params={"severity": "apocalyptic"})
        assert resp.status_code == 422


class TestRouteEndpoint:
    def test_explicit_destination(self, client: TestClient) -> None:
        resp = client.get(
            "/route",
            params={"origin_lat": 28.70, "origin_lon": 77.10, "dest_lat": 28.54, "dest_lon": 77.39},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["shelter"] is None
        assert data["route"]["safety_score"] == 100
        assert data["route"]["path"] == [[28.70, 77.10], [28.54, 77.39]]

    def test_nearest_shelter(self, client: TestClient) -> None:
        resp = client.get("/route", params={"origin_lat": 28.70, "origin_lon": 77.10})
        assert resp.status_code == 200
        data = resp.json()
        assert data["shelter"]["id"] == "S1"
        assert data["shelter_distance_km"] > 0
        assert data["route"]["risk_level"] == "safe"

    def test_no_shelters_is_404(self, client: TestClient) -> None:
        client.app.state.shelters = []
        resp = client.get("/route", params={"origin_lat": 28.70, "origin_lon": 77.10})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "No operational shelters available"

    def test_invalid_origin_is_422(self, client: TestClient) -> None:
        resp = client.get("/route", params={"origin_lat": 120.0, "origin_lon": 77.10})
        assert resp.status_code == 422
