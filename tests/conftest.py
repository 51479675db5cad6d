"""Shared fixtures for resqnav tests."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from resqnav.http import create_session
from resqnav.models import Alert, Shelter

FIXTURES_DIR = Path(__file__).parent / "fixtures"

NOW = datetime(2025, 11, 10, 12, 0, tzinfo=timezone.utc)


def make_alert(
    external_id: str = "eq_test",
    kind: str = "seismic",
    severity: str = "high",
    latitude: float = 28.62,
    longitude: float = 77.245,
    radius_km: float = 3.0,
    observed_at: datetime = NOW,
    active: bool = True,
    title: str | None = None,
) -> Alert:
    return Alert(
        external_id=external_id,
        kind=kind,
        severity=severity,
        title=title or f"Test {kind} alert",
        description="",
        latitude=latitude,
        longitude=longitude,
        radius_km=radius_km,
        observed_at=observed_at,
        active=active,
        source="test",
    )


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch) -> Path:
    """Keep the disk cache out of the user's home directory."""
    cache_dir = tmp_path / "cache"
    monkeypatch.setattr("resqnav.cache._CACHE_DIR", cache_dir)
    return cache_dir


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def session():
    """A session without retries so error-status tests stay fast."""
    return create_session(retries=0)


@pytest.fixture
def sample_usgs_response() -> dict:
    return json.loads((FIXTURES_DIR / "usgs_sample.json").read_text())


@pytest.fixture
def sample_reliefweb_list() -> dict:
    return json.loads((FIXTURES_DIR / "reliefweb_list.json").read_text())


@pytest.fixture
def sample_reliefweb_details() -> dict:
    """Detail records keyed by disaster id."""
    return json.loads((FIXTURES_DIR / "reliefweb_details.json").read_text())


@pytest.fixture
def sample_shelters_csv_path() -> Path:
    return FIXTURES_DIR / "shelters_sample.csv"


@pytest.fixture
def sample_alerts() -> list[Alert]:
    """Pre-built alerts spanning every kind and both lifecycle states."""
    return [
        make_alert("eq_us1", "seismic", "critical", 44.6, 149.1, 75.9),
        make_alert("eq_us2", "seismic", "medium", -33.4, -71.5, 12.6,
                   observed_at=datetime(2025, 11, 9, tzinfo=timezone.utc)),
        make_alert("reliefweb_flood_101", "flood", "high", 20.59, 78.96, 50.0,
                   observed_at=datetime(2025, 7, 14, tzinfo=timezone.utc)),
        make_alert("reliefweb_storm_105", "storm", "critical", 12.88, 121.77, 200.0,
                   observed_at=datetime(2025, 11, 3, tzinfo=timezone.utc)),
        make_alert("reliefweb_flood_102", "flood", "high", 19.8563, 102.4955, 50.0,
                   observed_at=datetime(2025, 8, 1, tzinfo=timezone.utc), active=False),
    ]


@pytest.fixture
def sample_shelters() -> list[Shelter]:
    return [
        Shelter(
            id="S1",
            name="Dwarka Community Hall",
            latitude=28.5921,
            longitude=77.0460,
            capacity=300,
            current_occupancy=120,
            facilities=("medical", "food", "water"),
        ),
        Shelter(
            id="S2",
            name="Noida Stadium Shelter",
            latitude=28.5355,
            longitude=77.3910,
            capacity=800,
            current_occupancy=850,
        ),
        Shelter(
            id="S3",
            name="Rohini Relief Camp",
            latitude=28.7410,
            longitude=77.1150,
            capacity=200,
            operational=False,
        ),
    ]
