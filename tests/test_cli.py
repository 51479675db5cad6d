"""Tests for the Typer CLI."""

from __future__ import annotations

import json
from unittest.mock import patch

from typer.testing import CliRunner

from conftest import make_alert
from resqnav.cli import app
from resqnav.errors import AggregateFetchFailure
from resqnav.models import AggregationResult
from resqnav.store import SqliteAlertStore

runner = CliRunner()


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "resqnav" in result.output


class TestRefreshCommand:
    def test_total_failure_exits_1(self, tmp_path):
        failures = {"usgs": "timed out"}
        outcome = AggregationResult(failures=failures, error=AggregateFetchFailure(failures))
        with patch("resqnav.cli.refresh_alerts", return_value=outcome):
            result = runner.invoke(app, ["refresh", "--db", str(tmp_path / "a.db")])
        assert result.exit_code == 1
        assert "Fetch failed" in result.output

    def test_writes_geojson(self, tmp_path):
        db = tmp_path / "a.db"
        with SqliteAlertStore(db) as store:
            store.upsert_all([make_alert("eq_1")])
        outcome = AggregationResult(alerts=(make_alert("eq_1"),), succeeded=("usgs",))
        output = tmp_path / "alerts.geojson"
        with patch("resqnav.cli.refresh_alerts", return_value=outcome):
            result = runner.invoke(app, ["refresh", "--db", str(db), "-o", str(output)])

        assert result.exit_code == 0
        data = json.loads(output.read_text())
        assert data["metadata"]["alert_count"] == 1


class TestAlertsCommand:
    def test_empty_store(self, tmp_path):
        result = runner.invoke(app, ["alerts", "--db", str(tmp_path / "a.db")])
        assert result.exit_code == 0
        assert "No active alerts" in result.output

    def test_json_output(self, tmp_path, sample_alerts):
        db = tmp_path / "a.db"
        with SqliteAlertStore(db) as store:
            store.upsert_all(sample_alerts)
        output = tmp_path / "alerts.json"
        result = runner.invoke(
            app, ["alerts", "--db", str(db), "--severity", "critical", "-o", str(output)]
        )
        assert result.exit_code == 0
        ids = {a["external_id"] for a in json.loads(output.read_text())}
        assert ids == {"eq_us1", "reliefweb_storm_105"}


class TestRouteCommand:
    def test_explicit_destination(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "route", "--lat", "28.70", "--lon", "77.10",
                "--dest-lat", "28.54", "--dest-lon", "77.39",
                "--db", str(tmp_path / "a.db"),
            ],
        )
        assert result.exit_code == 0
        assert "SAFE" in result.output

    def test_nearest_shelter_with_geojson(self, tmp_path, sample_shelters_csv_path):
        output = tmp_path / "route.geojson"
        result = runner.invoke(
            app,
            [
                "route", "--lat", "28.70", "--lon", "77.10",
                "--shelters", str(sample_shelters_csv_path),
                "--db", str(tmp_path / "a.db"),
                "-o", str(output),
            ],
        )
        assert result.exit_code == 0
        assert "Dwarka Community Hall" in result.output
        kinds = [f["properties"]["feature_type"] for f in json.loads(output.read_text())["features"]]
        assert kinds == ["route", "shelter"]

    def test_missing_destination_exits_2(self, tmp_path):
        result = runner.invoke(
            app, ["route", "--lat", "28.70", "--lon", "77.10", "--db", str(tmp_path / "a.db")]
        )
        assert result.exit_code == 2

    def test_out_of_range_origin_exits_2(self, tmp_path, sample_shelters_csv_path):
        result = runner.invoke(
            app,
            [
                "route", "--lat", "200", "--lon", "0",
                "--shelters", str(sample_shelters_csv_path),
                "--db", str(tmp_path / "a.db"),
            ],
        )
        assert result.exit_code == 2
        assert "Invalid coordinate (200.0, 0.0)" in result.output
        assert not (tmp_path / "a.db").exists()

    def test_out_of_range_destination_exits_2(self, tmp_path):
        result = runner.invoke(
            app,
            [
                "route", "--lat", "28.70", "--lon", "77.10",
                "--dest-lat", "28.54", "--dest-lon", "400",
                "--db", str(tmp_path / "a.db"),
            ],
        )
        assert result.exit_code == 2
