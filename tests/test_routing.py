"""Tests for route-safety scoring and candidate selection."""

from __future__ import annotations

import pytest

from conftest import make_alert
from resqnav.geo import distance_km
from resqnav.routing import (
    DEGRADED_RATIONALE,
    OUTER_BUFFER_KM,
    RouteSafetyEngine,
    classify_score,
    severity_penalty,
    vertex_penalty,
)

ORIGIN = (28.70, 77.10)
DESTINATION = (28.54, 77.39)
MIDPOINT = (28.62, 77.245)


@pytest.fixture
def engine() -> RouteSafetyEngine:
    return RouteSafetyEngine(detour_offset_deg=0.3)


@pytest.fixture
def midpoint_alert():
    """Critical hazard sitting on the direct path between ORIGIN and DESTINATION."""
    return make_alert("eq_mid", "seismic", "critical", *MIDPOINT, radius_km=3.0)


class TestPenalties:
    @pytest.mark.parametrize(
        "severity,expected",
        [("critical", 40), ("high", 30), ("medium", 20), ("moderate", 20), ("low", 10), ("CRITICAL", 40)],
    )
    def test_severity_penalty(self, severity, expected):
        assert severity_penalty(severity) == expected

    def test_inside_radius_boundary_uses_severity(self):
        alert = make_alert(severity="high", radius_km=10.0)
        assert vertex_penalty(10.0, alert) == 30

    def test_buffer_bands(self):
        alert = make_alert(severity="critical", radius_km=10.0)
        assert vertex_penalty(11.5, alert) == 15
        assert vertex_penalty(14.0, alert) == 5
        assert vertex_penalty(15.01, alert) == 0


class TestClassifyScore:
    @pytest.mark.parametrize(
        "score,level",
        [(100, "safe"), (80, "safe"), (79.9, "moderate risk"), (60, "moderate risk"),
         (45, "elevated risk"), (39, "high risk"), (0, "high risk")],
    )
    def test_buckets(self, score, level):
        assert classify_score(score)[0] == level

    def test_advisory_text(self):
        assert classify_score(95)[1].startswith("SAFE ROUTE")
        assert classify_score(10)[1].startswith("HIGH RISK")


class TestCandidatePaths:
    def test_order_direct_waypoints_detours(self, engine):
        paths = engine.candidate_paths(ORIGIN, DESTINATION, waypoints=[(29.0, 77.0)])
        assert len(paths) == 4
        assert paths[0] == [ORIGIN, DESTINATION]
        assert paths[1] == [ORIGIN, (29.0, 77.0), DESTINATION]
        assert paths[2][1] == pytest.approx((28.92, 77.245))
        assert paths[3][1] == pytest.approx((28.32, 77.245))

    def test_detour_latitude_clamped_at_pole(self):
        paths = RouteSafetyEngine(detour_offset_deg=5.0).candidate_paths((89.0, 0.0), (89.0, 10.0))
        assert paths[1][1][0] == 90.0

    @pytest.mark.parametrize("kwargs", [{"detour_offset_deg": 0}, {"sample_spacing_km": -1}])
    def test_rejects_non_positive_settings(self, kwargs):
        with pytest.raises(ValueError):
            RouteSafetyEngine(**kwargs)


class TestScorePath:
    def test_no_alerts_is_perfect(self, engine):
        assert engine.score_path([ORIGIN, DESTINATION], []) == 100

    def test_score_bounded_below(self, engine):
        alerts = [
            make_alert(f"eq_{i}", severity="critical", radius_km=50.0) for i in range(10)
        ]
        assert engine.score_path([ORIGIN, DESTINATION], alerts) == 0

    def test_distant_alert_ignored(self, engine):
        far = make_alert(latitude=-33.4, longitude=-71.5, radius_km=100.0)
        assert engine.score_path([ORIGIN, DESTINATION], [far]) == 100

    def test_hazard_across_leg_is_seen(self, engine, midpoint_alert):
        # Neither endpoint is near the alert; only interior samples are.
        assert engine.score_path([ORIGIN, DESTINATION], [midpoint_alert]) <= 60


class TestSafestRoute:
    def test_no_alerts_returns_direct_path(self, engine):
        route = engine.safest_route(ORIGIN, DESTINATION, [])
        assert route.path == [ORIGIN, DESTINATION]
        assert route.safety_score == 100
        assert route.hazards_near_route == []
        assert route.risk_level == "safe"
        assert not route.degraded

    def test_distance_is_selected_path_length(self, engine):
        route = engine.safest_route(ORIGIN, DESTINATION, [])
        assert 30 < route.distance_km < 35

    def test_detour_avoids_midpoint_hazard(self, engine, midpoint_alert):
        route = engine.safest_route(ORIGIN, DESTINATION, [midpoint_alert])
        assert route.safety_score == 100
        assert len(route.path) == 3
        # North and south tie; the north detour is generated first.
        assert route.path[1] == pytest.approx((28.92, 77.245))
        assert route.hazards_near_route == []
        assert route.distance_km > engine.safest_route(ORIGIN, DESTINATION, []).distance_km

    def test_waypoint_preferred_over_detour_on_tie(self, engine, midpoint_alert):
        waypoint = (29.2, 77.245)
        route = engine.safest_route(ORIGIN, DESTINATION, [midpoint_alert], waypoints=[waypoint])
        assert route.path == [ORIGIN, waypoint, DESTINATION]

    def test_direct_path_kept_when_detours_tie(self, engine):
        far = make_alert(latitude=-33.4, longitude=-71.5)
        route = engine.safest_route(ORIGIN, DESTINATION, [far], waypoints=[(29.2, 77.245)])
        assert route.path == [ORIGIN, DESTINATION]

    def test_selected_score_never_below_direct(self, engine):
        wide = make_alert("eq_wide", "seismic", "critical", 28.60, 77.20, radius_km=20.0)
        direct = engine.score_path([ORIGIN, DESTINATION], [wide])
        route = engine.safest_route(ORIGIN, DESTINATION, [wide])
        assert direct <= 60
        assert route.safety_score >= direct
        assert 0 <= route.safety_score <= 100

    def test_hazard_descriptors(self, engine):
        near_origin = make_alert("fl_1", "flood", "high", *ORIGIN, radius_km=1.0)
        route = engine.safest_route(ORIGIN, DESTINATION, [near_origin])
        assert "flood (0.0km away)" in route.hazards_near_route

    def test_hazard_listed_at_outer_buffer_edge(self, engine):
        position = (28.70, 77.17)
        gap = distance_km(ORIGIN, position)
        radius = gap - OUTER_BUFFER_KM
        alert = make_alert("fl_edge", "flood", "low", *position, radius_km=radius)
        # exactly radius + 5 km away: penalized and listed alike
        assert vertex_penalty(gap, alert) == 5
        assert engine.hazards_near([ORIGIN], [alert]) == [f"flood ({gap:.1f}km away)"]

    def test_hazard_beyond_outer_buffer_not_listed(self, engine):
        position = (28.70, 77.17)
        gap = distance_km(ORIGIN, position)
        radius = gap - OUTER_BUFFER_KM - 0.01
        alert = make_alert("fl_far", "flood", "low", *position, radius_km=radius)
        assert vertex_penalty(gap, alert) == 0
        assert engine.hazards_near([ORIGIN], [alert]) == []

    def test_invalid_alert_degrades(self, engine):
        broken = make_alert(latitude=200.0)
        route = engine.safest_route(ORIGIN, DESTINATION, [broken])
        assert route.degraded
        assert route.path == [ORIGIN, DESTINATION]
        assert route.safety_score == 0
        assert route.distance_km == 0
        assert route.rationale == DEGRADED_RATIONALE

    def test_scoring_error_degrades(self, engine, monkeypatch, midpoint_alert):
        def boom(*args, **kwargs):
            raise RuntimeError("scoring failed")

        monkeypatch.setattr(engine, "score_path", boom)
        route = engine.safest_route(ORIGIN, DESTINATION, [midpoint_alert])
        assert route.degraded
        assert route.risk_level == "unknown"


class TestCheckLocation:
    def test_safe_location(self, engine):
        check = engine.check_location(ORIGIN, [make_alert(latitude=-33.4, longitude=-71.5)])
        assert check.is_safe
        assert check.message == "Location is safe"
        assert check.nearby_hazards == []

    def test_buffer_extends_radius(self, engine):
        alert = make_alert("fl_1", "flood", latitude=28.70, longitude=77.12, radius_km=1.0)
        # ~1.95 km away: outside the radius but inside the default 2 km buffer
        check = engine.check_location(ORIGIN, [alert])
        assert not check.is_safe
        assert check.message == "1 hazard(s) nearby!"
        assert check.nearby_hazards == ["flood"]
        assert engine.check_location(ORIGIN, [alert], safety_buffer_km=0.5).is_safe
