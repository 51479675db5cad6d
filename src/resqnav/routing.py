"""Route safety scoring against active hazard zones.

Candidate paths are scored by walking their vertices, densified so that a
hazard lying across a leg is seen even when no waypoint falls inside it.
Each vertex loses points for every alert it is inside or near:

    inside radius            severity penalty (critical 40, high 30, medium 20, else 10)
    within radius + 2 km     15
    within radius + 5 km     5

Scores are clamped to [0, 100]. The best candidate wins; ties go to the
first candidate generated (direct, waypoints, north detour, south detour).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from resqnav.geo import densify, distance_km, path_length_km
from resqnav.models import Alert, Coordinate, RouteRecommendation, SafetyCheck

logger = logging.getLogger(__name__)

MAX_SCORE = 100.0
NEAR_BUFFER_KM = 2.0
OUTER_BUFFER_KM = 5.0
NEAR_PENALTY = 15.0
OUTER_PENALTY = 5.0

SEVERITY_PENALTIES: dict[str, float] = {
    "critical": 40.0,
    "high": 30.0,
    "medium": 20.0,
    "moderate": 20.0,
}
DEFAULT_SEVERITY_PENALTY = 10.0

# (minimum score, risk level, advisory), checked top to bottom
RISK_BUCKETS: tuple[tuple[float, str, str], ...] = (
    (80.0, "safe", "SAFE ROUTE: This route avoids known hazards. Proceed safely."),
    (60.0, "moderate risk", "MODERATE RISK: Exercise caution. Some hazards in the area."),
    (
        40.0,
        "elevated risk",
        "ELEVATED RISK: Consider alternate route if possible. Stay alert.",
    ),
    (
        0.0,
        "high risk",
        "HIGH RISK: This route passes near danger zones. Seek alternate route immediately!",
    ),
)

DEGRADED_RATIONALE = "Unable to calculate optimal route"


def severity_penalty(severity: str) -> float:
    return SEVERITY_PENALTIES.get(severity.lower(), DEFAULT_SEVERITY_PENALTY)


def vertex_penalty(distance: float, alert: Alert) -> float:
    """Points lost by one vertex at *distance* km from *alert*'s centre."""
    if distance <= alert.radius_km:
        return severity_penalty(alert.severity)
    if distance <= alert.radius_km + NEAR_BUFFER_KM:
        return NEAR_PENALTY
    if distance <= alert.radius_km + OUTER_BUFFER_KM:
        return OUTER_PENALTY
    return 0.0


def classify_score(score: float) -> tuple[str, str]:
    """Return ``(risk_level, advisory)`` for a safety score."""
    for minimum, level, advisory in RISK_BUCKETS:
        if score >= minimum:
            return level, advisory
    return RISK_BUCKETS[-1][1], RISK_BUCKETS[-1][2]


def _clamp(score: float) -> float:
    return max(0.0, min(MAX_SCORE, score))


@dataclass(frozen=True)
class ScoredRoute:
    path: list[Coordinate]
    safety_score: float


class RouteSafetyEngine:
    """Pick the safest of a small fixed set of candidate paths.

    ``detour_offset_deg`` shifts the midpoint north/south to form the detour
    candidates; ``sample_spacing_km`` is the largest gap between scored
    vertices along a path.
    """

    def __init__(self, detour_offset_deg: float = 0.01, sample_spacing_km: float = 1.0) -> None:
        if detour_offset_deg <= 0:
            raise ValueError("detour_offset_deg must be positive")
        if sample_spacing_km <= 0:
            raise ValueError("sample_spacing_km must be positive")
        self.detour_offset_deg = detour_offset_deg
        self.sample_spacing_km = sample_spacing_km

    def candidate_paths(
        self,
        origin: Coordinate,
        destination: Coordinate,
        waypoints: Sequence[Coordinate] = (),
    ) -> list[list[Coordinate]]:
        """Direct path, one path per waypoint, then north and south detours."""
        paths: list[list[Coordinate]] = [[origin, destination]]
        paths.extend([origin, waypoint, destination] for waypoint in waypoints)

        mid_lat = (origin[0] + destination[0]) / 2
        mid_lon = (origin[1] + destination[1]) / 2
        north = (min(mid_lat + self.detour_offset_deg, 90.0), mid_lon)
        south = (max(mid_lat - self.detour_offset_deg, -90.0), mid_lon)
        paths.append([origin, north, destination])
        paths.append([origin, south, destination])
        return paths

    def score_path(self, path: Sequence[Coordinate], alerts: Sequence[Alert]) -> float:
        score = MAX_SCORE
        if not alerts:
            return score
        for vertex in densify(path, self.sample_spacing_km):
            for alert in alerts:
                score -= vertex_penalty(distance_km(vertex, alert.position), alert)
        return _clamp(score)

    def hazards_near(self, path: Sequence[Coordinate], alerts: Sequence[Alert]) -> list[str]:
        """One ``"<kind> (<d>km away)"`` entry per alert within radius + 5 km."""
        if not alerts:
            return []
        vertices = densify(path, self.sample_spacing_km)
        hazards: list[str] = []
        for alert in alerts:
            closest = min(distance_km(v, alert.position) for v in vertices)
            if closest <= alert.radius_km + OUTER_BUFFER_KM:
                descriptor = f"{alert.kind} ({closest:.1f}km away)"
                if descriptor not in hazards:
                    hazards.append(descriptor)
        return hazards

    def safest_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        active_alerts: Sequence[Alert],
        waypoints: Sequence[Coordinate] = (),
    ) -> RouteRecommendation:
        """Score every candidate and recommend the best one.

        Never raises: any failure yields the direct path with score 0.
        """
        try:
            alerts = list(active_alerts)
            candidates = self.candidate_paths(origin, destination, waypoints)
            scored = [ScoredRoute(path, self.score_path(path, alerts)) for path in candidates]
            for route in scored:
                logger.debug("Candidate %s scored %.1f", route.path, route.safety_score)
            # max() keeps the first of equal scores
            best = max(scored, key=lambda route: route.safety_score)

            level, advisory = classify_score(best.safety_score)
            return RouteRecommendation(
                path=best.path,
                safety_score=best.safety_score,
                distance_km=path_length_km(best.path),
                hazards_near_route=self.hazards_near(best.path, alerts),
                rationale=advisory,
                risk_level=level,
            )
        except Exception:
            logger.exception("Route scoring failed; falling back to direct path")
            return RouteRecommendation(
                path=[origin, destination],
                safety_score=0.0,
                distance_km=0.0,
                hazards_near_route=[],
                rationale=DEGRADED_RATIONALE,
                risk_level="unknown",
                degraded=True,
            )

    def check_location(
        self,
        point: Coordinate,
        alerts: Sequence[Alert],
        safety_buffer_km: float = NEAR_BUFFER_KM,
    ) -> SafetyCheck:
        """Is *point* clear of every alert radius plus *safety_buffer_km*?"""
        nearby = [
            alert
            for alert in alerts
            if distance_km(point, alert.position) <= alert.radius_km + safety_buffer_km
        ]
        if not nearby:
            return SafetyCheck(True, "Location is safe", [])
        return SafetyCheck(
            False,
            f"{len(nearby)} hazard(s) nearby!",
            [alert.kind for alert in nearby],
        )
