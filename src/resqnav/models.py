"""Data models for alert aggregation and route-safety scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from resqnav.errors import AggregateFetchFailure, FetchError

AlertKind = Literal["seismic", "flood", "fire", "storm", "volcanic", "other"]
Severity = Literal["low", "medium", "high", "critical"]

SEVERITY_ORDER: dict[str, int] = {"low": 1, "medium": 2, "high": 3, "critical": 4}

Coordinate = tuple[float, float]  # (latitude, longitude) in degrees


def severity_rank(severity: str) -> int:
    """Position of *severity* in low < medium < high < critical (0 if unknown)."""
    return SEVERITY_ORDER.get(severity.lower(), 0)


@dataclass(frozen=True)
class Alert:
    """A normalized disaster event, merged into stores by ``external_id``."""

    external_id: str
    kind: AlertKind
    severity: Severity
    title: str
    description: str
    latitude: float
    longitude: float
    radius_km: float
    observed_at: datetime
    active: bool = True
    source: str = ""

    @property
    def position(self) -> Coordinate:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Shelter:
    """An evacuation shelter. Occupancy above capacity is allowed."""

    id: str
    name: str
    latitude: float
    longitude: float
    capacity: int
    current_occupancy: int = 0
    operational: bool = True
    address: str = ""
    contact_number: str = ""
    facilities: tuple[str, ...] = ()
    shelter_type: str = ""

    @property
    def position(self) -> Coordinate:
        return (self.latitude, self.longitude)

    @property
    def is_over_capacity(self) -> bool:
        return self.current_occupancy > self.capacity

    @property
    def available_capacity(self) -> int:
        return max(self.capacity - self.current_occupancy, 0)


@dataclass(frozen=True)
class RouteRecommendation:
    """Safest candidate route between two points, ready for rendering."""

    path: list[Coordinate]
    safety_score: float
    distance_km: float
    hazards_near_route: list[str] = field(default_factory=list)
    rationale: str = ""
    risk_level: str = ""
    degraded: bool = False


@dataclass(frozen=True)
class SafetyCheck:
    """Result of checking a single location against active hazards."""

    is_safe: bool
    message: str
    nearby_hazards: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FeedResult:
    """What one feed adapter produced during a single fetch."""

    source: str
    kind: AlertKind
    alerts: tuple[Alert, ...] = ()
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AggregationResult:
    """Alerts merged across all adapters, keyed by ``external_id``.

    ``failures`` maps adapter name to a short reason. ``error`` is only set
    when every adapter failed.
    """

    alerts: tuple[Alert, ...] = ()
    succeeded: tuple[str, ...] = ()
    failures: dict[str, str] = field(default_factory=dict)
    error: AggregateFetchFailure | None = None

    @property
    def total_failure(self) -> bool:
        return self.error is not None

    def raise_for_failure(self) -> None:
        """Raise the aggregate failure, if any, for callers that want an exception."""
        if self.error is not None:
            raise self.error


@dataclass(frozen=True)
class EvacuationPlan:
    """Nearest operational shelter plus the safest route to reach it."""

    shelter: Shelter
    shelter_distance_km: float
    recommendation: RouteRecommendation
