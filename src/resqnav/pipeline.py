"""Pipeline entry points: refresh the alert store, plan an evacuation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import timedelta

from resqnav.aggregator import AggregationOrchestrator, build_adapters
from resqnav.config import ResQNavConfig
from resqnav.errors import NoSheltersAvailable
from resqnav.geo import distance_km, validate_coordinate
from resqnav.models import AggregationResult, Alert, Coordinate, EvacuationPlan, Shelter
from resqnav.routing import RouteSafetyEngine
from resqnav.shelters import nearest_shelter, operational_shelters
from resqnav.store import AlertStore

logger = logging.getLogger(__name__)


def build_orchestrator(config: ResQNavConfig) -> AggregationOrchestrator:
    """Composition root for the feed adapters described by *config*."""
    return AggregationOrchestrator(build_adapters(config), max_workers=config.max_workers)


def build_engine(config: ResQNavConfig) -> RouteSafetyEngine:
    return RouteSafetyEngine(
        detour_offset_deg=config.detour_offset_deg,
        sample_spacing_km=config.sample_spacing_km,
    )


def refresh_alerts(
    config: ResQNavConfig,
    store: AlertStore,
    orchestrator: AggregationOrchestrator | None = None,
) -> AggregationResult:
    """Fetch all feeds, upsert the merged alerts and reap stale inactive ones.

    Steps:
    1. Fetch every feed concurrently (partial failures tolerated)
    2. Upsert merged alerts by external id
    3. Delete inactive alerts older than ``reap_after_days``

    Total feed failure is returned in ``result.error``, not raised; the
    store is still reaped.
    """
    if orchestrator is None:
        orchestrator = build_orchestrator(config)

    # Step 1: Fetch
    result = orchestrator.fetch_all(
        since=timedelta(days=config.days_lookback),
        timeout=config.fetch_timeout,
    )
    for name, reason in result.failures.items():
        logger.warning("Feed %s contributed no alerts: %s", name, reason)

    # Step 2: Upsert
    if result.alerts:
        written = store.upsert_all(result.alerts)
        logger.info("Upserted %d alerts", written)

    # Step 3: Reap
    reaped = store.reap_inactive_older_than(timedelta(days=config.reap_after_days))
    logger.info("Reaped %d stale inactive alerts", reaped)

    return result


def plan_evacuation(
    origin: Coordinate,
    shelters: Sequence[Shelter],
    alerts: Sequence[Alert],
    engine: RouteSafetyEngine | None = None,
) -> EvacuationPlan:
    """Pick the nearest operational shelter and the safest route to it.

    Raises InvalidCoordinate for an out-of-range origin and
    NoSheltersAvailable when no operational shelter exists.
    """
    origin = validate_coordinate(*origin)
    if engine is None:
        engine = RouteSafetyEngine()

    candidates = operational_shelters(shelters)
    if not candidates:
        raise NoSheltersAvailable("No operational shelters available")

    shelter = nearest_shelter(origin, candidates)
    if shelter.is_over_capacity:
        logger.warning(
            "Nearest shelter %s is over capacity (%d/%d)",
            shelter.name,
            shelter.current_occupancy,
            shelter.capacity,
        )

    recommendation = engine.safest_route(origin, shelter.position, alerts)
    return EvacuationPlan(
        shelter=shelter,
        shelter_distance_km=distance_km(origin, shelter.position),
        recommendation=recommendation,
    )
