"""FastAPI wrapper exposing alerts and route recommendations."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Annotated, Any

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse

from resqnav import __version__
from resqnav.config import ResQNavConfig
from resqnav.errors import NoSheltersAvailable
from resqnav.exporters.json_export import alert_to_dict
from resqnav.models import Severity
from resqnav.pipeline import build_engine, plan_evacuation, refresh_alerts
from resqnav.shelters import load_shelters
from resqnav.store import SqliteAlertStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncGenerator[None, None]:
    """Open the alert store and load shelters once; record startup state."""
    config = ResQNavConfig()
    application.state.config = config
    application.state.start_time = datetime.now(tz=timezone.utc)
    application.state.last_refresh = None
    application.state.refresh_count = 0
    application.state.store = SqliteAlertStore(config.db_path)
    application.state.shelters = (
        load_shelters(config.shelters_file) if config.shelters_file is not None else []
    )
    yield
    application.state.store.close()


app = FastAPI(
    title="ResQNav API",
    description="Disaster alert aggregation and route-safety scoring.",
    version=__version__,
    lifespan=lifespan,
)


@app.get("/health")
def health(request: Request) -> dict[str, Any]:
    """Server health check with uptime, version, and refresh count."""
    state = request.app.state
    now = datetime.now(tz=timezone.utc)
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round((now - state.start_time).total_seconds(), 1),
        "last_refresh": state.last_refresh.isoformat() if state.last_refresh else None,
        "refresh_count": state.refresh_count,
        "active_alerts": len(state.store.active_alerts()),
    }


@app.post("/alerts/refresh")
def refresh(request: Request) -> JSONResponse:
    """Fetch all feeds into the store.

    Partial failures still return 200 with the failed feeds listed; total
    failure returns 503 so clients can offer a retry.
    """
    state = request.app.state
    result = refresh_alerts(state.config, state.store)
    state.last_refresh = datetime.now(tz=timezone.utc)
    state.refresh_count += 1

    body = {
        "alert_count": len(result.alerts),
        "succeeded": list(result.succeeded),
        "failures": result.failures,
    }
    if result.error is not None:
        body["detail"] = result.error.summary()
        return JSONResponse(status_code=503, content=body)
    return JSONResponse(content=body)


@app.get("/alerts")
def list_alerts(
    request: Request,
    severity: Annotated[
        Severity | None, Query(description="Only return active alerts of this severity."),
    ] = None,
) -> list[dict[str, Any]]:
    """Active alerts, newest first."""
    store = request.app.state.store
    found = store.alerts_by_severity(severity) if severity else store.active_alerts()
    return [alert_to_dict(a) for a in found]


@app.get("/route")
def get_route(
    request: Request,
    origin_lat: Annotated[float, Query(ge=-90.0, le=90.0)],
    origin_lon: Annotated[float, Query(ge=-180.0, le=180.0)],
    dest_lat: Annotated[float | None, Query(ge=-90.0, le=90.0)] = None,
    dest_lon: Annotated[float | None, Query(ge=-180.0, le=180.0)] = None,
) -> JSONResponse:
    """Safest route to the given destination, or to the nearest shelter."""
    state = request.app.state
    engine = build_engine(state.config)
    origin = (origin_lat, origin_lon)
    active = state.store.active_alerts()

    if dest_lat is not None and dest_lon is not None:
        recommendation = engine.safest_route(origin, (dest_lat, dest_lon), active)
        return JSONResponse(content={"shelter": None, "route": asdict(recommendation)})

    try:
        plan = plan_evacuation(origin, state.shelters, active, engine)
    except NoSheltersAvailable as exc:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    return JSONResponse(
        content={
            "shelter": asdict(plan.shelter),
            "shelter_distance_km": round(plan.shelter_distance_km, 3),
            "route": asdict(plan.recommendation),
        }
    )
