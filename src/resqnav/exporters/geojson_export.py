"""GeoJSON exporter for alerts and route recommendations."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from resqnav.models import Alert, RouteRecommendation, Shelter


def _make_alert_feature(alert: Alert) -> dict[str, Any]:
    """Create a GeoJSON Point Feature for an alert; the radius is a property."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [alert.longitude, alert.latitude],
        },
        "properties": {
            "feature_type": "alert",
            "external_id": alert.external_id,
            "kind": alert.kind,
            "severity": alert.severity,
            "title": alert.title,
            "description": alert.description,
            "radius_km": round(alert.radius_km, 2),
            "observed_at": alert.observed_at.isoformat(),
            "active": alert.active,
            "source": alert.source,
        },
    }


def _make_route_feature(route: RouteRecommendation) -> dict[str, Any]:
    """Create a GeoJSON LineString for the recommended path."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "LineString",
            "coordinates": [[lon, lat] for lat, lon in route.path],
        },
        "properties": {
            "feature_type": "route",
            "safety_score": route.safety_score,
            "distance_km": round(route.distance_km, 2),
            "risk_level": route.risk_level,
            "rationale": route.rationale,
            "hazards_near_route": route.hazards_near_route,
            "degraded": route.degraded,
        },
    }


def _make_shelter_feature(shelter: Shelter) -> dict[str, Any]:
    return {
        "type": "Feature",
        "geometry": {
            "type": "Point",
            "coordinates": [shelter.longitude, shelter.latitude],
        },
        "properties": {
            "feature_type": "shelter",
            "shelter_id": shelter.id,
            "name": shelter.name,
            "capacity": shelter.capacity,
            "current_occupancy": shelter.current_occupancy,
            "operational": shelter.operational,
        },
    }


def export_geojson(
    alerts: list[Alert],
    output_path: Path,
    route: RouteRecommendation | None = None,
    shelter: Shelter | None = None,
) -> Path:
    """Export alerts (and optionally a route and its shelter) as a FeatureCollection.

    Feature types:
    - "alert": one Point per alert, radius in properties
    - "route": the recommended path as a LineString
    - "shelter": the destination shelter

    GeoJSON coordinates are [longitude, latitude] per RFC 7946.
    """
    features: list[dict[str, Any]] = [_make_alert_feature(a) for a in alerts]
    if route is not None:
        features.append(_make_route_feature(route))
    if shelter is not None:
        features.append(_make_shelter_feature(shelter))

    geojson = {
        "type": "FeatureCollection",
        "metadata": {
            "generated": datetime.now(tz=timezone.utc).isoformat(),
            "source": "resqnav",
            "alert_count": len(alerts),
            "active_alert_count": sum(1 for a in alerts if a.active),
            "has_route": route is not None,
        },
        "features": features,
    }

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(geojson, f, indent=2, ensure_ascii=False)

    return output_path
