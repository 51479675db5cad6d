"""USGS earthquake feed adapter."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from requests import Session

from resqnav.errors import FetchError, InvalidCoordinate
from resqnav.fetchers.base import FeedAdapter
from resqnav.geo import validate_coordinate
from resqnav.http import create_session
from resqnav.models import Alert, Severity

logger = logging.getLogger(__name__)

USGS_QUERY_URL = "https://earthquake.usgs.gov/fdsnws/event/1/query"


def seismic_severity(magnitude: float) -> Severity:
    """Map magnitude to severity: M7+ critical, M6+ high, M5+ medium, else low."""
    if magnitude >= 7.0:
        return "critical"
    if magnitude >= 6.0:
        return "high"
    if magnitude >= 5.0:
        return "medium"
    return "low"


def seismic_radius_km(magnitude: float) -> float:
    """Affected radius growing by half again per magnitude unit above M4.

    10 km at M4, 15 km at M5, 22.5 km at M6. A felt-area heuristic, not a
    ground-motion model.
    """
    return 10.0 * 1.5 ** (magnitude - 4.0)


class SeismicAdapter(FeedAdapter):
    """Recent earthquakes from the USGS FDSN Event Web Service."""

    name = "usgs"
    kind = "seismic"

    def __init__(
        self,
        session: Session | None = None,
        min_magnitude: float = 4.0,
        limit: int = 100,
        timeout: int = 30,
        url: str = USGS_QUERY_URL,
    ) -> None:
        self.session = session if session is not None else create_session()
        self.min_magnitude = min_magnitude
        self.limit = limit
        self.timeout = timeout
        self.url = url

    def _fetch_alerts(self, since: timedelta) -> list[Alert]:
        start_date = datetime.now(timezone.utc) - since
        params: dict[str, str | float | int] = {
            "format": "geojson",
            "starttime": start_date.strftime("%Y-%m-%d"),
            "minmagnitude": self.min_magnitude,
            "limit": self.limit,
            "orderby": "time",
        }
        resp = self.session.get(self.url, params=params, timeout=self.timeout)
        if resp.status_code != 200:
            raise FetchError(self.name, f"HTTP {resp.status_code}")

        alerts: list[Alert] = []
        for feat in resp.json()["features"]:
            alert = self._to_alert(feat)
            if alert is not None:
                alerts.append(alert)
        return alerts

    def _to_alert(self, feat: dict) -> Alert | None:
        props = feat.get("properties") or {}
        magnitude = props.get("mag")
        coords = (feat.get("geometry") or {}).get("coordinates") or []
        if magnitude is None or len(coords) < 2 or None in coords[:2]:
            logger.debug("Skipping USGS event %s without magnitude or position", feat.get("id"))
            return None

        try:
            latitude, longitude = validate_coordinate(coords[1], coords[0])
        except InvalidCoordinate as exc:
            logger.warning("Skipping USGS event %s: %s", feat.get("id"), exc)
            return None

        magnitude = float(magnitude)
        place = props.get("place") or "unknown location"
        time_ms = props.get("time")
        observed_at = (
            datetime.fromtimestamp(time_ms / 1000, tz=timezone.utc)
            if time_ms is not None
            else datetime.now(timezone.utc)
        )
        return Alert(
            external_id=f"eq_{feat['id']}",
            kind="seismic",
            severity=seismic_severity(magnitude),
            title=props.get("title") or f"M {magnitude:.1f} - {place}",
            description=f"Magnitude {magnitude} earthquake at {place}",
            latitude=latitude,
            longitude=longitude,
            radius_km=seismic_radius_km(magnitude),
            observed_at=observed_at,
            active=True,
            source=self.name,
        )
