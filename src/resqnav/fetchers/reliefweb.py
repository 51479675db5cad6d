"""ReliefWeb (UN OCHA) disaster catalog client and keyword-filtered adapters.

ReliefWeb lists disasters without coordinates, so each adapter filters the
latest disasters by keyword, caps the candidates per kind and fetches the
detail document of each to resolve a position. The cap bounds the number of
detail calls per refresh; disasters beyond it are simply not reported.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from requests import RequestException, Session

from resqnav.cache import RELIEFWEB_DETAIL_TTL, cache_get, cache_put
from resqnav.data.country_centroids import country_centroid
from resqnav.errors import FetchError, InvalidCoordinate
from resqnav.fetchers.base import FeedAdapter
from resqnav.geo import validate_coordinate
from resqnav.http import create_session
from resqnav.models import Alert, AlertKind, Severity

logger = logging.getLogger(__name__)

RELIEFWEB_BASE_URL = "https://api.reliefweb.int/v2"

_DESCRIPTION_LIMIT = 200
_NAME_DATE_RE = re.compile(r"- (\w{3}) (\d{4})$")


def parse_name_date(name: str) -> datetime | None:
    """Parse the trailing ``- Mon YYYY`` of a ReliefWeb disaster name.

    "Lao PDR: Floods - Jul 2025" -> 2025-07-01T00:00:00+00:00.
    """
    match = _NAME_DATE_RE.search(name.strip())
    if match is None:
        return None
    month, year = match.groups()
    try:
        return datetime.strptime(f"01 {month} {year}", "%d %b %Y").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _parse_event_date(fields: dict) -> datetime | None:
    raw = (fields.get("date") or {}).get("event")
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class ReliefWebClient:
    """Thin client for the ReliefWeb v2 disasters endpoints.

    One instance is shared by all keyword adapters of a refresh.
    """

    def __init__(
        self,
        session: Session | None = None,
        appname: str = "resqnav",
        timeout: int = 30,
        base_url: str = RELIEFWEB_BASE_URL,
        use_cache: bool = True,
    ) -> None:
        self.session = session if session is not None else create_session()
        self.appname = appname
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.use_cache = use_cache

    def list_disasters(self, limit: int = 50) -> list[dict]:
        """Latest disasters (``preset=latest``), newest first."""
        resp = self.session.get(
            f"{self.base_url}/disasters",
            params={
                "appname": self.appname,
                "profile": "list",
                "preset": "latest",
                "slim": 1,
                "limit": limit,
            },
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise FetchError("reliefweb", f"disaster list returned HTTP {resp.status_code}")
        return resp.json()["data"]

    def disaster_detail(self, disaster_id: str) -> dict | None:
        """Full detail record for one disaster, or None when unavailable."""
        cache_key = f"reliefweb_disaster_{disaster_id}"
        if self.use_cache:
            cached = cache_get(cache_key, RELIEFWEB_DETAIL_TTL)
            if cached is not None:
                return cached

        try:
            resp = self.session.get(
                f"{self.base_url}/disasters/{disaster_id}",
                params={"appname": self.appname, "profile": "full"},
                timeout=self.timeout,
            )
        except RequestException:
            logger.warning("Failed to fetch ReliefWeb disaster %s", disaster_id, exc_info=True)
            return None
        if resp.status_code != 200:
            logger.warning("ReliefWeb disaster %s returned %d", disaster_id, resp.status_code)
            return None

        try:
            body = resp.json()
        except ValueError:
            logger.warning("ReliefWeb disaster %s returned invalid JSON", disaster_id)
            return None
        records = body.get("data") if isinstance(body, dict) else None
        if not records or not isinstance(records[0], dict):
            logger.warning("ReliefWeb disaster %s returned no usable record", disaster_id)
            return None

        detail = records[0]
        if self.use_cache:
            try:
                cache_put(cache_key, detail)
            except OSError as exc:
                logger.warning("Could not cache ReliefWeb disaster %s: %s", disaster_id, exc)
        return detail


class ReliefWebAdapter(FeedAdapter):
    """Disasters whose name contains one of ``keywords``, mapped to one kind.

    Subclasses fix the kind, keywords, cap and the severity/radius defaults
    applied because ReliefWeb carries no intensity signal.
    """

    kind: AlertKind = "other"
    label: str = "disaster"
    keywords: tuple[str, ...] = ()
    max_records: int = 5
    default_severity: Severity = "high"
    default_radius_km: float = 50.0
    list_limit: int = 50

    def __init__(self, client: ReliefWebClient | None = None) -> None:
        self.client = client if client is not None else ReliefWebClient()

    @property
    def name(self) -> str:  # type: ignore[override]
        return f"reliefweb_{self.kind}"

    def matches(self, disaster_name: str) -> bool:
        lowered = disaster_name.lower()
        return any(keyword in lowered for keyword in self.keywords)

    def _fetch_alerts(self, since: timedelta) -> list[Alert]:
        # The "latest" preset is already recency-ordered; `since` is not applied.
        listing = self.client.list_disasters(limit=self.list_limit)
        candidates = [
            d for d in listing if self.matches((d.get("fields") or {}).get("name") or "")
        ][: self.max_records]
        logger.debug(
            "ReliefWeb %s: %d candidates (cap %d)", self.kind, len(candidates), self.max_records
        )

        alerts: list[Alert] = []
        for disaster in candidates:
            disaster_id = str(disaster.get("id"))
            try:
                detail = self.client.disaster_detail(disaster_id)
                alert = self._to_alert(disaster_id, detail) if detail is not None else None
            except Exception:
                # One unreadable record must not cost the rest of the kind.
                logger.warning(
                    "Skipping ReliefWeb %s disaster %s", self.kind, disaster_id, exc_info=True
                )
                continue
            if alert is not None:
                alerts.append(alert)
        return alerts

    def _resolve_position(self, fields: dict) -> tuple[float, float] | None:
        country = fields.get("primary_country") or {}
        location = country.get("location") or {}
        lat, lon = location.get("lat"), location.get("lon")
        if lat is not None and lon is not None:
            return validate_coordinate(float(lat), float(lon))
        return country_centroid(country.get("name"))

    def _to_alert(self, disaster_id: str, detail: dict) -> Alert | None:
        fields = detail.get("fields") or {}
        name = fields.get("name")
        if not name:
            return None

        try:
            position = self._resolve_position(fields)
        except (InvalidCoordinate, TypeError, ValueError) as exc:
            logger.warning("Skipping %s '%s': %s", self.kind, name, exc)
            return None
        if position is None:
            logger.warning("Skipping %s '%s' - no location data", self.kind, name)
            return None

        description = (fields.get("description") or "")[:_DESCRIPTION_LIMIT]
        if not description:
            description = f"Active {self.label} (GLIDE: {fields.get('glide') or 'N/A'})"
        observed_at = (
            _parse_event_date(fields)
            or parse_name_date(name)
            or datetime.now(timezone.utc)
        )
        return Alert(
            external_id=f"reliefweb_{self.kind}_{disaster_id}",
            kind=self.kind,
            severity=self.default_severity,
            title=name,
            description=description,
            latitude=position[0],
            longitude=position[1],
            radius_km=self.default_radius_km,
            observed_at=observed_at,
            active=(fields.get("status") or "").lower() == "ongoing",
            source="reliefweb",
        )


class FloodAdapter(ReliefWebAdapter):
    kind = "flood"
    label = "flood disaster"
    keywords = ("flood",)
    max_records = 10
    default_severity = "high"
    default_radius_km = 50.0


class FireAdapter(ReliefWebAdapter):
    kind = "fire"
    label = "wildfire"
    keywords = ("fire", "wildfire")
    max_records = 5
    default_severity = "high"
    default_radius_km = 30.0


class StormAdapter(ReliefWebAdapter):
    kind = "storm"
    label = "storm/cyclone"
    keywords = ("storm", "cyclone", "hurricane", "typhoon")
    max_records = 5
    default_severity = "critical"
    default_radius_km = 200.0


class VolcanicAdapter(ReliefWebAdapter):
    kind = "volcanic"
    label = "volcanic activity"
    keywords = ("volcano", "volcanic")
    max_records = 3
    default_severity = "high"
    default_radius_km = 40.0
