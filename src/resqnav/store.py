"""Alert persistence: upsert by external id, active lifecycle, age-based reaping.

Both stores serialize writers behind a lock, so concurrent ``upsert_all``
calls are applied one after another and the last call to arrive wins for
any shared ``external_id``. Naive timestamps are taken to be UTC.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Protocol

from sqlalchemy import BigInteger, Boolean, Float, Index, String, create_engine, delete, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column
from sqlalchemy.pool import StaticPool

from resqnav.models import Alert

logger = logging.getLogger(__name__)

DEFAULT_REAP_AGE = timedelta(days=7)


class AlertStore(Protocol):
    """Storage contract consumed by the refresh pipeline and route consumers."""

    def upsert_all(self, alerts: Iterable[Alert]) -> int: ...

    def active_alerts(self) -> list[Alert]: ...

    def all_alerts(self) -> list[Alert]: ...

    def alerts_by_severity(self, severity: str) -> list[Alert]: ...

    def get(self, external_id: str) -> Alert | None: ...

    def delete(self, external_id: str) -> bool: ...

    def reap_inactive_older_than(
        self, threshold: timedelta = DEFAULT_REAP_AGE, now: datetime | None = None
    ) -> int: ...


def as_utc(moment: datetime) -> datetime:
    """Attach UTC to a naive datetime; convert an aware one to UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def _newest_first(alerts: Iterable[Alert]) -> list[Alert]:
    return sorted(alerts, key=lambda a: as_utc(a.observed_at), reverse=True)


def _cutoff(threshold: timedelta, now: datetime | None) -> datetime:
    if now is None:
        now = datetime.now(timezone.utc)
    return as_utc(now) - threshold


class MemoryAlertStore:
    """Process-local store keyed by ``external_id``."""

    def __init__(self, alerts: Iterable[Alert] = ()) -> None:
        self._alerts: dict[str, Alert] = {}
        self._lock = threading.Lock()
        self.upsert_all(alerts)

    def __len__(self) -> int:
        return len(self._alerts)

    def upsert_all(self, alerts: Iterable[Alert]) -> int:
        batch = list(alerts)
        with self._lock:
            for alert in batch:
                self._alerts[alert.external_id] = alert
        return len(batch)

    def active_alerts(self) -> list[Alert]:
        with self._lock:
            return _newest_first(a for a in self._alerts.values() if a.active)

    def all_alerts(self) -> list[Alert]:
        with self._lock:
            return _newest_first(self._alerts.values())

    def alerts_by_severity(self, severity: str) -> list[Alert]:
        return [a for a in self.active_alerts() if a.severity == severity]

    def get(self, external_id: str) -> Alert | None:
        with self._lock:
            return self._alerts.get(external_id)

    def delete(self, external_id: str) -> bool:
        with self._lock:
            return self._alerts.pop(external_id, None) is not None

    def reap_inactive_older_than(
        self, threshold: timedelta = DEFAULT_REAP_AGE, now: datetime | None = None
    ) -> int:
        cutoff = _cutoff(threshold, now)
        with self._lock:
            stale = [
                key
                for key, alert in self._alerts.items()
                if not alert.active and as_utc(alert.observed_at) < cutoff
            ]
            for key in stale:
                del self._alerts[key]
        if stale:
            logger.info("Reaped %d inactive alerts older than %s", len(stale), threshold)
        return len(stale)


class Base(DeclarativeBase):
    """Declarative base for the alert store tables."""


class AlertRow(Base):
    __tablename__ = "alerts"
    __table_args__ = (Index("idx_alerts_active_observed", "active", "observed_at"),)

    external_id: Mapped[str] = mapped_column(String, primary_key=True)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    severity: Mapped[str] = mapped_column(String(16), nullable=False)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    radius_km: Mapped[float] = mapped_column(Float, nullable=False)
    # epoch milliseconds, UTC
    observed_at: Mapped[int] = mapped_column(BigInteger, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False)
    source: Mapped[str] = mapped_column(String, nullable=False, default="")


_UPDATED_COLUMNS = tuple(
    c.name for c in AlertRow.__table__.columns if c.name != "external_id"
)


def _to_epoch_ms(moment: datetime) -> int:
    return int(as_utc(moment).timestamp() * 1000)


def _to_values(alert: Alert) -> dict:
    return {
        "external_id": alert.external_id,
        "kind": alert.kind,
        "severity": alert.severity,
        "title": alert.title,
        "description": alert.description,
        "latitude": alert.latitude,
        "longitude": alert.longitude,
        "radius_km": alert.radius_km,
        "observed_at": _to_epoch_ms(alert.observed_at),
        "active": alert.active,
        "source": alert.source,
    }


def _from_row(row: AlertRow) -> Alert:
    return Alert(
        external_id=row.external_id,
        kind=row.kind,
        severity=row.severity,
        title=row.title,
        description=row.description,
        latitude=row.latitude,
        longitude=row.longitude,
        radius_km=row.radius_km,
        observed_at=datetime.fromtimestamp(row.observed_at / 1000, tz=timezone.utc),
        active=row.active,
        source=row.source,
    )


def _engine_url(path: str) -> str:
    return "sqlite://" if path == ":memory:" else f"sqlite:///{path}"


class SqliteAlertStore:
    """SQLite-backed store through SQLAlchemy; ``":memory:"`` works for tests."""

    def __init__(self, path: str | Path = ":memory:") -> None:
        self.path = str(path)
        self._lock = threading.Lock()
        engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if self.path == ":memory:":
            # every session must see the same in-memory database
            engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(_engine_url(self.path), **engine_kwargs)
        Base.metadata.create_all(self.engine)
        logger.debug("Opened alert store at %s", self.path)

    def close(self) -> None:
        with self._lock:
            self.engine.dispose()

    def __enter__(self) -> SqliteAlertStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _select(self, *criteria) -> list[Alert]:
        stmt = select(AlertRow).order_by(AlertRow.observed_at.desc())
        if criteria:
            stmt = stmt.where(*criteria)
        with self._lock, Session(self.engine) as session:
            return [_from_row(row) for row in session.scalars(stmt)]

    def upsert_all(self, alerts: Iterable[Alert]) -> int:
        rows = [_to_values(a) for a in alerts]
        if not rows:
            return 0
        stmt = sqlite_insert(AlertRow)
        stmt = stmt.on_conflict_do_update(
            index_elements=[AlertRow.external_id],
            set_={name: stmt.excluded[name] for name in _UPDATED_COLUMNS},
        )
        with self._lock, self.engine.begin() as conn:
            conn.execute(stmt, rows)
        return len(rows)

    def active_alerts(self) -> list[Alert]:
        return self._select(AlertRow.active.is_(True))

    def all_alerts(self) -> list[Alert]:
        return self._select()

    def alerts_by_severity(self, severity: str) -> list[Alert]:
        return self._select(AlertRow.severity == severity, AlertRow.active.is_(True))

    def get(self, external_id: str) -> Alert | None:
        with self._lock, Session(self.engine) as session:
            row = session.get(AlertRow, external_id)
            return _from_row(row) if row is not None else None

    def delete(self, external_id: str) -> bool:
        stmt = delete(AlertRow).where(AlertRow.external_id == external_id)
        with self._lock, self.engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount > 0

    def reap_inactive_older_than(
        self, threshold: timedelta = DEFAULT_REAP_AGE, now: datetime | None = None
    ) -> int:
        cutoff_ms = _to_epoch_ms(_cutoff(threshold, now))
        stmt = delete(AlertRow).where(
            AlertRow.active.is_(False), AlertRow.observed_at < cutoff_ms
        )
        with self._lock, self.engine.begin() as conn:
            deleted = conn.execute(stmt).rowcount
        if deleted:
            logger.info("Reaped %d inactive alerts older than %s", deleted, threshold)
        return deleted
