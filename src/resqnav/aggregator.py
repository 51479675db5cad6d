"""Concurrent fan-out over feed adapters with partial-failure isolation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import timedelta

from requests import Session

from resqnav.config import ResQNavConfig
from resqnav.errors import AggregateFetchFailure
from resqnav.fetchers import (
    FeedAdapter,
    FireAdapter,
    FloodAdapter,
    ReliefWebClient,
    SeismicAdapter,
    StormAdapter,
    VolcanicAdapter,
)
from resqnav.http import create_session
from resqnav.models import AggregationResult, Alert, FeedResult

logger = logging.getLogger(__name__)


def build_adapters(
    config: ResQNavConfig,
    session: Session | None = None,
) -> list[FeedAdapter]:
    """Construct the five feed adapters sharing one session and one ReliefWeb client."""
    if session is None:
        session = create_session(user_agent=config.user_agent, pool_size=config.max_workers)
    reliefweb = ReliefWebClient(
        session=session,
        appname=config.reliefweb_appname,
        timeout=config.request_timeout,
        use_cache=config.cache_enabled,
    )
    return [
        SeismicAdapter(
            session=session,
            min_magnitude=config.min_magnitude,
            limit=config.seismic_limit,
            timeout=config.request_timeout,
        ),
        FloodAdapter(reliefweb),
        FireAdapter(reliefweb),
        StormAdapter(reliefweb),
        VolcanicAdapter(reliefweb),
    ]


def merge_alerts(batches: Sequence[Sequence[Alert]]) -> tuple[Alert, ...]:
    """Concatenate batches and keep one alert per ``external_id``.

    A later duplicate replaces the earlier one but keeps its position.
    """
    merged: dict[str, Alert] = {}
    for batch in batches:
        for alert in batch:
            merged[alert.external_id] = alert
    return tuple(merged.values())


class AggregationOrchestrator:
    """Run every adapter concurrently and merge what succeeded."""

    def __init__(self, adapters: Sequence[FeedAdapter], max_workers: int | None = None) -> None:
        self.adapters = list(adapters)
        self.max_workers = max_workers or max(len(self.adapters), 1)

    def fetch_all(self, since: timedelta, timeout: float | None = None) -> AggregationResult:
        """Fetch all feeds, waiting for every adapter (or until *timeout* seconds).

        Adapters that fail, raise, or do not finish in time contribute no
        alerts and are listed in ``failures``. Nothing is raised when all of
        them fail; the result carries an ``AggregateFetchFailure`` instead.
        """
        if not self.adapters:
            logger.warning("No feed adapters configured")
            return AggregationResult(error=AggregateFetchFailure({}))

        logger.info(
            "Fetching %d disaster feeds (lookback %s)...", len(self.adapters), since
        )
        executor = ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="resqnav-feed"
        )
        try:
            futures: list[Future[FeedResult]] = [
                executor.submit(adapter.fetch, since) for adapter in self.adapters
            ]
            _, pending = wait(futures, timeout=timeout)
            for future in pending:
                future.cancel()
        finally:
            # Running threads cannot be interrupted; their results are dropped.
            executor.shutdown(wait=False, cancel_futures=True)

        batches: list[tuple[Alert, ...]] = []
        succeeded: list[str] = []
        failures: dict[str, str] = {}
        for adapter, future in zip(self.adapters, futures):
            name = adapter.name
            if future in pending:
                logger.warning("Feed %s did not finish within %.1fs", name, timeout)
                failures[name] = "timed out"
                continue
            if future.cancelled():
                failures[name] = "cancelled"
                continue
            exc = future.exception()
            if exc is not None:
                logger.error("Feed %s raised %r", name, exc, exc_info=exc)
                failures[name] = f"{type(exc).__name__}: {exc}"
                continue

            result = future.result()
            if result.error is not None:
                failures[name] = result.error.message
                continue
            batches.append(result.alerts)
            succeeded.append(name)
            logger.info("Feed %s: %d alerts", name, len(result.alerts))

        alerts = merge_alerts(batches)
        error = AggregateFetchFailure(failures) if not succeeded else None
        if error is not None:
            logger.error("%s", error.summary())
        else:
            logger.info(
                "Aggregated %d alerts from %d/%d feeds",
                len(alerts),
                len(succeeded),
                len(self.adapters),
            )
        return AggregationResult(
            alerts=alerts,
            succeeded=tuple(succeeded),
            failures=failures,
            error=error,
        )
