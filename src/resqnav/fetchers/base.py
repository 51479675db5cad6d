"""Feed adapter contract shared by every disaster data source."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import timedelta

from requests import RequestException

from resqnav.errors import FetchError
from resqnav.models import Alert, AlertKind, FeedResult

logger = logging.getLogger(__name__)


class FeedAdapter(ABC):
    """One external source mapped into canonical alerts of a single kind.

    Subclasses implement :meth:`_fetch_alerts` and may raise freely;
    :meth:`fetch` converts any failure into a ``FeedResult`` carrying a
    ``FetchError`` and no alerts.
    """

    name: str = "feed"
    kind: AlertKind = "other"

    def fetch(self, since: timedelta) -> FeedResult:
        try:
            alerts = self._fetch_alerts(since)
        except FetchError as exc:
            logger.warning("Feed %s failed: %s", self.name, exc.message)
            return FeedResult(source=self.name, kind=self.kind, error=exc)
        except RequestException as exc:
            logger.warning("Feed %s request failed: %s", self.name, exc)
            return FeedResult(
                source=self.name,
                kind=self.kind,
                error=FetchError(self.name, f"request failed: {exc}"),
            )
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Feed %s returned an unexpected payload", self.name, exc_info=True)
            return FeedResult(
                source=self.name,
                kind=self.kind,
                error=FetchError(self.name, f"unexpected payload: {exc!r}"),
            )
        except Exception as exc:
            logger.warning("Feed %s failed unexpectedly", self.name, exc_info=True)
            return FeedResult(
                source=self.name,
                kind=self.kind,
                error=FetchError(self.name, f"{type(exc).__name__}: {exc}"),
            )

        logger.info("Feed %s produced %d alerts", self.name, len(alerts))
        return FeedResult(source=self.name, kind=self.kind, alerts=tuple(alerts))

    @abstractmethod
    def _fetch_alerts(self, since: timedelta) -> list[Alert]:
        """Fetch and map raw records; may raise on transport or parse errors."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
