"""Exception hierarchy for the aggregation and routing core."""

from __future__ import annotations


class ResQNavError(Exception):
    """Base class for all resqnav errors."""


class FetchError(ResQNavError):
    """A feed source failed: network, timeout, HTTP status or parse error.

    Recovered inside the adapter; carried on its ``FeedResult`` instead of
    being raised to the orchestrator.
    """

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class InvalidCoordinate(ResQNavError, ValueError):
    """Latitude outside [-90, 90], longitude outside [-180, 180], or NaN."""

    def __init__(self, latitude: float, longitude: float) -> None:
        super().__init__(f"Invalid coordinate ({latitude}, {longitude})")
        self.latitude = latitude
        self.longitude = longitude


class NoSheltersAvailable(ResQNavError, LookupError):
    """Nearest-shelter lookup was given nothing to choose from."""

    def __init__(self, message: str = "No shelters available") -> None:
        super().__init__(message)


class AggregateFetchFailure(ResQNavError):
    """Every feed adapter failed during one aggregation run."""

    def __init__(self, failures: dict[str, str]) -> None:
        self.failures = dict(failures)
        super().__init__(self.summary())

    def summary(self) -> str:
        if not self.failures:
            return "No disaster feeds configured"
        details = "; ".join(f"{name}: {reason}" for name, reason in self.failures.items())
        return f"All {len(self.failures)} disaster feeds failed ({details})"
