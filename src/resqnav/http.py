"""HTTP session shared by every feed adapter of a refresh."""

from __future__ import annotations

from requests import Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from resqnav.config import DEFAULT_USER_AGENT

# Rate limiting and transient upstream failures; anything else is final.
RETRYABLE_STATUSES: tuple[int, ...] = (429, 500, 502, 503, 504)


def create_session(
    retries: int = 3,
    backoff_factor: float = 0.5,
    status_forcelist: tuple[int, ...] = RETRYABLE_STATUSES,
    user_agent: str = DEFAULT_USER_AGENT,
    pool_size: int = 10,
) -> Session:
    """Build a session whose GETs back off and retry on ``status_forcelist``.

    With the defaults a failing request is attempted four times, sleeping
    0s, 1s and 2s in between, or as long as a ``Retry-After`` header asks.
    The last response is returned rather than raised, so adapters decide
    what a bad status means. ``pool_size`` should cover the number of
    adapters fetching concurrently through this session.

    ReliefWeb rejects anonymous clients, hence the explicit User-Agent.
    """
    policy = Retry(
        total=retries,
        backoff_factor=backoff_factor,
        status_forcelist=status_forcelist,
        allowed_methods=frozenset({"GET"}),
        respect_retry_after_header=True,
        raise_on_status=False,
    )
    session = Session()
    session.headers["User-Agent"] = user_agent
    session.headers["Accept"] = "application/json"
    for prefix in ("https://", "http://"):
        session.mount(
            prefix,
            HTTPAdapter(max_retries=policy, pool_connections=pool_size, pool_maxsize=pool_size),
        )
    return session
