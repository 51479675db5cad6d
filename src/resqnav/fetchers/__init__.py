"""Feed adapters, one per disaster kind."""

from resqnav.fetchers.base import FeedAdapter
from resqnav.fetchers.reliefweb import (
    FireAdapter,
    FloodAdapter,
    ReliefWebAdapter,
    ReliefWebClient,
    StormAdapter,
    VolcanicAdapter,
)
from resqnav.fetchers.usgs import SeismicAdapter

__all__ = [
    "FeedAdapter",
    "FireAdapter",
    "FloodAdapter",
    "ReliefWebAdapter",
    "ReliefWebClient",
    "SeismicAdapter",
    "StormAdapter",
    "VolcanicAdapter",
]
