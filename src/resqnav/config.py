"""Configuration model for alert aggregation and routing."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

DEFAULT_USER_AGENT = "ResQNav/0.4 (disaster alert aggregation; contact@resqnav.app)"


class ResQNavConfig(BaseSettings):
    """All configurable parameters for feed aggregation, storage and routing.

    Values can be set via constructor arguments, environment variables
    prefixed with RESQNAV_, or defaults.
    """

    model_config = {"env_prefix": "RESQNAV_"}

    days_lookback: int = Field(
        default=30, ge=1, le=365, description="Seismic lookback window in days."
    )
    min_magnitude: float = Field(
        default=4.0, ge=0.0, le=10.0, description="Minimum earthquake magnitude."
    )
    seismic_limit: int = Field(
        default=100, ge=1, le=20000, description="Maximum USGS events per fetch."
    )
    request_timeout: int = Field(
        default=30, ge=1, le=300, description="Per-request HTTP timeout in seconds."
    )
    fetch_timeout: float = Field(
        default=90.0, gt=0.0, description="Overall aggregation timeout in seconds."
    )
    max_workers: int = Field(
        default=5, ge=1, le=32, description="Concurrent feed adapter workers."
    )
    reap_after_days: int = Field(
        default=7, ge=1, description="Delete inactive alerts older than this many days."
    )
    detour_offset_deg: float = Field(
        default=0.01, gt=0.0, le=5.0, description="Lateral detour offset in degrees."
    )
    sample_spacing_km: float = Field(
        default=1.0, gt=0.0, description="Max spacing between scored route vertices."
    )
    reliefweb_appname: str = Field(
        default="resqnav", description="ReliefWeb API appname parameter."
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT, description="User-Agent sent to feed sources."
    )
    db_path: Path = Field(
        default=Path("resqnav.db"), description="SQLite alert store path."
    )
    shelters_file: Path | None = Field(
        default=None, description="CSV file with shelter records."
    )
    cache_enabled: bool = Field(
        default=True, description="Enable disk caching for ReliefWeb detail documents."
    )
