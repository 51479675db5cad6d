"""Shelter loading and nearest-shelter selection."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

import pandas as pd

from resqnav.errors import InvalidCoordinate, NoSheltersAvailable
from resqnav.geo import degree_distance, distance_km, validate_coordinate
from resqnav.models import Coordinate, Shelter

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "name", "latitude", "longitude", "capacity")


def nearest_shelter(origin: Coordinate, shelters: Sequence[Shelter]) -> Shelter:
    """Shelter closest to *origin* by Euclidean distance on degrees.

    A coarse pick; the route engine measures the real distance afterwards.
    """
    if not shelters:
        raise NoSheltersAvailable()
    return min(shelters, key=lambda s: degree_distance(origin, s.position))


def operational_shelters(shelters: Iterable[Shelter]) -> list[Shelter]:
    """Operational shelters ordered by name."""
    return sorted((s for s in shelters if s.operational), key=lambda s: s.name)


def sort_by_distance(
    origin: Coordinate, shelters: Iterable[Shelter]
) -> list[tuple[Shelter, float]]:
    """``(shelter, great-circle km)`` pairs, nearest first."""
    pairs = [(s, distance_km(origin, s.position)) for s in shelters]
    pairs.sort(key=lambda pair: pair[1])
    return pairs


def shelters_in_area(
    shelters: Iterable[Shelter],
    min_lat: float,
    max_lat: float,
    min_lon: float,
    max_lon: float,
) -> list[Shelter]:
    """Operational shelters inside a lat/lon bounding box (edges inclusive)."""
    return [
        s
        for s in shelters
        if s.operational
        and min_lat <= s.latitude <= max_lat
        and min_lon <= s.longitude <= max_lon
    ]


def _text(value: object) -> str:
    return "" if pd.isna(value) else str(value).strip()


def _as_int(value: object) -> int:
    if pd.isna(value) or str(value).strip() == "":
        return 0
    return int(float(value))


def _as_bool(value: object) -> bool:
    if pd.isna(value):
        return True
    if isinstance(value, str):
        return value.strip().lower() not in {"0", "false", "no", "n", "closed"}
    return bool(value)


def load_shelters(path: str | Path) -> list[Shelter]:
    """Read shelters from a CSV file.

    Required columns: id, name, latitude, longitude, capacity. Optional:
    current_occupancy, operational, address, contact_number, facilities
    (comma-separated) and shelter_type. Rows with unusable coordinates are
    skipped.
    """
    df = pd.read_csv(path, dtype=str)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Shelter file {path} is missing columns: {', '.join(missing)}")

    shelters: list[Shelter] = []
    for row_num, row in enumerate(df.to_dict("records"), start=2):
        try:
            latitude, longitude = validate_coordinate(
                float(row["latitude"]), float(row["longitude"])
            )
            capacity = _as_int(row["capacity"])
            occupancy = _as_int(row.get("current_occupancy", 0))
        except (InvalidCoordinate, TypeError, ValueError) as exc:
            logger.warning("Skipping shelter on row %d (%s): %s", row_num, row.get("name"), exc)
            continue

        facilities = _text(row.get("facilities", ""))
        shelters.append(
            Shelter(
                id=_text(row["id"]),
                name=_text(row["name"]),
                latitude=latitude,
                longitude=longitude,
                capacity=capacity,
                current_occupancy=occupancy,
                operational=_as_bool(row.get("operational", True)),
                address=_text(row.get("address", "")),
                contact_number=_text(row.get("contact_number", "")),
                facilities=tuple(f.strip() for f in facilities.split(",") if f.strip()),
                shelter_type=_text(row.get("shelter_type", "")),
            )
        )

    logger.info("Loaded %d shelters from %s", len(shelters), path)
    return shelters
