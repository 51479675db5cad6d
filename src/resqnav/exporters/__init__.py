"""Exporters for alerts and route recommendations."""

from resqnav.exporters.geojson_export import export_geojson
from resqnav.exporters.json_export import export_json

__all__ = ["export_geojson", "export_json"]
