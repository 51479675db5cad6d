"""JSON exporter for alerts."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from resqnav.models import Alert


def alert_to_dict(alert: Alert) -> dict[str, Any]:
    """Plain-JSON representation of an alert (ISO 8601 ``observed_at``)."""
    data = asdict(alert)
    data["observed_at"] = alert.observed_at.isoformat()
    return data


def export_json(
    alerts: list[Alert],
    output_path: Path,
    indent: int = 2,
) -> Path:
    """Export alerts to a JSON array file."""
    data = [alert_to_dict(a) for a in alerts]
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)
    return output_path
