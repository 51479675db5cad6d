"""File-based JSON document cache with TTL expiry.

Feed adapters run on worker threads, so entries are written to a
temporary file and moved into place; readers never see a half-written
document.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
import time
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_CACHE_DIR = Path.home() / ".cache" / "resqnav"

# TTLs in seconds
RELIEFWEB_DETAIL_TTL = 3600  # 1 hour

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if needed."""
    _CACHE_DIR.mkdir(parents=True, exist_ok=True)
    return _CACHE_DIR


def _entry_path(key: str) -> Path:
    return get_cache_dir() / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"


def cache_get(key: str, max_age_seconds: int) -> Any | None:
    """Return the cached document for *key* if younger than the TTL, else None."""
    path = _entry_path(key)
    if not path.exists():
        return None

    try:
        entry = json.loads(path.read_text(encoding="utf-8"))
        stored_at = float(entry["stored_at"])
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError):
        logger.debug("Discarding unreadable cache entry %s", key)
        return None

    if time.time() - stored_at > max_age_seconds:
        logger.debug("Cache expired for %s", key)
        return None

    logger.debug("Cache hit for %s", key)
    return entry.get("document")


def cache_put(key: str, document: Any) -> None:
    """Store a JSON-serializable document under *key*."""
    path = _entry_path(key)
    tmp_path = path.with_name(f"{path.name}.{os.getpid()}.{threading.get_ident()}.tmp")
    tmp_path.write_text(
        json.dumps({"stored_at": time.time(), "document": document}),
        encoding="utf-8",
    )
    os.replace(tmp_path, path)
    logger.debug("Cached %s", key)
