"""Reading and writing the JSON documents below ``assets/data``."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)


def isoformat_utc(value: datetime) -> str:
    """Format like JavaScript's ``toISOString``: ``2026-01-20T15:00:00.000Z``."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_now() -> str:
    return isoformat_utc(datetime.now(timezone.utc))


def write_json(path: Path, payload: Any) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    path.write_text(text + "\n", encoding="utf-8")
    return path


def read_json_safe(path: Path) -> Optional[Any]:
    """Return the parsed document, or ``None`` if it is missing or invalid."""

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        LOGGER.debug("%s does not exist", path)
        return None
    except (OSError, ValueError) as exc:
        LOGGER.warning("Could not read %s: %s", path, exc)
        return None


def list_items(payload: Any, *keys: str) -> list:
    """Accept either a bare list or an object holding the list under ``keys``."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in keys or ("items",):
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return []
