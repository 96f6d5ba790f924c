"""Transfer news and rumours (``assets/data/transfers.json``).

The source is picked in order: a remote JSON feed, a local seed file, the
built-in demo items. Whatever the source, both the ``news`` and the
``rumor`` tab end up with at least one entry.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .config import SITE_URL, AppConfig
from .football_data import safe_str
from .http import fetch_json
from .storage import iso_now, isoformat_utc, list_items, write_json

LOGGER = logging.getLogger(__name__)

TRANSFERS_FILENAME = "transfers.json"
SEED_FILENAME = "transfers-seed.json"
DEFAULT_SOURCE = "NetThud Desk"
RUMOR_LABELS = frozenset({"rumor", "rumours", "rumors"})


def normalize_type(value: Any) -> str:
    """``rumor`` for rumour spellings, ``news`` for everything else."""

    return "rumor" if safe_str(value).lower() in RUMOR_LABELS else "news"


def normalize_item(item: Any) -> Optional[Dict[str, str]]:
    if not isinstance(item, Mapping):
        return None

    if item.get("title"):
        return {
            "type": normalize_type(item.get("type") or item.get("kind") or item.get("status")),
            "title": safe_str(item.get("title")),
            "source": safe_str(item.get("source") or DEFAULT_SOURCE),
            "publishedAt": safe_str(item.get("publishedAt") or item.get("date") or iso_now()),
            "url": safe_str(item.get("url") or SITE_URL),
        }

    # Legacy rows: {player, from, to, fee, status}
    player = safe_str(item.get("player") or "Player")
    origin = safe_str(item.get("from") or "?")
    target = safe_str(item.get("to") or "?")
    fee = safe_str(item.get("fee") or "")
    title = f"{player}: {origin} → {target}"
    if fee:
        title += f" ({fee})"
    return {
        "type": normalize_type(item.get("status")),
        "title": title,
        "source": DEFAULT_SOURCE,
        "publishedAt": safe_str(item.get("publishedAt") or iso_now()),
        "url": safe_str(item.get("url") or SITE_URL),
    }


def normalize_items(items: Iterable[Any]) -> List[Dict[str, str]]:
    normalized: List[Dict[str, str]] = []
    for item in items or []:
        entry = normalize_item(item)
        if entry and entry["title"]:
            normalized.append(entry)
    return normalized


def demo_items(now: Optional[datetime] = None) -> List[Dict[str, str]]:
    now = now or datetime.now(timezone.utc)

    def minutes_ago(minutes: int) -> str:
        return isoformat_utc(now - timedelta(minutes=minutes))

    return [
        {
            "type": "news",
            "title": "Midfielder Y: Club C → Club D (€18m) — agreement advanced",
            "source": DEFAULT_SOURCE,
            "publishedAt": minutes_ago(35),
            "url": SITE_URL,
        },
        {
            "type": "news",
            "title": "Winger Z: medical scheduled after fee agreed in principle",
            "source": DEFAULT_SOURCE,
            "publishedAt": minutes_ago(85),
            "url": SITE_URL,
        },
        {
            "type": "rumor",
            "title": "Forward X: Club A → Club B (loan) — agent contact reported",
            "source": DEFAULT_SOURCE,
            "publishedAt": minutes_ago(55),
            "url": SITE_URL,
        },
        {
            "type": "rumor",
            "title": "Striker linked with two clubs as January shortlist narrows",
            "source": DEFAULT_SOURCE,
            "publishedAt": minutes_ago(140),
            "url": SITE_URL,
        },
    ]


def ensure_both_types(items: List[Dict[str, str]]) -> List[Dict[str, str]]:
    has_news = any(item["type"] == "news" for item in items)
    has_rumor = any(item["type"] == "rumor" for item in items)
    if has_news and has_rumor:
        return items
    filled = list(items)
    fallback = demo_items()
    if not has_news:
        filled.extend(item for item in fallback if item["type"] == "news")
    if not has_rumor:
        filled.extend(item for item in fallback if item["type"] == "rumor")
    return filled


def load_raw_items(config: AppConfig) -> Tuple[str, List[Any]]:
    """Return ``(mode, raw_items)`` for the first available source."""

    feed_url = config.transfers.feed_url
    if feed_url:
        payload = fetch_json(feed_url)
        return "feed", list_items(payload)

    seed_path = config.data_dir / SEED_FILENAME
    if seed_path.exists():
        payload = json.loads(seed_path.read_text(encoding="utf-8"))
        return "seed", list_items(payload)

    return "demo", demo_items()


def build_transfers_payload(mode: str, raw_items: Iterable[Any], max_items: int) -> Dict[str, Any]:
    items = ensure_both_types(normalize_items(raw_items))
    items.sort(key=lambda item: item["publishedAt"], reverse=True)
    return {"generatedAt": iso_now(), "mode": mode, "items": items[:max_items]}


def generate_transfers(config: AppConfig) -> Path:
    output = config.data_dir / TRANSFERS_FILENAME
    mode, raw_items = load_raw_items(config)
    payload = build_transfers_payload(mode, raw_items, config.transfers.max_items)
    write_json(output, payload)
    LOGGER.info("Wrote %s (%d items) mode=%s", output, len(payload["items"]), mode)
    return output
