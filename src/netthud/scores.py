"""Latest results and live scores (``assets/data/scores.json``)."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .config import AppConfig, ConfigurationError
from .football_data import (
    FootballDataApi,
    competition_of,
    date_window,
    safe_str,
    team_label,
    utc_today,
)
from .storage import iso_now, isoformat_utc, write_json

LOGGER = logging.getLogger(__name__)

SCORES_FILENAME = "scores.json"
SUPPORTED_PROVIDERS = ("football-data",)
KEEP_STATUSES = frozenset({"FINISHED", "IN_PLAY", "PAUSED"})
STATUS_LABELS: Mapping[str, str] = {
    "FINISHED": "FT",
    "IN_PLAY": "LIVE",
    "PAUSED": "HT",
    "TIMED": "UP",
    "SCHEDULED": "UP",
}
STATUS_RANK: Mapping[str, int] = {"LIVE": 0, "HT": 1}


def map_status(status: Any) -> str:
    value = safe_str(status)
    return STATUS_LABELS.get(value, value)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _pair(score: Any, key: str) -> Optional[str]:
    part = score.get(key) if isinstance(score, Mapping) else None
    if not isinstance(part, Mapping):
        return None
    home, away = part.get("home"), part.get("away")
    if _is_number(home) and _is_number(away):
        return f"{home}–{away}"
    return None


def format_score(match: Mapping[str, Any]) -> str:
    """Full-time score, else half-time score, else an empty string."""

    score = match.get("score")
    return _pair(score, "fullTime") or _pair(score, "halfTime") or ""


def normalize_match(match: Mapping[str, Any]) -> Dict[str, str]:
    kickoff = safe_str(match.get("utcDate") or "")
    return {
        "league": safe_str(competition_of(match).get("name") or ""),
        "home": team_label(match.get("homeTeam")),
        "away": team_label(match.get("awayTeam")),
        "score": format_score(match),
        "status": map_status(match.get("status")),
        "when": kickoff[:10],
        "kickoffUTC": kickoff,
    }


def build_scores_payload(matches: List[Mapping[str, Any]]) -> Dict[str, Any]:
    kept = [match for match in matches if safe_str(match.get("status")) in KEEP_STATUSES]
    items = [normalize_match(match) for match in kept]
    items.sort(key=lambda item: STATUS_RANK.get(item["status"], 2))
    return {"updated": iso_now(), "mode": "football-data", "items": items}


def fetch_scores(config: AppConfig, *, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Yesterday's and today's finished or running matches."""

    settings = config.football_data
    if settings.provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(f"Unsupported provider: {settings.provider}")
    api = FootballDataApi(settings.require_token(), base_url=settings.base_url)
    date_from, date_to = date_window(utc_today(now), -1)
    matches = api.get_matches(date_from, date_to)
    return build_scores_payload(matches)


def demo_scores(now: Optional[datetime] = None) -> List[Dict[str, str]]:
    """Placeholder matches for when the provider is rate limited or down."""

    now = now or datetime.now(timezone.utc)
    minute = (now.minute % 90) + 1

    def kickoff(minutes_ago: int) -> str:
        return isoformat_utc(now - timedelta(minutes=minutes_ago))

    final_kickoff = kickoff(240)
    return [
        {
            "league": "Premier League",
            "home": "Arsenal",
            "away": "Liverpool",
            "status": "LIVE",
            "score": "1–0",
            "kickoffUTC": kickoff(20),
            "when": f"LIVE • {minute}'",
            "highlightsUrl": "",
        },
        {
            "league": "La Liga",
            "home": "Real Madrid",
            "away": "Barcelona",
            "status": "LIVE",
            "score": "0–0",
            "kickoffUTC": kickoff(35),
            "when": f"LIVE • {max(1, minute - 7)}'",
            "highlightsUrl": "",
        },
        {
            "league": "Süper Lig",
            "home": "Fenerbahçe",
            "away": "Galatasaray",
            "status": "HT",
            "score": "1–1",
            "kickoffUTC": kickoff(60),
            "when": "HT",
            "highlightsUrl": "",
        },
        {
            "league": "Bundesliga",
            "home": "Bayern Munich",
            "away": "Borussia Dortmund",
            "status": "LIVE",
            "score": "1–1",
            "kickoffUTC": kickoff(90),
            "when": f"LIVE • {max(1, minute - 33)}'",
            "highlightsUrl": "",
        },
        {
            "league": "Ligue 1",
            "home": "PSG",
            "away": "Marseille",
            "status": "FT",
            "score": "3–2",
            "kickoffUTC": final_kickoff,
            "when": final_kickoff[:10],
            "highlightsUrl": "",
        },
    ]


def build_demo_payload(now: Optional[datetime] = None) -> Dict[str, Any]:
    return {"updated": iso_now(), "mode": "demo", "items": demo_scores(now)}


def generate_scores(config: AppConfig, *, fallback_demo: bool = False) -> Path:
    output = config.data_dir / SCORES_FILENAME
    try:
        payload = fetch_scores(config)
    except Exception as exc:
        if not fallback_demo:
            raise
        LOGGER.warning("Scores provider failed, writing demo scores instead: %s", exc)
        payload = build_demo_payload()
    write_json(output, payload)
    LOGGER.info("Wrote %s (%d items)", output, len(payload["items"]))
    return output


def generate_live_demo(config: AppConfig) -> Path:
    output = config.data_dir / SCORES_FILENAME
    payload = build_demo_payload()
    write_json(output, payload)
    LOGGER.info("Wrote %s (%d items) mode=demo", output, len(payload["items"]))
    return output
