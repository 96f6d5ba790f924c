"""Upcoming fixtures with win/draw/loss estimates (``assets/data/upcoming.json``)."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
from zoneinfo import ZoneInfo

import requests
from dateutil import parser

from .config import AppConfig, ConfigurationError
from .football_data import (
    FootballDataApi,
    ProviderError,
    competition_of,
    safe_str,
    team_label,
    utc_today,
)
from .probability import NEUTRAL_HDA, HDA, compute_hda, ratings_from_standings
from .storage import iso_now, write_json

LOGGER = logging.getLogger(__name__)

UPCOMING_FILENAME = "upcoming.json"
EASTERN_TZ = ZoneInfo("America/New_York")
KEEP_STATUSES = frozenset({"SCHEDULED", "TIMED", "POSTPONED"})
EXCLUDE_STATUSES = frozenset({"IN_PLAY", "PAUSED", "FINISHED", "SUSPENDED", "LIVE"})


def format_eastern(value: str) -> str:
    """``2026-01-20T20:00:00Z`` -> ``Jan 20 • 3:00 PM ET``; empty when unparseable."""

    if not value:
        return ""
    try:
        parsed = parser.isoparse(value)
    except (TypeError, ValueError, OverflowError):
        return ""
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo("UTC"))
    local = parsed.astimezone(EASTERN_TZ)
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day} • {hour}:{local:%M} {local:%p} ET"


def upcoming_window(days: int, *, now: Optional[datetime] = None) -> tuple[str, str]:
    """Today (UTC) through today + ``days`` + 1.

    The extra day keeps the last requested day even if ``dateTo`` is treated
    as exclusive.
    """

    start = utc_today(now)
    end = start + timedelta(days=days + 1)
    return start.isoformat(), end.isoformat()


def is_upcoming(match: Mapping[str, Any], allowed_codes: Iterable[str]) -> bool:
    status = safe_str(match.get("status"))
    if status in EXCLUDE_STATUSES or status not in KEEP_STATUSES:
        return False
    code = safe_str(competition_of(match).get("code"))
    if not code:
        return True
    return code in set(allowed_codes)


def collect_ratings(
    api: FootballDataApi,
    codes: Iterable[str],
) -> Dict[str, Dict[Any, float]]:
    """Standings ratings per competition; failing competitions are left out."""

    ratings: Dict[str, Dict[Any, float]] = {}
    for code in codes:
        try:
            rows = api.get_standings(code)
        except (ProviderError, requests.RequestException) as exc:
            LOGGER.warning("Standings for %s unavailable: %s", code, exc)
            continue
        ratings[code] = ratings_from_standings(rows)
    return ratings


def estimate_match(
    match: Mapping[str, Any],
    ratings: Mapping[str, Mapping[Any, float]],
) -> HDA:
    code = safe_str(competition_of(match).get("code"))
    table = ratings.get(code)
    if not table:
        return NEUTRAL_HDA
    home_team = match.get("homeTeam") or {}
    away_team = match.get("awayTeam") or {}
    home_rating = table.get(home_team.get("id")) if isinstance(home_team, Mapping) else None
    away_rating = table.get(away_team.get("id")) if isinstance(away_team, Mapping) else None
    return compute_hda(home_rating, away_rating)


def normalize_fixture(
    match: Mapping[str, Any],
    ratings: Optional[Mapping[str, Mapping[Any, float]]] = None,
) -> Dict[str, Any]:
    competition = competition_of(match)
    kickoff = safe_str(match.get("utcDate") or "")
    match_id = match.get("id")
    item: Dict[str, Any] = {}
    if match_id is not None:
        item["id"] = f"upcoming:{match_id}"
        item["matchId"] = match_id
    item.update(
        {
            "league": safe_str(competition.get("name") or ""),
            "competitionCode": safe_str(competition.get("code") or ""),
            "home": team_label(match.get("homeTeam")),
            "away": team_label(match.get("awayTeam")),
            "kickoffUTC": kickoff,
            "kickoffLocal": format_eastern(kickoff),
            "tv": [],
        }
    )
    if ratings is not None:
        item["hda"] = estimate_match(match, ratings).as_dict()
    return item


def build_upcoming_payload(
    matches: Sequence[Mapping[str, Any]],
    *,
    days: int,
    limit: int,
    competitions: Sequence[str],
    ratings: Optional[Mapping[str, Mapping[Any, float]]] = None,
) -> Dict[str, Any]:
    kept = [match for match in matches if is_upcoming(match, competitions)]
    items = [normalize_fixture(match, ratings) for match in kept]
    items.sort(key=lambda item: item["kickoffUTC"])
    return {
        "generatedAt": iso_now(),
        "days": days,
        "limit": limit,
        "competitions": list(competitions),
        "items": items[:limit],
    }


def fetch_upcoming(
    config: AppConfig,
    *,
    with_probabilities: bool = True,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    settings = config.football_data
    api = FootballDataApi(settings.require_token(), base_url=settings.base_url)
    date_from, date_to = upcoming_window(settings.upcoming_days, now=now)
    matches = api.get_matches(date_from, date_to)

    ratings: Optional[Dict[str, Dict[Any, float]]] = None
    if with_probabilities:
        codes: List[str] = []
        for match in matches:
            if not is_upcoming(match, settings.competitions):
                continue
            code = safe_str(competition_of(match).get("code"))
            if code and code not in codes:
                codes.append(code)
        ratings = collect_ratings(api, codes)

    return build_upcoming_payload(
        matches,
        days=settings.upcoming_days,
        limit=settings.upcoming_limit,
        competitions=settings.competitions,
        ratings=ratings,
    )


def generate_upcoming(config: AppConfig, *, with_probabilities: bool = True) -> Path:
    output = config.data_dir / UPCOMING_FILENAME
    payload = fetch_upcoming(config, with_probabilities=with_probabilities)
    write_json(output, payload)
    LOGGER.info("Wrote %s (%d items)", output, len(payload["items"]))
    return output


def patch_upcoming_ids(path: Path) -> int:
    """Add ``id: upcoming:<matchId>`` to every item of an existing file.

    Returns the number of items that received an id.
    """

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"{path} does not exist") from exc
    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        raise ValueError(f"{path.name} has no items[]")

    patched: List[Any] = []
    count = 0
    for item in items:
        match_id = item.get("matchId") if isinstance(item, dict) else None
        if match_id is None:
            patched.append(item)
            continue
        patched.append({**item, "id": f"upcoming:{match_id}"})
        count += 1
    payload["items"] = patched
    write_json(path, payload)
    LOGGER.info("Patched %s (added id: upcoming:<matchId> to %d items)", path, count)
    return count
