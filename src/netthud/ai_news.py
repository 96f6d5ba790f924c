"""Data-grounded AI summaries of recent results and fixtures.

Match data comes from football-data.org; the model only phrases it. Output
goes to ``assets/data/ai-news.json`` in place of the RSS digest.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import SITE_URL, AppConfig
from .football_data import FootballDataApi, utc_today
from .llm import LlmClient
from .news import NEWS_FILENAME
from .storage import iso_now, write_json

LOGGER = logging.getLogger(__name__)

COMPETITIONS: Sequence[Tuple[str, str]] = (
    ("PL", "Premier League"),
    ("PD", "La Liga"),
    ("SA", "Serie A"),
    ("BL1", "Bundesliga"),
    ("FL1", "Ligue 1"),
)
LOOKBACK_DAYS = 7
MATCHES_PER_BUCKET = 20
MAX_ITEMS = 30

SYSTEM_PROMPT = (
    "You are NetThud AI. Create short, actionable football 'signals' and summary items. "
    "No external news, no rumors, no fabricated facts. Use only the provided match data."
)

SCHEMA_HINT = """{
  "generatedAt": "ISO-8601 string",
  "mode": "openai",
  "items": [
    {
      "title": "string",
      "summary": "string",
      "category": "signal|watch",
      "league": "string",
      "evidence": ["string"],
      "url": "string"
    }
  ]
}"""


def _score_pair(score: Any, key: str) -> str:
    part = score.get(key) if isinstance(score, Mapping) else None
    if not isinstance(part, Mapping):
        return ""
    home = "" if part.get("home") is None else part.get("home")
    away = "" if part.get("away") is None else part.get("away")
    return f"{home}-{away}"


def compact_match(match: Mapping[str, Any]) -> Dict[str, Any]:
    home_team = match.get("homeTeam")
    away_team = match.get("awayTeam")
    home_team = home_team if isinstance(home_team, Mapping) else {}
    away_team = away_team if isinstance(away_team, Mapping) else {}
    score = match.get("score")
    return {
        "home": home_team.get("name") or "Home",
        "away": away_team.get("name") or "Away",
        "utcDate": match.get("utcDate") or None,
        "status": match.get("status") or "",
        "score": _score_pair(score, "fullTime"),
        "ht": _score_pair(score, "halfTime"),
        "matchday": match.get("matchday"),
    }


def collect_match_data(
    api: FootballDataApi,
    *,
    now: Optional[datetime] = None,
) -> List[Dict[str, Any]]:
    today = utc_today(now)
    past = (today - timedelta(days=LOOKBACK_DAYS)).isoformat()
    future = (today + timedelta(days=LOOKBACK_DAYS)).isoformat()
    data: List[Dict[str, Any]] = []
    for code, name in COMPETITIONS:
        finished = api.get_matches(past, today.isoformat(), status="FINISHED", competition=code)
        upcoming = api.get_matches(today.isoformat(), future, status="SCHEDULED", competition=code)
        data.append(
            {
                "competition": name,
                "competitionCode": code,
                "finished": [compact_match(m) for m in finished][-MATCHES_PER_BUCKET:],
                "upcoming": [compact_match(m) for m in upcoming][:MATCHES_PER_BUCKET],
            }
        )
    return data


def build_prompt(data: Sequence[Mapping[str, Any]]) -> str:
    return f"""
DATA (authoritative): football-data.org match results + fixtures for selected leagues.

TASK:
Create 12 items total:
- 6 "Signals" derived from recent FINISHED matches (last 7 days)
- 6 "Watch" items derived from UPCOMING matches (next 7 days)

Rules:
- Must cite which league + match or trend it is based on (use team names + dates).
- No transfer rumors (unless present in the data, which it isn't).
- No mentioning ESPN/BBC/Guardian or any publisher.
- Keep each title <= 70 chars, each summary <= 180 chars.
- Provide a "category": "signal" or "watch".
- Provide "league" (string).
- Provide "evidence" array with 1-3 short strings (e.g., "Inter 3-2 Juventus (2026-01-18)").
- Provide "url" as "{SITE_URL}" (placeholder link).

DATA:
{json.dumps(list(data), indent=2, ensure_ascii=False)}
"""


def clean_items(raw_items: Any) -> List[Dict[str, Any]]:
    items = raw_items if isinstance(raw_items, list) else []
    cleaned: List[Dict[str, Any]] = []
    for raw in items:
        if not isinstance(raw, Mapping):
            continue
        evidence = raw.get("evidence")
        entry = {
            "title": str(raw.get("title") or "")[:120],
            "summary": str(raw.get("summary") or "")[:260],
            "category": "watch" if raw.get("category") == "watch" else "signal",
            "league": str(raw.get("league") or ""),
            "evidence": [str(e) for e in evidence[:3]] if isinstance(evidence, list) else [],
            "url": SITE_URL,
        }
        if entry["title"] and entry["summary"]:
            cleaned.append(entry)
    return cleaned[:MAX_ITEMS]


def build_ai_news(
    api: FootballDataApi,
    llm: LlmClient,
    *,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    data = collect_match_data(api, now=now)
    response = llm.chat_json(
        build_prompt(data),
        system=SYSTEM_PROMPT,
        schema_hint=SCHEMA_HINT,
        temperature=0.4,
    )
    raw_items = response.get("items") if isinstance(response, Mapping) else None
    return {"generatedAt": iso_now(), "mode": "openai", "items": clean_items(raw_items)}


def generate_ai_news(config: AppConfig) -> Path:
    output = config.data_dir / NEWS_FILENAME
    settings = config.football_data
    api = FootballDataApi(settings.require_token(), base_url=settings.base_url)
    llm = LlmClient(config.openai)
    payload = build_ai_news(api, llm)
    write_json(output, payload)
    LOGGER.info("Wrote %s (%d items)", output, len(payload["items"]))
    return output
