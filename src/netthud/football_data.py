"""Helper utilities to talk to the football-data.org v4 REST API."""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

import requests

from .config import FOOTBALL_DATA_BASE_URL, ConfigurationError
from .http import JSON_ACCEPT_HEADER, REQUEST_HEADERS, http_get

LOGGER = logging.getLogger(__name__)


class ProviderError(RuntimeError):
    """football-data answered with a non-success status."""

    def __init__(self, status_code: int, reason: str, body: str = "") -> None:
        self.status_code = status_code
        self.reason = reason
        self.body = body
        super().__init__(f"football-data HTTP {status_code} {reason} :: {body[:200]}")


def safe_str(value: Any) -> str:
    return "" if value is None else str(value)


def team_label(team: Any) -> str:
    """Prefer the short name of a football-data team object."""

    if not isinstance(team, Mapping):
        return ""
    return safe_str(team.get("shortName") or team.get("name") or "")


def competition_of(match: Mapping[str, Any]) -> Mapping[str, Any]:
    competition = match.get("competition")
    return competition if isinstance(competition, Mapping) else {}


def utc_today(now: Optional[datetime] = None) -> date:
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date()


def date_window(start: date, days: int) -> tuple[str, str]:
    """Return ``(dateFrom, dateTo)`` strings spanning ``days`` from ``start``."""

    first = start if days >= 0 else start + timedelta(days=days)
    last = start + timedelta(days=days) if days >= 0 else start
    return first.isoformat(), last.isoformat()


class FootballDataApi:
    """Minimal client for the football-data.org v4 API."""

    def __init__(
        self,
        token: str,
        *,
        base_url: str = FOOTBALL_DATA_BASE_URL,
        timeout: int = 30,
        retries: int = 3,
    ) -> None:
        self.token = (token or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retries = retries
        self.session = requests.Session()
        self.session.headers.update(
            {
                **REQUEST_HEADERS,
                **JSON_ACCEPT_HEADER,
                "X-Auth-Token": self.token,
            }
        )

    def _request(self, path: str, params: Optional[Dict[str, object]] = None) -> Dict[str, Any]:
        if not self.token:
            raise ConfigurationError("Missing env: NETTHUD_SCORES_API_TOKEN")
        url = f"{self.base_url}{path}"
        response = http_get(
            url,
            params=params or {},
            timeout=self.timeout,
            retries=self.retries,
            session=self.session,
        )
        if not response.ok:
            LOGGER.error("football-data request failed: %s %s", response.status_code, url)
            raise ProviderError(response.status_code, response.reason or "", response.text or "")
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(
                response.status_code, "non-JSON response", response.text or ""
            ) from exc
        return payload if isinstance(payload, dict) else {}

    def get_matches(
        self,
        date_from: str,
        date_to: str,
        *,
        status: Optional[str] = None,
        competition: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, object] = {"dateFrom": date_from, "dateTo": date_to}
        if status:
            params["status"] = status
        path = f"/competitions/{competition}/matches" if competition else "/matches"
        payload = self._request(path, params=params)
        matches = payload.get("matches")
        return [item for item in matches if isinstance(item, dict)] if isinstance(matches, list) else []

    def get_standings(self, competition: str) -> List[Dict[str, Any]]:
        """Rows of the overall table (``type == TOTAL``) of a competition."""

        payload = self._request(f"/competitions/{competition}/standings")
        standings = payload.get("standings")
        if not isinstance(standings, list) or not standings:
            return []
        tables = [item for item in standings if isinstance(item, dict)]
        total = next((item for item in tables if item.get("type") == "TOTAL"), None)
        chosen = total or (tables[0] if tables else {})
        rows = chosen.get("table")
        return [row for row in rows if isinstance(row, dict)] if isinstance(rows, list) else []

    def get_competitions(self) -> List[Dict[str, Any]]:
        payload = self._request("/competitions")
        competitions = payload.get("competitions")
        return [item for item in competitions if isinstance(item, dict)] if isinstance(competitions, list) else []
