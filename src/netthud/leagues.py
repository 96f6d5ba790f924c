"""League chips shown in the site header (``assets/data/leagues.json``)."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

import requests

from .config import AppConfig, ConfigurationError
from .football_data import FootballDataApi, ProviderError
from .storage import write_json

LOGGER = logging.getLogger(__name__)

LEAGUES_FILENAME = "leagues.json"

COMPETITION_NAMES: Mapping[str, str] = {
    "PL": "Premier League",
    "PD": "La Liga",
    "SA": "Serie A",
    "BL1": "Bundesliga",
    "FL1": "Ligue 1",
    "DED": "Eredivisie",
    "PPL": "Primeira Liga",
    "CL": "Champions League",
    "EL": "Europa League",
    "EC": "European Championship",
    "CLI": "Copa Libertadores",
    "FAC": "FA Cup",
    "CDR": "Copa del Rey",
    "DFB": "DFB-Pokal",
    "CIT": "Coppa Italia",
}


def build_leagues(
    codes: Sequence[str],
    remote_names: Optional[Mapping[str, str]] = None,
) -> List[Dict[str, str]]:
    names = dict(COMPETITION_NAMES)
    names.update(remote_names or {})
    return [{"code": code, "name": names.get(code, code)} for code in codes]


def fetch_competition_names(config: AppConfig) -> Dict[str, str]:
    """Names from football-data; empty when there is no token or the call fails."""

    settings = config.football_data
    try:
        api = FootballDataApi(settings.require_token(), base_url=settings.base_url)
        competitions = api.get_competitions()
    except (ConfigurationError, ProviderError, requests.RequestException) as exc:
        LOGGER.info("Using built-in competition names: %s", exc)
        return {}
    return {
        str(item["code"]): str(item["name"])
        for item in competitions
        if item.get("code") and item.get("name")
    }


def generate_leagues(config: AppConfig) -> Path:
    output = config.data_dir / LEAGUES_FILENAME
    leagues = build_leagues(config.football_data.competitions, fetch_competition_names(config))
    write_json(output, leagues)
    LOGGER.info("Wrote %s (%d items)", output, len(leagues))
    return output
