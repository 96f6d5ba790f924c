import json

import requests

from netthud import leagues
from netthud.leagues import build_leagues, fetch_competition_names, generate_leagues


def test_build_leagues_uses_remote_then_builtin_names():
    result = build_leagues(["PL", "CL", "XYZ"], {"PL": "Premier League (EN)"})
    assert result == [
        {"code": "PL", "name": "Premier League (EN)"},
        {"code": "CL", "name": "Champions League"},
        {"code": "XYZ", "name": "XYZ"},
    ]


def test_fetch_competition_names_without_token(config):
    assert fetch_competition_names(config) == {}


def test_fetch_competition_names_on_network_error(config, monkeypatch):
    def failing(self):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(leagues.FootballDataApi, "get_competitions", failing)
    config.football_data.token = "x"
    assert fetch_competition_names(config) == {}


def test_generate_leagues(config, monkeypatch):
    monkeypatch.setattr(
        leagues.FootballDataApi,
        "get_competitions",
        lambda self: [{"code": "PL", "name": "Premier League"}, {"code": "SA", "name": "Serie A TIM"}, {"name": "No code"}],
    )
    config.football_data.token = "x"
    config.football_data.competitions = ("PL", "SA")
    payload = json.loads(generate_leagues(config).read_text(encoding="utf-8"))
    assert payload == [{"code": "PL", "name": "Premier League"}, {"code": "SA", "name": "Serie A TIM"}]
