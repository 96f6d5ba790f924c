import json
from datetime import datetime, timezone

import pytest
import requests

from netthud import upcoming
from netthud.config import ConfigurationError
from netthud.football_data import ProviderError
from netthud.probability import NEUTRAL_HDA, compute_hda
from netthud.upcoming import (
    build_upcoming_payload,
    collect_ratings,
    format_eastern,
    generate_upcoming,
    is_upcoming,
    normalize_fixture,
    patch_upcoming_ids,
    upcoming_window,
)


def fixture(match_id, status="TIMED", code="PL", kickoff="2026-01-21T20:00:00Z", home=1, away=2):
    competition = {"name": "Premier League", "code": code} if code else {}
    return {
        "id": match_id,
        "status": status,
        "utcDate": kickoff,
        "competition": competition,
        "homeTeam": {"id": home, "shortName": f"Team {home}"},
        "awayTeam": {"id": away, "shortName": f"Team {away}"},
    }


def standings_row(team_id, played, points, gd, gf):
    return {"team": {"id": team_id}, "playedGames": played, "points": points, "goalDifference": gd, "goalsFor": gf}


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2026-01-20T20:00:00Z", "Jan 20 • 3:00 PM ET"),
        ("2026-07-04T16:05:00Z", "Jul 4 • 12:05 PM ET"),
        ("2026-01-21T04:30:00Z", "Jan 20 • 11:30 PM ET"),
        ("not a date", ""),
        ("", ""),
    ],
)
def test_format_eastern(value, expected):
    assert format_eastern(value) == expected


def test_upcoming_window_adds_extra_day():
    now = datetime(2026, 1, 20, 22, tzinfo=timezone.utc)
    assert upcoming_window(7, now=now) == ("2026-01-20", "2026-01-28")


def test_is_upcoming_filters_status_and_allowlist():
    allowed = ["PL", "CL"]
    assert is_upcoming(fixture(1), allowed)
    assert is_upcoming(fixture(2, status="POSTPONED"), allowed)
    assert is_upcoming(fixture(3, code=""), allowed)
    assert not is_upcoming(fixture(4, code="SA"), allowed)
    for status in ("IN_PLAY", "PAUSED", "FINISHED", "SUSPENDED", "LIVE", "CANCELLED"):
        assert not is_upcoming(fixture(5, status=status), allowed)


def test_normalize_fixture_shape():
    item = normalize_fixture(fixture(77), ratings={})
    assert item == {
        "id": "upcoming:77",
        "matchId": 77,
        "league": "Premier League",
        "competitionCode": "PL",
        "home": "Team 1",
        "away": "Team 2",
        "kickoffUTC": "2026-01-21T20:00:00Z",
        "kickoffLocal": "Jan 21 • 3:00 PM ET",
        "tv": [],
        "hda": NEUTRAL_HDA.as_dict(),
    }
    assert "hda" not in normalize_fixture(fixture(78))


def test_payload_sorts_trims_and_estimates():
    ratings = {"PL": {1: 2.4, 2: 0.9}}
    matches = [
        fixture(1, kickoff="2026-01-23T12:00:00Z"),
        fixture(2, kickoff="2026-01-21T12:00:00Z"),
        fixture(3, status="FINISHED"),
        fixture(4, kickoff="2026-01-22T12:00:00Z", home=2, away=1),
    ]
    payload = build_upcoming_payload(matches, days=7, limit=2, competitions=["PL"], ratings=ratings)
    assert payload["days"] == 7
    assert payload["limit"] == 2
    assert payload["competitions"] == ["PL"]
    assert [item["matchId"] for item in payload["items"]] == [2, 4]
    assert payload["items"][0]["hda"] == compute_hda(2.4, 0.9).as_dict()
    assert payload["items"][1]["hda"] == compute_hda(0.9, 2.4).as_dict()


class FakeApi:
    def __init__(self, matches, standings):
        self.matches = matches
        self.standings = standings
        self.standings_calls = []

    def get_matches(self, date_from, date_to, **kwargs):
        return self.matches

    def get_standings(self, code):
        self.standings_calls.append(code)
        result = self.standings[code]
        if isinstance(result, Exception):
            raise result
        return result


def test_collect_ratings_skips_failing_competitions(caplog):
    api = FakeApi(
        [],
        {
            "PL": [standings_row(1, 10, 20, 5, 15)],
            "CL": ProviderError(429, "Too Many Requests"),
            "SA": requests.ConnectionError("down"),
        },
    )
    ratings = collect_ratings(api, ["PL", "CL", "SA"])
    assert list(ratings) == ["PL"]
    assert "Standings for CL unavailable" in caplog.text


def test_generate_upcoming_fetches_standings_once_per_code(config, monkeypatch):
    api = FakeApi(
        [
            fixture(1, code="PL"),
            fixture(2, code="PL", home=3, away=1),
            fixture(3, code="CL"),
            fixture(4, code="SA"),
        ],
        {
            "PL": [standings_row(1, 10, 25, 10, 20), standings_row(2, 10, 8, -6, 9)],
            "CL": ProviderError(403, "Forbidden"),
        },
    )
    monkeypatch.setattr(upcoming, "FootballDataApi", lambda token, base_url: api)
    config.football_data.token = "x"
    config.football_data.competitions = ("PL", "CL")
    path = generate_upcoming(config)
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert api.standings_calls == ["PL", "CL"]
    by_id = {item["matchId"]: item for item in payload["items"]}
    assert set(by_id) == {1, 2, 3}
    assert by_id[1]["hda"]["home"] > by_id[1]["hda"]["away"]
    assert by_id[2]["hda"] == NEUTRAL_HDA.as_dict()
    assert by_id[3]["hda"] == NEUTRAL_HDA.as_dict()


def test_generate_upcoming_without_probabilities(config, monkeypatch):
    api = FakeApi([fixture(1)], {})
    monkeypatch.setattr(upcoming, "FootballDataApi", lambda token, base_url: api)
    config.football_data.token = "x"
    payload = json.loads(generate_upcoming(config, with_probabilities=False).read_text(encoding="utf-8"))
    assert api.standings_calls == []
    assert "hda" not in payload["items"][0]


def test_generate_upcoming_requires_token(config):
    with pytest.raises(ConfigurationError):
        generate_upcoming(config)


def test_patch_upcoming_ids(tmp_path):
    path = tmp_path / "upcoming.json"
    path.write_text(
        json.dumps({"days": 7, "items": [{"matchId": 5, "home": "A"}, {"home": "B"}, "junk"]}),
        encoding="utf-8",
    )
    assert patch_upcoming_ids(path) == 1
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["days"] == 7
    assert payload["items"][0] == {"matchId": 5, "home": "A", "id": "upcoming:5"}
    assert payload["items"][1] == {"home": "B"}


def test_patch_upcoming_ids_without_items(tmp_path):
    path = tmp_path / "upcoming.json"
    path.write_text(json.dumps({"days": 7}), encoding="utf-8")
    with pytest.raises(ValueError, match="upcoming.json has no items"):
        patch_upcoming_ids(path)


def test_patch_upcoming_ids_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        patch_upcoming_ids(tmp_path / "upcoming.json")
