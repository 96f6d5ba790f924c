import json
from datetime import datetime, timezone

import pytest

from netthud.ai_news import (
    build_ai_news,
    build_prompt,
    clean_items,
    collect_match_data,
    compact_match,
    generate_ai_news,
)
from netthud.config import ConfigurationError


class FakeApi:
    def __init__(self):
        self.calls = []

    def get_matches(self, date_from, date_to, *, status=None, competition=None):
        self.calls.append((date_from, date_to, status, competition))
        if status == "FINISHED":
            return [
                {
                    "homeTeam": {"name": f"{competition} Home {index}"},
                    "awayTeam": {"name": f"{competition} Away {index}"},
                    "utcDate": "2026-01-18T15:00:00Z",
                    "status": "FINISHED",
                    "score": {"fullTime": {"home": 2, "away": 1}, "halfTime": {"home": 1, "away": None}},
                    "matchday": 21,
                }
                for index in range(25)
            ]
        return [{"homeTeam": None, "awayTeam": {}, "status": "SCHEDULED"}]


class FakeLlm:
    def __init__(self, response):
        self.response = response
        self.prompt = None

    def chat_json(self, prompt, **kwargs):
        self.prompt = prompt
        self.kwargs = kwargs
        return self.response


def test_compact_match():
    compact = compact_match(
        {
            "homeTeam": {"name": "Inter"},
            "awayTeam": {"name": "Juventus"},
            "utcDate": "2026-01-18T19:45:00Z",
            "status": "FINISHED",
            "score": {"fullTime": {"home": 3, "away": 2}, "halfTime": {"home": 1, "away": None}},
            "matchday": 21,
        }
    )
    assert compact == {
        "home": "Inter",
        "away": "Juventus",
        "utcDate": "2026-01-18T19:45:00Z",
        "status": "FINISHED",
        "score": "3-2",
        "ht": "1-",
        "matchday": 21,
    }
    assert compact_match({})["home"] == "Home"


def test_collect_match_data_windows_and_buckets():
    api = FakeApi()
    data = collect_match_data(api, now=datetime(2026, 1, 20, tzinfo=timezone.utc))
    assert [bucket["competitionCode"] for bucket in data] == ["PL", "PD", "SA", "BL1", "FL1"]
    assert api.calls[0] == ("2026-01-13", "2026-01-20", "FINISHED", "PL")
    assert api.calls[1] == ("2026-01-20", "2026-01-27", "SCHEDULED", "PL")
    assert len(data[0]["finished"]) == 20
    assert data[0]["finished"][-1]["home"] == "PL Home 24"
    assert data[0]["upcoming"][0]["home"] == "Home"


def test_prompt_embeds_data():
    prompt = build_prompt([{"competition": "Serie A", "finished": [], "upcoming": []}])
    assert '"competition": "Serie A"' in prompt
    assert "https://netthud.com/" in prompt


def test_clean_items():
    cleaned = clean_items(
        [
            {"title": "T" * 200, "summary": "S", "category": "watch", "evidence": ["a", "b", "c", "d"], "url": "https://evil"},
            {"title": "Only title"},
            {"title": "Kept", "summary": "Yes", "category": "other", "evidence": "no"},
            "junk",
        ]
    )
    assert len(cleaned) == 2
    assert len(cleaned[0]["title"]) == 120
    assert cleaned[0]["category"] == "watch"
    assert cleaned[0]["evidence"] == ["a", "b", "c"]
    assert cleaned[0]["url"] == "https://netthud.com/"
    assert cleaned[1]["category"] == "signal"
    assert cleaned[1]["evidence"] == []
    assert clean_items(None) == []


def test_build_ai_news():
    llm = FakeLlm({"items": [{"title": "Inter surge", "summary": "Three straight wins."}]})
    payload = build_ai_news(FakeApi(), llm, now=datetime(2026, 1, 20, tzinfo=timezone.utc))
    assert payload["mode"] == "openai"
    assert payload["items"][0]["title"] == "Inter surge"
    assert llm.kwargs["temperature"] == 0.4
    assert "PL Home 5" in llm.prompt


def test_generate_ai_news_requires_credentials(config):
    with pytest.raises(ConfigurationError):
        generate_ai_news(config)
    config.football_data.token = "x"
    with pytest.raises(ConfigurationError):
        generate_ai_news(config)
    assert not (config.data_dir / "ai-news.json").exists()
