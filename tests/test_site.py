from datetime import datetime, timezone

from netthud.site import (
    build_sections,
    build_site_html,
    format_leagues,
    format_news,
    format_news_meta,
    format_upcoming,
    generate_site,
)
from netthud.storage import write_json


def test_missing_files_render_error_items(tmp_path):
    sections = build_sections(tmp_path)
    assert "Scores not loading" in sections["scores"]
    assert "scores.json (Error: file not found)" in sections["scores"]
    assert "ERROR" in sections["upcoming"]
    assert "Late Goal Heat" in sections["signals"]
    assert "Momentum Shifts" in sections["signals"]


def test_invalid_and_empty_files(tmp_path):
    (tmp_path / "scores.json").write_text("{oops", encoding="utf-8")
    write_json(tmp_path / "upcoming.json", {"items": []})
    sections = build_sections(tmp_path)
    assert "Scores not loading" in sections["scores"]
    assert "No fixtures yet" in sections["upcoming"]
    assert "EMPTY" in sections["upcoming"]


def test_leagues_accept_strings_and_objects():
    html = format_leagues(["Premier League", {"code": "SA", "name": "Serie A"}, {"code": "X"}, 3])
    assert html.count("class=\"chip\"") == 2
    assert "Serie A" in html


def test_news_aliases_and_limit():
    items = [{"headline": f"Story {index}", "desc": "Body", "link": "https://example.com"} for index in range(15)]
    html = format_news(items)
    assert html.count("class=\"item\"") == 12
    assert "Story 0" in html
    assert "Open source" in html


def test_news_meta():
    payload = {"meta": {"updated": "2026-01-20T10:00:00.000Z"}, "items": [1, 2]}
    assert format_news_meta([1, 2], payload) == "2 items • updated 2026-01-20T10:00:00.000Z"
    assert format_news_meta([], [1]) == "0 items"


def test_upcoming_shows_percentages():
    html = format_upcoming(
        [{"home": "Arsenal", "away": "Chelsea", "kickoffLocal": "Jan 20 • 3:00 PM ET", "hda": {"home": 0.5668, "draw": 0.2767, "away": 0.1566}}]
    )
    assert "H 57% · D 28% · A 16%" in html
    assert "Arsenal vs Chelsea" in html


def test_text_is_escaped(tmp_path):
    write_json(tmp_path / "scores.json", {"items": [{"home": "<script>", "away": "B", "status": "FT", "score": "1–0"}]})
    html = build_site_html(tmp_path)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html


def test_full_page(tmp_path):
    write_json(tmp_path / "leagues.json", [{"code": "PL", "name": "Premier League"}])
    write_json(tmp_path / "transfers.json", {"items": [
        {"type": "news", "title": "Signed", "source": "Desk", "publishedAt": "2026-01-20", "url": "https://netthud.com/"},
        {"type": "rumor", "title": "Linked", "source": "Desk", "publishedAt": "2026-01-19", "url": ""},
    ]})
    write_json(tmp_path / "signals.json", {"items": [{"title": "Form", "body": "Hot streak", "tag": "form"}]})
    html = build_site_html(tmp_path, generated_at=datetime(2026, 1, 20, 12, tzinfo=timezone.utc))
    for element_id in ("leagueChips", "scoresList", "upcomingList", "newsMeta", "newsList", "transfersNews", "transfersRumors", "signalsList", "year"):
        assert f'id="{element_id}"' in html
    assert ">2026</span>" in html
    assert "Signed" in html and "RUMOR" in html
    assert "FORM" in html
    assert "Late Goal Heat" not in html


def test_generate_site(config, tmp_path):
    output = tmp_path / "public" / "index.html"
    assert generate_site(config, output=output) == output
    assert output.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_upcoming_with_infinite_probabilities(tmp_path):
    html = format_upcoming([{"home": "A", "away": "B", "hda": {"home": float("inf"), "draw": 0, "away": float("nan")}}])
    assert "H – · D 0% · A –" in html

    (tmp_path / "upcoming.json").write_text(
        '{"items": [{"home": "A", "away": "B", "hda": {"home": Infinity, "draw": 0, "away": 0}}]}',
        encoding="utf-8",
    )
    assert "H – · D 0% · A 0%" in build_sections(tmp_path)["upcoming"]
