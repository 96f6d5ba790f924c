import json
from datetime import datetime, timedelta, timezone

from netthud.storage import isoformat_utc, list_items, read_json_safe, write_json


def test_isoformat_utc_matches_javascript():
    moment = datetime(2026, 1, 20, 15, 0, 5, 123456, tzinfo=timezone.utc)
    assert isoformat_utc(moment) == "2026-01-20T15:00:05.123Z"
    eastern = datetime(2026, 1, 20, 10, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert isoformat_utc(eastern) == "2026-01-20T15:00:00.000Z"


def test_write_json_creates_directories(tmp_path):
    path = write_json(tmp_path / "a" / "b.json", {"title": "Fenerbahçe", "n": 1})
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert "Fenerbahçe" in text
    assert '\n  "n": 1' in text
    assert json.loads(text)["n"] == 1


def test_read_json_safe(tmp_path):
    assert read_json_safe(tmp_path / "missing.json") is None
    (tmp_path / "bad.json").write_text("{", encoding="utf-8")
    assert read_json_safe(tmp_path / "bad.json") is None


def test_list_items():
    assert list_items([1, 2]) == [1, 2]
    assert list_items({"items": [1]}) == [1]
    assert list_items({"news": [3]}, "items", "news") == [3]
    assert list_items({"items": "nope"}) == []
    assert list_items(None) == []
