"""Render the generated JSON documents into a static ``index.html``."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import AppConfig
from .leagues import LEAGUES_FILENAME
from .news import NEWS_FILENAME
from .scores import SCORES_FILENAME
from .signals import SIGNALS_FILENAME
from .storage import list_items
from .transfers import TRANSFERS_FILENAME
from .upcoming import UPCOMING_FILENAME

LOGGER = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = Path("index.html")
NEWS_LIMIT = 12

DEFAULT_SIGNALS: Sequence[Mapping[str, str]] = (
    {
        "title": "Late Goal Heat",
        "body": "Leagues with the highest 75+ minute volatility today.",
        "tag": "LIVE",
        "kind": "live",
    },
    {
        "title": "First Goal Impact",
        "body": "Where the opening goal most often decides the match.",
        "tag": "MODEL",
        "kind": "model",
    },
    {
        "title": "Momentum Shifts",
        "body": "Goal timing and response: who collapses, who resets, who strikes again.",
        "tag": "TRACK",
        "kind": "track",
    },
)

SCORE_STATUS_KINDS: Mapping[str, str] = {"LIVE": "live", "HT": "track", "FT": "model"}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _first(mapping: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = mapping.get(key)
        if value:
            return _text(value)
    return ""


def load_document(path: Path) -> Tuple[Optional[Any], Optional[str]]:
    """Return ``(payload, error)``; exactly one of them is ``None``."""

    try:
        return json.loads(path.read_text(encoding="utf-8")), None
    except FileNotFoundError:
        return None, "file not found"
    except (OSError, ValueError) as exc:
        return None, str(exc)


def format_item(title: str, body: str, tag: str, kind: str, *, extra: str = "") -> str:
    segments: List[str] = [
        "<div class=\"item\">",
        "  <div>",
        f"    <strong>{escape(title)}</strong>",
        f"    <p>{escape(body)}</p>",
    ]
    if extra:
        segments.append(f"    {extra}")
    segments.extend(["  </div>", f"  <span class=\"tag {escape(kind)}\">{escape(tag)}</span>", "</div>"])
    return "\n".join(segments)


def format_error_item(label: str, path: Path, error: str) -> str:
    return format_item(
        f"{label} not loading",
        f"Expected {path.as_posix()} (Error: {error})",
        "ERROR",
        "error",
    )


def format_empty_item(label: str, path: Path) -> str:
    return format_item(f"No {label} yet", f"Add items into {path.as_posix()}.", "EMPTY", "track")


def format_leagues(payload: Any) -> str:
    leagues = payload if isinstance(payload, list) else []
    chips: List[str] = []
    for league in leagues:
        if isinstance(league, str):
            name = league
        elif isinstance(league, Mapping):
            name = _first(league, "name")
        else:
            name = ""
        if not name:
            continue
        chips.append(f"<div class=\"chip\"><span class=\"miniDot\"></span>{escape(name)}</div>")
    return "\n".join(chips)


def format_scores(items: Sequence[Any]) -> str:
    rendered: List[str] = []
    for match in items:
        if not isinstance(match, Mapping):
            continue
        status = _text(match.get("status"))
        score = _text(match.get("score")) or "vs"
        title = f"{_text(match.get('home'))} {score} {_text(match.get('away'))}"
        meta = " • ".join(part for part in (_text(match.get("league")), _text(match.get("when"))) if part)
        rendered.append(format_item(title, meta, status or "–", SCORE_STATUS_KINDS.get(status, "track")))
    return "\n".join(rendered)


def _percent(value: Any) -> str:
    try:
        return f"{round(float(value) * 100)}%"
    except (TypeError, ValueError, OverflowError):
        return "–"


def format_upcoming(items: Sequence[Any]) -> str:
    rendered: List[str] = []
    for fixture in items:
        if not isinstance(fixture, Mapping):
            continue
        title = f"{_text(fixture.get('home'))} vs {_text(fixture.get('away'))}"
        meta = " • ".join(
            part for part in (_text(fixture.get("league")), _text(fixture.get("kickoffLocal"))) if part
        )
        extra = ""
        hda = fixture.get("hda")
        if isinstance(hda, Mapping):
            extra = (
                "<p class=\"hda\">"
                f"H {_percent(hda.get('home'))} · D {_percent(hda.get('draw'))} · A {_percent(hda.get('away'))}"
                "</p>"
            )
        rendered.append(format_item(title, meta, "UP", "model", extra=extra))
    return "\n".join(rendered)


def format_news(items: Sequence[Any]) -> str:
    rendered: List[str] = []
    for entry in list(items)[:NEWS_LIMIT]:
        if not isinstance(entry, Mapping):
            continue
        title = _first(entry, "title", "headline") or "Update"
        description = _first(entry, "summary", "desc", "description")
        url = _first(entry, "url", "link")
        source = _first(entry, "source") or "Net Thud AI feed"
        published = _first(entry, "publishedAt", "time", "published", "date")
        subtitle = " • ".join(part for part in (source, published) if part)
        extra = ""
        if url:
            extra = (
                f"<p style=\"margin-top:10px\"><a class=\"pill\" href=\"{escape(url)}\" "
                "target=\"_blank\" rel=\"noopener noreferrer\">Open source →</a></p>"
            )
        rendered.append(format_item(title, description or subtitle, "NEW", "live", extra=extra))
    return "\n".join(rendered)


def format_transfers(items: Sequence[Any], kind: str) -> str:
    rendered: List[str] = []
    for entry in items:
        if not isinstance(entry, Mapping) or entry.get("type") != kind:
            continue
        meta = " • ".join(part for part in (_text(entry.get("source")), _text(entry.get("publishedAt"))) if part)
        url = _text(entry.get("url"))
        extra = ""
        if url:
            extra = f"<a class=\"pill\" href=\"{escape(url)}\" target=\"_blank\" rel=\"noopener\">Read →</a>"
        label = "RUMOR" if kind == "rumor" else "NEWS"
        tag_kind = "track" if kind == "rumor" else "live"
        rendered.append(format_item(_text(entry.get("title")), meta, label, tag_kind, extra=extra))
    return "\n".join(rendered)


def format_signals(items: Sequence[Any]) -> str:
    rendered: List[str] = []
    for signal in items:
        if not isinstance(signal, Mapping):
            continue
        tag = _text(signal.get("tag")) or "SIGNAL"
        kind = _text(signal.get("kind")) or "model"
        body = _first(signal, "body", "desc", "summary")
        rendered.append(format_item(_text(signal.get("title")), body, tag.upper(), kind))
    return "\n".join(rendered)


def _section_list(
    data_dir: Path,
    filename: str,
    label: str,
    keys: Sequence[str],
    *,
    empty_label: str,
) -> Tuple[List[Any], Optional[str], Optional[Any]]:
    path = data_dir / filename
    payload, error = load_document(path)
    if error is not None:
        LOGGER.warning("%s unavailable: %s", path, error)
        return [], format_error_item(label, path, error), None
    items = list_items(payload, *keys)
    if not items:
        return [], format_empty_item(empty_label, path), payload
    return items, None, payload


def build_sections(data_dir: Path) -> Dict[str, str]:
    sections: Dict[str, str] = {}

    leagues_path = data_dir / LEAGUES_FILENAME
    leagues, leagues_error = load_document(leagues_path)
    if leagues_error is not None:
        sections["leagues"] = format_error_item("Leagues", leagues_path, leagues_error)
    else:
        sections["leagues"] = format_leagues(leagues)

    scores, placeholder, _ = _section_list(
        data_dir, SCORES_FILENAME, "Scores", ("items",), empty_label="scores"
    )
    sections["scores"] = placeholder or format_scores(scores)

    fixtures, placeholder, _ = _section_list(
        data_dir, UPCOMING_FILENAME, "Fixtures", ("items",), empty_label="fixtures"
    )
    sections["upcoming"] = placeholder or format_upcoming(fixtures)

    news, placeholder, news_payload = _section_list(
        data_dir, NEWS_FILENAME, "AI news", ("items", "news", "articles"), empty_label="AI news"
    )
    sections["news"] = placeholder or format_news(news)
    sections["news_meta"] = format_news_meta(news, news_payload)

    transfers, placeholder, _ = _section_list(
        data_dir, TRANSFERS_FILENAME, "Transfers", ("items",), empty_label="transfers"
    )
    sections["transfers_news"] = placeholder or format_transfers(transfers, "news")
    sections["transfers_rumors"] = placeholder or format_transfers(transfers, "rumor")

    signals_payload, signals_error = load_document(data_dir / SIGNALS_FILENAME)
    signals = list_items(signals_payload, "items") if signals_error is None else []
    sections["signals"] = format_signals(signals or DEFAULT_SIGNALS)
    return sections


def format_news_meta(items: Sequence[Any], payload: Any) -> str:
    count = len(items)
    updated = ""
    if isinstance(payload, Mapping):
        meta = payload.get("meta") if isinstance(payload.get("meta"), Mapping) else payload
        updated = _first(meta, "updated", "lastUpdated", "generatedAt")
    return f"{count} items • updated {updated}" if updated else f"{count} items"


def build_site_html(data_dir: Path, *, generated_at: Optional[datetime] = None) -> str:
    sections = build_sections(data_dir)
    generated_at = generated_at or datetime.now(tz=timezone.utc)
    year = generated_at.year
    stamp = generated_at.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    html = f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
  <meta charset=\"utf-8\">
  <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\">
  <meta http-equiv=\"Cache-Control\" content=\"no-cache, no-store, must-revalidate\">
  <title>Net Thud</title>
  <style>
    :root {{
      color-scheme: dark;
      --bg: #0b0f14;
      --panel: #121922;
      --text: #e6edf3;
      --muted: #8b98a5;
      --accent: #3ddc97;
    }}
    body {{
      margin: 0;
      font-family: \"Inter\", \"Segoe UI\", -apple-system, BlinkMacSystemFont, Arial, sans-serif;
      background: var(--bg);
      color: var(--text);
      line-height: 1.5;
    }}
    main {{
      max-width: min(72rem, 96vw);
      margin: 0 auto;
      padding: 1rem clamp(0.9rem, 3vw, 2rem);
    }}
    section {{
      background: var(--panel);
      border-radius: 0.9rem;
      padding: 1rem 1.2rem;
      margin-bottom: 1.2rem;
    }}
    .chips {{ display: flex; flex-wrap: wrap; gap: 0.5rem; }}
    .chip {{ border: 1px solid #243040; border-radius: 999px; padding: 0.2rem 0.8rem; }}
    .miniDot {{ display: inline-block; width: 0.45rem; height: 0.45rem; border-radius: 50%; background: var(--accent); margin-right: 0.4rem; }}
    .item {{ display: flex; justify-content: space-between; gap: 1rem; padding: 0.7rem 0; border-bottom: 1px solid #1e2935; }}
    .item p {{ margin: 0.2rem 0 0 0; color: var(--muted); }}
    .tag {{ font-size: 0.75rem; font-weight: 700; padding: 0.15rem 0.5rem; border-radius: 0.4rem; align-self: flex-start; }}
    .tag.live {{ background: #14532d; }}
    .tag.model {{ background: #1e3a8a; }}
    .tag.track {{ background: #4a3b12; }}
    .tag.error {{ background: #7f1d1d; }}
    .pill {{ color: var(--accent); text-decoration: none; }}
    .hda {{ font-variant-numeric: tabular-nums; }}
    footer {{ color: var(--muted); font-size: 0.85rem; padding: 1rem 0 2rem 0; }}
  </style>
</head>
<body>
  <main>
    <h1>Net Thud</h1>
    <div id=\"leagueChips\" class=\"chips\">
{sections['leagues']}
    </div>
    <section>
      <h2>Scores</h2>
      <div id=\"scoresList\">
{sections['scores']}
      </div>
    </section>
    <section>
      <h2>Upcoming</h2>
      <div id=\"upcomingList\">
{sections['upcoming']}
      </div>
    </section>
    <section>
      <h2>AI News</h2>
      <p id=\"newsMeta\">{escape(sections['news_meta'])}</p>
      <div id=\"newsList\">
{sections['news']}
      </div>
    </section>
    <section>
      <h2>Transfers</h2>
      <h3>News</h3>
      <div id=\"transfersNews\">
{sections['transfers_news']}
      </div>
      <h3>Rumors</h3>
      <div id=\"transfersRumors\">
{sections['transfers_rumors']}
      </div>
    </section>
    <section>
      <h2>Signals</h2>
      <div id=\"signalsList\">
{sections['signals']}
      </div>
    </section>
    <footer>© <span id=\"year\">{year}</span> Net Thud · generated {escape(stamp)}</footer>
  </main>
</body>
</html>
"""
    return html


def generate_site(config: AppConfig, *, output: Path = DEFAULT_OUTPUT_PATH) -> Path:
    html = build_site_html(config.data_dir)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    LOGGER.info("Wrote %s", output)
    return output
