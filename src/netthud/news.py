"""Collect football headlines from multiple RSS feeds."""
from __future__ import annotations

import calendar
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from dateutil import parser as date_parser
from feedparser import parse as parse_feed

from .config import AppConfig, NewsSource
from .http import RSS_ACCEPT_HEADER, fetch_text
from .storage import iso_now, isoformat_utc, write_json

LOGGER = logging.getLogger(__name__)

NEWS_FILENAME = "ai-news.json"
FEED_TIMEOUT = 15
SUMMARY_LENGTH = 220
MAX_ITEMS = 30
DEFAULT_SUMMARY = "Football update."
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(slots=True)
class Article:
    title: str
    url: str
    source: str
    published_at: str
    summary: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "title": self.title,
            "url": self.url,
            "source": self.source,
            "publishedAt": self.published_at,
            "summary": self.summary,
        }


def host_from_url(url: str) -> str:
    try:
        hostname = urlparse(url).hostname or ""
    except ValueError:
        return ""
    return hostname[4:] if hostname.startswith("www.") else hostname


def strip_html(value: Optional[str]) -> str:
    if not value:
        return ""
    text = BeautifulSoup(value, "html.parser").get_text(" ")
    return _WHITESPACE_RE.sub(" ", text).strip()


def _entry_published(entry: Any) -> Optional[str]:
    parsed = getattr(entry, "published_parsed", None) or getattr(entry, "updated_parsed", None)
    if parsed:
        moment = datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
        return isoformat_utc(moment)
    raw = getattr(entry, "published", None) or getattr(entry, "updated", None)
    if not raw:
        return None
    try:
        return isoformat_utc(date_parser.parse(raw))
    except (TypeError, ValueError, OverflowError):
        return None


def parse_feed_text(text: str, source: str, *, limit: Optional[int] = None) -> List[Article]:
    feed = parse_feed(text)
    entries = feed.entries[:limit] if limit else feed.entries
    articles: List[Article] = []
    for entry in entries:
        title = strip_html(getattr(entry, "title", ""))
        link = (getattr(entry, "link", "") or getattr(entry, "id", "") or "").strip()
        if not title or not link:
            continue
        description = getattr(entry, "summary", None) or getattr(entry, "description", None)
        if not description and getattr(entry, "content", None):
            description = entry.content[0].get("value")
        summary = strip_html(description)[:SUMMARY_LENGTH] or DEFAULT_SUMMARY
        articles.append(
            Article(
                title=title,
                url=link,
                source=source,
                published_at=_entry_published(entry) or iso_now(),
                summary=summary,
            )
        )
    return articles


def gather_articles(
    sources: Sequence[NewsSource],
) -> Tuple[List[Article], List[Dict[str, str]]]:
    articles: List[Article] = []
    errors: List[Dict[str, str]] = []
    for source in sources:
        host = source.name or host_from_url(source.url)
        try:
            text = fetch_text(
                source.url,
                headers=RSS_ACCEPT_HEADER,
                timeout=FEED_TIMEOUT,
                retries=1,
            )
            parsed = parse_feed_text(text, host, limit=source.limit)
        except requests.RequestException as exc:
            LOGGER.warning("Feed failed: %s (%s)", source.url, exc)
            errors.append({"feed": source.url, "error": str(exc)})
            continue
        LOGGER.info("Fetched %s: %d items", host, len(parsed))
        articles.extend(parsed)
    return articles, errors


def merge_articles(articles: Sequence[Article], *, limit: int = MAX_ITEMS) -> List[Article]:
    """Newest first, one entry per URL."""

    ordered = sorted(articles, key=lambda item: item.published_at or "", reverse=True)
    seen: set[str] = set()
    merged: List[Article] = []
    for item in ordered:
        key = item.url.strip()
        if not key or key in seen:
            continue
        seen.add(key)
        merged.append(item)
    return merged[:limit]


def build_news_payload(
    sources: Sequence[NewsSource],
    articles: Sequence[Article],
    errors: Sequence[Dict[str, str]],
) -> Dict[str, Any]:
    items = merge_articles(articles)
    payload: Dict[str, Any] = {
        "meta": {
            "updated": iso_now(),
            "mode": "rss",
            "feeds": [source.url for source in sources],
            "okCount": len(items),
            "failCount": len(errors),
        },
        "items": [item.to_dict() for item in items],
    }
    if errors:
        payload["errors"] = list(errors)
    return payload


def generate_news(config: AppConfig) -> Path:
    output = config.data_dir / NEWS_FILENAME
    articles, errors = gather_articles(config.news_sources)
    payload = build_news_payload(config.news_sources, articles, errors)
    write_json(output, payload)
    LOGGER.info(
        "Wrote %s (%d items, %d failed feeds)",
        output,
        len(payload["items"]),
        len(errors),
    )
    return output
