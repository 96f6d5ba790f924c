"""Short "Goal Intelligence" cards derived from the scores and news files."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .config import AppConfig
from .llm import LlmClient, extract_json
from .news import NEWS_FILENAME
from .scores import SCORES_FILENAME
from .storage import iso_now, list_items, read_json_safe, write_json

LOGGER = logging.getLogger(__name__)

SIGNALS_FILENAME = "signals.json"
MAX_SIGNALS = 8
SCORE_CONTEXT = 25
NEWS_CONTEXT = 10
SIGNAL_TAGS: Sequence[str] = ("form", "upset", "title-race", "derby", "trend", "context")

OFFLINE_ITEM = {
    "title": "Signals offline",
    "body": "Add OPENAI_API_KEY in GitHub Secrets to generate signals from real scores/news.",
    "tag": "setup",
}
PARSE_ERROR_ITEM = {
    "title": "Signals parse error",
    "body": "Model output was not valid JSON.",
    "tag": "setup",
}


def build_prompt(score_items: Sequence[Any], news_items: Sequence[Any]) -> str:
    tags = ", ".join(f'"{tag}"' for tag in SIGNAL_TAGS)
    return f"""
You are Net Thud "Goal Intelligence".
Generate 5 short, data-grounded signals from the provided FINAL SCORES and TOP NEWS.
Rules:
- No guessing. Only infer from the inputs.
- Each signal: title (max 8 words), 1-2 sentence body, tag (one of: {tags}).
- If inputs are empty, output 1 item explaining "No data yet".

FINAL SCORES (JSON):
{json.dumps(list(score_items), indent=2, ensure_ascii=False)}

TOP NEWS (JSON):
{json.dumps(list(news_items), indent=2, ensure_ascii=False)}

Return STRICT JSON:
{{ "items": [ {{ "title": "...", "body": "...", "tag": "..." }} ] }}
"""


def parse_signals(text: str) -> List[Dict[str, str]]:
    """Decode model output into signal cards; undecodable output yields one error card."""

    try:
        parsed = json.loads(text)
    except ValueError:
        try:
            parsed = extract_json(text)
        except ValueError:
            LOGGER.warning("Signals response was not valid JSON")
            return [dict(PARSE_ERROR_ITEM)]
    raw_items = list_items(parsed, "items", "signals")
    items: List[Dict[str, str]] = []
    for raw in raw_items[:MAX_SIGNALS]:
        if not isinstance(raw, dict):
            continue
        items.append(
            {
                "title": str(raw.get("title") or ""),
                "body": str(raw.get("body") or ""),
                "tag": str(raw.get("tag") or ""),
            }
        )
    return items


def load_context(data_dir: Path) -> tuple[list, list]:
    scores = read_json_safe(data_dir / SCORES_FILENAME)
    news = read_json_safe(data_dir / NEWS_FILENAME)
    return list_items(scores)[:SCORE_CONTEXT], list_items(news)[:NEWS_CONTEXT]


def build_signals(config: AppConfig, *, llm: Optional[LlmClient] = None) -> Dict[str, Any]:
    if not config.openai.api_key and llm is None:
        return {"generatedAt": iso_now(), "mode": "no-openai-key", "items": [dict(OFFLINE_ITEM)]}

    score_items, news_items = load_context(config.data_dir)
    llm = llm or LlmClient(config.openai)
    text = llm.respond_text(build_prompt(score_items, news_items))
    return {"generatedAt": iso_now(), "mode": "openai", "items": parse_signals(text)}


def generate_signals(config: AppConfig, *, llm: Optional[LlmClient] = None) -> Path:
    output = config.data_dir / SIGNALS_FILENAME
    payload = build_signals(config, llm=llm)
    write_json(output, payload)
    LOGGER.info("Wrote %s (%d items) mode=%s", output, len(payload["items"]), payload["mode"])
    return output
