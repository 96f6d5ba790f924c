"""Thin wrapper around the OpenAI client used by the AI generators."""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from openai import OpenAI

from .config import OpenAIConfig

LOGGER = logging.getLogger(__name__)

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}|\[[\s\S]*\]")


def extract_json(text: str) -> Any:
    """Parse the first JSON object or array found in ``text``."""

    match = _JSON_BLOCK_RE.search(text or "")
    if not match:
        raise ValueError("No JSON found in model response")
    return json.loads(match.group(0))


def _output_text(response: Any) -> str:
    text = getattr(response, "output_text", None)
    if text:
        return str(text).strip()
    chunks = []
    for item in getattr(response, "output", None) or []:
        for part in getattr(item, "content", None) or []:
            if getattr(part, "type", None) == "output_text" and getattr(part, "text", None):
                chunks.append(part.text)
    return "".join(chunks).strip()


class LlmClient:
    def __init__(self, config: OpenAIConfig, *, client: Optional[Any] = None) -> None:
        self.config = config
        self._client = client if client is not None else OpenAI(api_key=config.require_key())

    def chat_json(
        self,
        prompt: str,
        *,
        system: str,
        schema_hint: str = "",
        model: Optional[str] = None,
        temperature: float = 0.4,
    ) -> Any:
        """Chat completion in JSON mode; returns the decoded object."""

        content = prompt
        if schema_hint:
            content = f"{prompt}\n\nReturn JSON only matching this shape:\n{schema_hint}"
        model = model or self.config.model
        LOGGER.debug("OpenAI chat call, model=%s", model)
        response = self._client.chat.completions.create(
            model=model,
            temperature=temperature,
            response_format={"type": "json_object"},
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": content},
            ],
        )
        raw = response.choices[0].message.content or "{}"
        return json.loads(raw)

    def respond_text(self, prompt: str, *, model: Optional[str] = None) -> str:
        """Responses API call returning the concatenated output text."""

        model = model or self.config.signals_model
        LOGGER.debug("OpenAI responses call, model=%s", model)
        response = self._client.responses.create(
            model=model,
            input=[{"role": "user", "content": prompt}],
        )
        return _output_text(response)
