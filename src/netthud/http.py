"""Shared HTTP helpers with retry and backoff."""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

import requests

LOGGER = logging.getLogger(__name__)

USER_AGENT = "netthud-bot/1.0 (+https://netthud.com)"
REQUEST_HEADERS = {"User-Agent": USER_AGENT}
JSON_ACCEPT_HEADER = {"Accept": "application/json"}
RSS_ACCEPT_HEADER = {
    "Accept": "application/rss+xml, application/xml;q=0.9, text/xml;q=0.8, */*;q=0.1"
}
DEFAULT_TIMEOUT = 30
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def http_get(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = 3,
    delay_seconds: float = 2.0,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """GET ``url``; rate limits, 5xx and connection errors are retried."""

    merged_headers: Dict[str, str] = dict(REQUEST_HEADERS)
    if headers:
        merged_headers.update(headers)
    getter = session.get if session is not None else requests.get
    attempts = max(1, retries)
    for attempt in range(attempts):
        try:
            response = getter(url, headers=merged_headers, params=params, timeout=timeout)
            if response.status_code in RETRYABLE_STATUS_CODES and attempt < attempts - 1:
                LOGGER.debug("Retryable status %s from %s", response.status_code, url)
            else:
                return response
        except (requests.ConnectionError, requests.Timeout) as exc:
            if attempt == attempts - 1:
                raise
            LOGGER.debug("Request to %s failed (%s), retrying", url, exc)
        time.sleep(delay_seconds * (2 ** attempt))
    raise RuntimeError(f"Unknown error while fetching {url}")  # pragma: no cover


def fetch_json(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, Any]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = 3,
) -> Any:
    response = http_get(
        url,
        headers={**JSON_ACCEPT_HEADER, **(headers or {})},
        params=params,
        timeout=timeout,
        retries=retries,
    )
    response.raise_for_status()
    return response.json()


def fetch_text(
    url: str,
    *,
    headers: Optional[Mapping[str, str]] = None,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = 3,
) -> str:
    response = http_get(url, headers=headers, timeout=timeout, retries=retries)
    response.raise_for_status()
    return response.text
