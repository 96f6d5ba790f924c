"""Configuration helpers for the Net Thud generators."""
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Sequence

import yaml

DEFAULT_DATA_DIR = Path("assets/data")
FOOTBALL_DATA_BASE_URL = "https://api.football-data.org/v4"
SITE_URL = "https://netthud.com/"

# football-data codes vary by plan; cups and smaller comps are only
# returned when the subscription covers them.
DEFAULT_UPCOMING_COMPETITIONS: Sequence[str] = (
    "PL",
    "PD",
    "SA",
    "BL1",
    "FL1",
    "DED",
    "PPL",
    "CL",
    "EL",
    "EC",
    "CLI",
    "FAC",
    "CDR",
    "DFB",
    "CIT",
)

DEFAULT_NEWS_FEEDS: Sequence[str] = (
    "https://feeds.bbci.co.uk/sport/football/rss.xml",
    "https://www.espn.com/espn/rss/soccer/news",
    "https://www.theguardian.com/football/rss",
)


class ConfigurationError(RuntimeError):
    """A generator is missing a credential or was given an unsupported option."""


@dataclass(slots=True)
class FootballDataConfig:
    """Settings required to talk to football-data.org."""

    token: str = ""
    provider: str = "football-data"
    base_url: str = FOOTBALL_DATA_BASE_URL
    competitions: Sequence[str] = DEFAULT_UPCOMING_COMPETITIONS
    upcoming_days: int = 7
    upcoming_limit: int = 80

    def require_token(self) -> str:
        if not self.token:
            raise ConfigurationError("Missing env: NETTHUD_SCORES_API_TOKEN")
        return self.token


@dataclass(slots=True)
class OpenAIConfig:
    api_key: str = ""
    model: str = "gpt-4o-mini"
    signals_model: str = "gpt-5"

    def require_key(self) -> str:
        if not self.api_key:
            raise ConfigurationError("Missing OPENAI_API_KEY env var (add as GitHub secret).")
        return self.api_key


@dataclass(slots=True)
class NewsSource:
    """Definition of a single RSS feed."""

    url: str
    name: str = ""
    limit: int = 50


@dataclass(slots=True)
class TransfersConfig:
    feed_url: str = ""
    max_items: int = 20


@dataclass(slots=True)
class AppConfig:
    """Root configuration model."""

    data_dir: Path = DEFAULT_DATA_DIR
    football_data: FootballDataConfig = field(default_factory=FootballDataConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    news_sources: Sequence[NewsSource] = field(
        default_factory=lambda: tuple(NewsSource(url=url) for url in DEFAULT_NEWS_FEEDS)
    )
    transfers: TransfersConfig = field(default_factory=TransfersConfig)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "AppConfig":
        config = cls()

        data_dir = str(mapping.get("data_dir", "") or "").strip()
        if data_dir:
            config.data_dir = Path(data_dir)

        fd_section = mapping.get("football_data")
        if isinstance(fd_section, Mapping):
            competitions = _string_tuple(fd_section.get("competitions"))
            config.football_data = FootballDataConfig(
                token=str(fd_section.get("token", "") or "").strip(),
                provider=str(fd_section.get("provider", "") or "").strip() or "football-data",
                base_url=str(fd_section.get("base_url", "") or "").strip() or FOOTBALL_DATA_BASE_URL,
                competitions=competitions or DEFAULT_UPCOMING_COMPETITIONS,
                upcoming_days=clamp_int(fd_section.get("upcoming_days"), 7, 1, 14),
                upcoming_limit=clamp_int(fd_section.get("upcoming_limit"), 80, 10, 200),
            )

        ai_section = mapping.get("openai")
        if isinstance(ai_section, Mapping):
            config.openai = OpenAIConfig(
                api_key=str(ai_section.get("api_key", "") or "").strip(),
                model=str(ai_section.get("model", "") or "").strip() or "gpt-4o-mini",
                signals_model=str(ai_section.get("signals_model", "") or "").strip() or "gpt-5",
            )

        raw_sources = mapping.get("news_sources")
        if isinstance(raw_sources, Sequence) and not isinstance(raw_sources, (str, bytes)):
            sources: List[NewsSource] = []
            for item in raw_sources:
                if isinstance(item, str):
                    item = {"url": item}
                if not isinstance(item, Mapping):
                    continue
                url = str(item.get("url", "") or "").strip()
                if not url:
                    continue
                name = str(item.get("name", "") or "").strip()
                limit = clamp_int(item.get("limit"), 50, 1, 500)
                sources.append(NewsSource(url=url, name=name, limit=limit))
            if sources:
                config.news_sources = tuple(sources)

        transfers_section = mapping.get("transfers")
        if isinstance(transfers_section, Mapping):
            config.transfers = TransfersConfig(
                feed_url=str(transfers_section.get("feed_url", "") or "").strip(),
                max_items=clamp_int(transfers_section.get("max_items"), 20, 4, 50),
            )

        return config

    def with_environment(self, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """Return a copy with ``NETTHUD_*`` and provider variables applied."""

        environ = os.environ if environ is None else environ

        def env(name: str) -> str:
            value = environ.get(name)
            return "" if value is None else str(value).strip()

        data_dir = Path(env("NETTHUD_DATA_DIR")) if env("NETTHUD_DATA_DIR") else self.data_dir

        football_data = self.football_data
        token = env("NETTHUD_SCORES_API_TOKEN") or env("FOOTBALL_DATA_TOKEN")
        if token:
            football_data = replace(football_data, token=token)
        if env("NETTHUD_SCORES_API_PROVIDER"):
            football_data = replace(football_data, provider=env("NETTHUD_SCORES_API_PROVIDER"))
        if env("NETTHUD_UPCOMING_DAYS"):
            football_data = replace(
                football_data,
                upcoming_days=clamp_int(env("NETTHUD_UPCOMING_DAYS"), 7, 1, 14),
            )
        if env("NETTHUD_UPCOMING_LIMIT"):
            football_data = replace(
                football_data,
                upcoming_limit=clamp_int(env("NETTHUD_UPCOMING_LIMIT"), 80, 10, 200),
            )
        competitions = _string_tuple(env("NETTHUD_UPCOMING_COMP_CODES"))
        if competitions:
            football_data = replace(football_data, competitions=competitions)

        openai = self.openai
        if env("OPENAI_API_KEY"):
            openai = replace(openai, api_key=env("OPENAI_API_KEY"))

        transfers = self.transfers
        if env("NETTHUD_TRANSFERS_FEED_URL"):
            transfers = replace(transfers, feed_url=env("NETTHUD_TRANSFERS_FEED_URL"))
        if env("NETTHUD_TRANSFERS_MAX"):
            transfers = replace(
                transfers,
                max_items=clamp_int(env("NETTHUD_TRANSFERS_MAX"), 20, 4, 50),
            )

        return replace(
            self,
            data_dir=data_dir,
            football_data=football_data,
            openai=openai,
            transfers=transfers,
        )


def clamp_int(value: object, default: int, lower: int, upper: int) -> int:
    """Parse ``value`` as a number and clamp it; zero or garbage means ``default``."""

    try:
        number = int(float(value))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        number = 0
    if not number:
        number = default
    return max(lower, min(upper, number))


def _string_tuple(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        candidates: Iterable[object] = value.split(",")
    elif isinstance(value, Sequence) and not isinstance(value, bytes):
        candidates = value
    else:
        return tuple()
    return tuple(str(item).strip() for item in candidates if str(item).strip())


def load_config(path: Path) -> AppConfig:
    """Load a configuration file from YAML."""

    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Configuration file must contain a mapping at the root.")
    return AppConfig.from_mapping(data)


def load_settings(
    path: Optional[Path] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Combine the optional YAML file with the process environment."""

    config = load_config(path) if path else AppConfig()
    return config.with_environment(environ)
