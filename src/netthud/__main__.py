from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from .ai_news import generate_ai_news
from .config import AppConfig, load_settings
from .leagues import generate_leagues
from .news import generate_news
from .scores import generate_live_demo, generate_scores
from .signals import generate_signals
from .site import DEFAULT_OUTPUT_PATH, generate_site
from .transfers import generate_transfers
from .upcoming import UPCOMING_FILENAME, generate_upcoming, patch_upcoming_ids

LOGGER = logging.getLogger("netthud")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

Command = Callable[[AppConfig, argparse.Namespace], object]


def configure_logging(verbose: bool = False) -> None:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)


def _scores(config: AppConfig, args: argparse.Namespace) -> object:
    return generate_scores(config, fallback_demo=getattr(args, "fallback_demo", False))


def _upcoming(config: AppConfig, args: argparse.Namespace) -> object:
    return generate_upcoming(
        config,
        with_probabilities=not getattr(args, "no_probabilities", False),
    )


def _patch_ids(config: AppConfig, args: argparse.Namespace) -> object:
    return patch_upcoming_ids(config.data_dir / UPCOMING_FILENAME)


def _site(config: AppConfig, args: argparse.Namespace) -> object:
    return generate_site(config, output=getattr(args, "output", None) or DEFAULT_OUTPUT_PATH)


COMMANDS: Dict[str, Command] = {
    "scores": _scores,
    "live": lambda config, args: generate_live_demo(config),
    "upcoming": _upcoming,
    "patch-upcoming-ids": _patch_ids,
    "news": lambda config, args: generate_news(config),
    "transfers": lambda config, args: generate_transfers(config),
    "ai-news": lambda config, args: generate_ai_news(config),
    "signals": lambda config, args: generate_signals(config),
    "leagues": lambda config, args: generate_leagues(config),
    "site": _site,
}

# Order used by ``all``: signals reads scores and news, the site reads everything.
ALL_SEQUENCE: Sequence[str] = (
    "leagues",
    "scores",
    "upcoming",
    "news",
    "transfers",
    "signals",
    "site",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netthud",
        description="Generate the Net Thud static data files and page.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML configuration file.",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for the generated JSON files (default: assets/data).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scores = subparsers.add_parser("scores", help="Write scores.json from football-data.org.")
    scores.add_argument(
        "--fallback-demo",
        action="store_true",
        help="Write demo scores when the provider fails instead of exiting with an error.",
    )
    subparsers.add_parser("live", help="Write demo scores.json (no API needed).")
    upcoming = subparsers.add_parser("upcoming", help="Write upcoming.json with H/D/A estimates.")
    upcoming.add_argument(
        "--no-probabilities",
        action="store_true",
        help="Skip the standings requests and the H/D/A estimates.",
    )
    subparsers.add_parser("patch-upcoming-ids", help="Add upcoming:<matchId> ids to upcoming.json.")
    subparsers.add_parser("news", help="Write ai-news.json from RSS feeds.")
    subparsers.add_parser("transfers", help="Write transfers.json from feed, seed or demo items.")
    subparsers.add_parser("ai-news", help="Write ai-news.json from match data via OpenAI.")
    subparsers.add_parser("signals", help="Write signals.json from scores and news via OpenAI.")
    subparsers.add_parser("leagues", help="Write leagues.json for the league chips.")
    site = subparsers.add_parser("site", help="Render index.html from the JSON files.")
    site.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help="Target HTML file path (default: index.html).",
    )
    run_all = subparsers.add_parser("all", help="Run every generator, then render the site.")
    run_all.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help="Target HTML file path for the rendered site (default: index.html).",
    )
    return parser


def run_command(name: str, config: AppConfig, args: argparse.Namespace) -> bool:
    try:
        COMMANDS[name](config, args)
    except Exception as exc:
        LOGGER.error("%s failed: %s", name, exc)
        LOGGER.debug("Traceback for %s", name, exc_info=True)
        return False
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        config = load_settings(args.config)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not load configuration: %s", exc)
        return 1
    if args.data_dir:
        config.data_dir = args.data_dir

    if args.command == "all":
        failures = [name for name in ALL_SEQUENCE if not run_command(name, config, args)]
        if failures:
            LOGGER.error("Failed generators: %s", ", ".join(failures))
            return 1
        return 0

    return 0 if run_command(args.command, config, args) else 1


if __name__ == "__main__":
    raise SystemExit(main())
