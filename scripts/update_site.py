#!/usr/bin/env python3
"""Refresh every Net Thud data file and re-render index.html."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional


def _add_src_to_path() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Runs the leagues, scores, upcoming, news, transfers and signals "
            "generators and renders the static page."
        ),
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for the generated JSON files (default: assets/data).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML configuration file.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Target HTML file path (default: index.html).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    _add_src_to_path()
    from netthud.__main__ import main as netthud_main

    args = build_parser().parse_args(argv)
    argv = []
    if args.config:
        argv += ["--config", str(args.config)]
    if args.data_dir:
        argv += ["--data-dir", str(args.data_dir)]
    command = ["all"]
    if args.output:
        command += ["--output", str(args.output)]
    return netthud_main(argv + command)


if __name__ == "__main__":  # pragma: no cover - manual execution
    raise SystemExit(main())
