"""FastAPI application for previewing the generated data files."""
from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Query

from .config import DEFAULT_DATA_DIR
from .probability import compute_hda

app = FastAPI(title="Net Thud data preview")

_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def _data_dir() -> Path:
    configured = os.environ.get("NETTHUD_DATA_DIR", "").strip()
    return Path(configured) if configured else DEFAULT_DATA_DIR


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/data/{name}")
def get_data(name: str) -> Any:
    """Return ``assets/data/<name>.json`` as published to the site."""

    if not _NAME_RE.match(name):
        raise HTTPException(status_code=404, detail=f"Unknown data file '{name}'.")
    path = _data_dir() / f"{name}.json"
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"{path.as_posix()} not found.") from None
    try:
        return json.loads(text)
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=f"{path.as_posix()} is not valid JSON: {exc}") from exc


@app.get("/hda")
def get_hda(
    home: float = Query(..., description="Home team rating."),
    away: float = Query(..., description="Away team rating."),
) -> Dict[str, float]:
    """Home/draw/away probabilities for two ratings."""

    return compute_hda(home, away).as_dict()
