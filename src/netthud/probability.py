"""Home/draw/away probabilities from league-standings strength ratings."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

PPG_WEIGHT = 1.0
GOAL_DIFF_WEIGHT = 0.35
GOALS_FOR_WEIGHT = 0.10

HOME_ADVANTAGE = 0.18
STEEPNESS = 1.65
CLOSENESS_DECAY = 1.25
DRAW_BASE = 0.22
DRAW_CLOSENESS_BONUS = 0.12
DRAW_MIN = 0.18
DRAW_MAX = 0.36


@dataclass(frozen=True)
class HDA:
    home: float
    draw: float
    away: float

    def as_dict(self) -> Dict[str, float]:
        return {"home": self.home, "draw": self.draw, "away": self.away}


# Sums to 1.00 only because of the chosen constants.
NEUTRAL_HDA = HDA(home=0.34, draw=0.32, away=0.34)


def _as_finite(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def team_rating(points: Any, goal_difference: Any, goals_for: Any, played: Any) -> float:
    """Points per game plus weighted goal difference and goals scored per game.

    Returns NaN when the row cannot be rated (no games played or non-numeric
    values), which :func:`compute_hda` maps to the neutral triple.
    """

    games = _as_finite(played)
    pts = _as_finite(points)
    gd = _as_finite(goal_difference)
    gf = _as_finite(goals_for)
    if games is None or games <= 0 or pts is None or gd is None or gf is None:
        return math.nan
    return (
        PPG_WEIGHT * pts / games
        + GOAL_DIFF_WEIGHT * (gd / games)
        + GOALS_FOR_WEIGHT * (gf / games)
    )


def ratings_from_standings(rows: Iterable[Mapping[str, Any]]) -> Dict[int, float]:
    """Map football-data standings rows to ``{team_id: rating}``."""

    ratings: Dict[int, float] = {}
    for row in rows:
        if not isinstance(row, Mapping):
            continue
        team = row.get("team") or {}
        team_id = team.get("id") if isinstance(team, Mapping) else None
        if team_id is None:
            continue
        ratings[team_id] = team_rating(
            row.get("points"),
            row.get("goalDifference"),
            row.get("goalsFor"),
            row.get("playedGames"),
        )
    return ratings


def _sigmoid(value: float) -> float:
    if value >= 0:
        return 1.0 / (1.0 + math.exp(-value))
    exp_value = math.exp(value)
    return exp_value / (1.0 + exp_value)


def compute_hda(
    home_rating: Any,
    away_rating: Any,
    *,
    home_advantage: float = HOME_ADVANTAGE,
    steepness: float = STEEPNESS,
) -> HDA:
    """Turn two team ratings into a home/draw/away distribution.

    A logistic curve over the rating difference (shifted by the home
    advantage) splits the non-draw mass; the draw share grows as the two
    ratings converge and is clamped to ``[DRAW_MIN, DRAW_MAX]``. Non-finite
    input yields :data:`NEUTRAL_HDA`. Values are rounded to four decimals with
    the rounding residue folded into the draw so the triple still sums to 1.
    """

    home_value = _as_finite(home_rating)
    away_value = _as_finite(away_rating)
    if home_value is None or away_value is None:
        return NEUTRAL_HDA

    diff = home_value - away_value
    x = diff + home_advantage
    win_no_draw = _sigmoid(steepness * x)

    closeness = math.exp(-CLOSENESS_DECAY * abs(diff))
    draw = min(DRAW_MAX, max(DRAW_MIN, DRAW_BASE + DRAW_CLOSENESS_BONUS * closeness))

    home = (1.0 - draw) * win_no_draw
    away = (1.0 - draw) * (1.0 - win_no_draw)

    total = home + draw + away
    home /= total
    draw /= total
    away /= total

    home = round(home, 4)
    away = round(away, 4)
    draw = round(1.0 - home - away, 4)
    return HDA(home=home, draw=draw, away=away)
