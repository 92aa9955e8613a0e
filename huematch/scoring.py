"""Pick classification and points.

``evaluate_pick`` is pure: it reads the round's numbers and returns a
``Verdict`` that the engine applies.
"""
from __future__ import annotations

import math
from typing import Callable

from .colors import color_distance
from .constants import (
    ACCURACY_PENALTY,
    ACCURACY_POINTS_MAX,
    CLOSE_FACTOR,
    COMBO_MAX,
    COMBO_STEP,
    EXACT_THRESHOLD,
    LEVEL_BLOCK,
    PERFORMANCE_GAIN,
    PERFORMANCE_LOSS,
    PERFORMANCE_MAX,
    PERFORMANCE_MIN,
    SPEED_POINTS_MAX,
)
from .difficulty import close_match_limit, similarity_threshold
from .models import EndReason, Verdict

DistanceFn = Callable[[str, str], float]


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def close_tolerance(level: int, close_factor: float = CLOSE_FACTOR) -> float:
    return close_factor * (1.0 - similarity_threshold(level))


def starts_block(level: int) -> bool:
    return level % LEVEL_BLOCK == 0


def next_combo(combo: float, is_exact: bool) -> float:
    if is_exact:
        return min(COMBO_MAX, combo + COMBO_STEP)
    return 1.0


def next_performance_rating(rating: float, is_exact: bool) -> float:
    if is_exact:
        return round(min(PERFORMANCE_MAX, rating + PERFORMANCE_GAIN), 4)
    return round(max(PERFORMANCE_MIN, rating - PERFORMANCE_LOSS), 4)


def points_for(difference: float, time_left: float, selection_time: float, combo: float) -> tuple[int, int, int]:
    """Return (accuracy, speed, total) points for one pick."""
    time_bonus = max(0.0, time_left / selection_time) if selection_time > 0 else 0.0
    accuracy = max(0, ACCURACY_POINTS_MAX - round_half_up(difference * ACCURACY_PENALTY))
    speed = round_half_up(time_bonus * SPEED_POINTS_MAX)
    total = round_half_up((accuracy + speed) * combo)
    return accuracy, speed, total


def evaluate_pick(
    target: str,
    selected: str,
    *,
    time_left: float,
    selection_time: float,
    level: int,
    close_matches: int,
    combo_multiplier: float,
    distance: DistanceFn = color_distance,
    exact_threshold: float = EXACT_THRESHOLD,
    close_factor: float = CLOSE_FACTOR,
) -> Verdict:
    difference = float(distance(target, selected))
    is_exact = difference < exact_threshold
    is_close = not is_exact and difference < close_tolerance(level, close_factor)

    # a round at the start of a 10-level block begins with a clean slate
    closes = 0 if starts_block(level) else close_matches
    limit = close_match_limit(level)

    terminal = False
    reason = ""
    if is_exact:
        message = f"Perfect! {next_combo(combo_multiplier, True):.1f}x Combo!"
    elif is_close:
        closes += 1
        if closes > limit:
            terminal = True
            reason = EndReason.CLOSE_MATCHES.value
            message = "Game Over! Too many close matches."
        else:
            message = "Close enough!"
    else:
        terminal = True
        reason = EndReason.MISMATCH.value
        message = "Game Over! Color mismatch."

    accuracy, speed, total = points_for(difference, time_left, selection_time, combo_multiplier)
    return Verdict(
        terminal=terminal,
        reason=reason,
        is_exact_match=is_exact,
        is_close_match=is_close,
        difference=difference,
        total_points=total,
        accuracy_points=accuracy,
        speed_points=speed,
        new_combo_multiplier=next_combo(combo_multiplier, is_exact),
        new_close_matches=closes,
        message=message,
    )


def points_summary(verdict: Verdict) -> str:
    combo = verdict.new_combo_multiplier
    extra = f", Combo: {combo:.1f}x" if combo > 1 else ""
    return (
        f"You earned {verdict.total_points} points! "
        f"(Accuracy: {verdict.accuracy_points}, Speed: {verdict.speed_points}{extra})"
    )


__all__ = [
    "round_half_up",
    "close_tolerance",
    "starts_block",
    "next_combo",
    "next_performance_rating",
    "points_for",
    "evaluate_pick",
    "points_summary",
]
