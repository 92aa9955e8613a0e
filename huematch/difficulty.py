"""Level -> round parameters.

Option count and selection time add time pressure; the similarity threshold
independently shrinks the tolerance for close picks.
"""
from __future__ import annotations

from .constants import (
    CLOSE_MATCH_LATE_FROM,
    CLOSE_MATCH_LIMIT_EARLY,
    CLOSE_MATCH_LIMIT_LATE,
    OPTION_COUNT_MAX,
    OPTION_COUNT_MIN,
    SELECTION_TIME_BASE,
    SELECTION_TIME_MIN,
    SELECTION_TIME_STEP_LEVELS,
    SIMILARITY_MAX,
    VIEW_TIME,
)
from .models import Difficulty


def _check_level(level: int) -> None:
    if level < 1:
        raise ValueError(f"level must be >= 1, got {level}")


def option_count(level: int) -> int:
    _check_level(level)
    return min(OPTION_COUNT_MAX, OPTION_COUNT_MIN + level // 10)


def similarity_threshold(level: int) -> float:
    _check_level(level)
    if level <= 10:
        value = 0.70 + 0.01 * level
    elif level <= 30:
        value = 0.80 + 0.005 * (level - 10)
    elif level <= 50:
        value = 0.90 + 0.003 * (level - 30)
    else:
        value = 0.96 + 0.0005 * (level - 50)
    return min(SIMILARITY_MAX, round(value, 6))


def selection_time(level: int) -> int:
    _check_level(level)
    if level <= 10:
        return SELECTION_TIME_BASE
    if level <= 80:
        return max(SELECTION_TIME_MIN, SELECTION_TIME_BASE - (level - 10) // SELECTION_TIME_STEP_LEVELS)
    return SELECTION_TIME_MIN


def close_match_limit(level: int) -> int:
    return CLOSE_MATCH_LIMIT_EARLY if level < CLOSE_MATCH_LATE_FROM else CLOSE_MATCH_LIMIT_LATE


def difficulty(level: int) -> Difficulty:
    return Difficulty(
        option_count=option_count(level),
        similarity_threshold=similarity_threshold(level),
        view_time=VIEW_TIME,
        selection_time=selection_time(level),
    )


__all__ = [
    "option_count",
    "similarity_threshold",
    "selection_time",
    "close_match_limit",
    "difficulty",
]
