from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List


class Phase(Enum):
    IDLE = auto()
    LOADING = auto()
    SHOWING_TARGET = auto()
    AWAITING_SELECTION = auto()
    RESOLVING = auto()
    GAME_OVER = auto()


class Scene(Enum):
    MENU = auto()
    GAME = auto()
    OVER = auto()
    LEADERBOARD = auto()


class EndReason(str, Enum):
    MISMATCH = "Color mismatch"
    CLOSE_MATCHES = "Too many close matches"
    TIME_UP = "Time's up"
    GENERATION = "Could not generate the next round"


@dataclass(frozen=True)
class Difficulty:
    option_count: int
    similarity_threshold: float
    view_time: int
    selection_time: int


@dataclass(frozen=True)
class ColorSet:
    target: str
    options: List[str]


@dataclass
class GameState:
    level: int = 1
    score: int = 0
    target_color: str = ""
    options: List[str] = field(default_factory=list)
    time_left: int = 0
    is_playing: bool = False
    close_matches: int = 0
    combo_multiplier: float = 1.0
    performance_rating: float = 1.0
    phase: Phase = Phase.IDLE


@dataclass(frozen=True)
class Verdict:
    """Outcome of one pick; the engine applies it, evaluation never mutates state."""

    terminal: bool
    reason: str
    is_exact_match: bool
    is_close_match: bool
    difference: float
    total_points: int
    accuracy_points: int
    speed_points: int
    new_combo_multiplier: float
    new_close_matches: int
    message: str = ""


@dataclass
class PersistedUser:
    username: str
    highest_score: int = 0


@dataclass(frozen=True)
class UserLookup:
    exists: bool
    highest_score: int = 0


@dataclass(frozen=True)
class RunResult:
    score: int
    level: int
    reason: str
    is_new_high_score: bool = False


__all__ = [
    "Phase",
    "Scene",
    "EndReason",
    "Difficulty",
    "ColorSet",
    "GameState",
    "Verdict",
    "PersistedUser",
    "UserLookup",
    "RunResult",
]
