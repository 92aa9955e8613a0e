"""Round state machine.

One ``GameEngine`` per window. ``start()``, ``tick()``, ``select()`` and
``update()`` are the only mutators; the renderer reads ``state``.

Phases::

    IDLE -> LOADING -> SHOWING_TARGET -> AWAITING_SELECTION -> RESOLVING
                            ^                   |                  |
                            +-------------------+------------------+
    any playing phase -> GAME_OVER (wrong pick, too many close picks,
                                    timeout, color pool failure)

Next-round colors come from the pool as futures. A pick moves the round to
RESOLVING; a second pick while RESOLVING is dropped. Futures are tagged with
a run token so results that arrive after the run ended (or restarted) are
discarded.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import Future
from typing import Callable, Optional, Protocol

from .colors import color_distance
from .constants import TICK_SECONDS
from .difficulty import close_match_limit, difficulty
from .models import ColorSet, EndReason, GameState, Phase, RunResult, Verdict
from .notifications import ToastManager
from .palette import validate_color_set
from .scoring import evaluate_pick, next_performance_rating, points_summary, starts_block
from .timer import RoundClock

logger = logging.getLogger(__name__)

TICKING = (Phase.SHOWING_TARGET, Phase.AWAITING_SELECTION)


class ColorSource(Protocol):
    def request(self, level: int, performance_rating: float = 1.0) -> "Future[ColorSet]": ...

    def close(self) -> None: ...


class RunRecorder(Protocol):
    def record_run(self, score: int, level: int) -> bool: ...


class GameEngine:
    def __init__(
        self,
        pool: ColorSource,
        *,
        toasts: Optional[ToastManager] = None,
        scores: Optional[RunRecorder] = None,
        now_fn: Callable[[], float] = time.time,
        distance: Callable[[str, str], float] = color_distance,
    ) -> None:
        self.pool = pool
        self.toasts = toasts or ToastManager(now_fn)
        self.scores = scores
        self.distance = distance
        self.clock = RoundClock(now_fn, TICK_SECONDS)

        self.state = GameState()
        self.processing = False
        self.last_verdict: Optional[Verdict] = None
        self.last_result: Optional[RunResult] = None

        self._token = 0
        self._pending: Optional[tuple[int, str, "Future[ColorSet]"]] = None
        self._pending_verdict: Optional[Verdict] = None

    # ---- Read helpers ----

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def is_playing(self) -> bool:
        return self.state.is_playing

    @property
    def close_match_limit(self) -> int:
        return close_match_limit(self.state.level)

    def phase_duration(self) -> int:
        d = difficulty(self.state.level)
        if self.state.phase is Phase.SHOWING_TARGET:
            return d.view_time
        return d.selection_time

    def time_ratio(self) -> float:
        if self.state.phase not in TICKING:
            return 0.0
        left = self.state.time_left - (self.clock.fraction() if self.clock.running else 0.0)
        return max(0.0, min(1.0, left / max(1, self.phase_duration())))

    # ---- Transitions ----

    def start(self) -> bool:
        if self.state.phase not in (Phase.IDLE, Phase.GAME_OVER):
            logger.debug("start() ignored in %s", self.state.phase.name)
            return False
        self._discard_pending()
        self.clock.cancel()
        self.state = GameState(phase=Phase.LOADING)
        self.processing = False
        self.last_verdict = None
        self.last_result = None
        logger.info("Starting run")
        self._request(1, 1.0, "start")
        self.poll()
        return True

    def tick(self) -> None:
        s = self.state
        if s.phase not in TICKING:
            return
        s.time_left = max(0, s.time_left - 1)
        if s.time_left > 0:
            return
        if s.phase is Phase.SHOWING_TARGET:
            s.phase = Phase.AWAITING_SELECTION
            s.time_left = difficulty(s.level).selection_time
            logger.debug("Level %d: awaiting selection (%ds)", s.level, s.time_left)
        else:
            self.toasts.push("Game Over! Time's up.", kind="feedback")
            self._game_over(EndReason.TIME_UP.value)

    def select(self, color: str) -> Optional[Verdict]:
        s = self.state
        if s.phase is not Phase.AWAITING_SELECTION or self.processing:
            logger.debug("Selection %s ignored in %s", color, s.phase.name)
            return None
        self.processing = True

        verdict = evaluate_pick(
            s.target_color,
            color,
            time_left=s.time_left,
            selection_time=difficulty(s.level).selection_time,
            level=s.level,
            close_matches=s.close_matches,
            combo_multiplier=s.combo_multiplier,
            distance=self.distance,
        )
        self.last_verdict = verdict
        self.toasts.push(verdict.message, kind="feedback")
        self.toasts.push("Color Selected!", points_summary(verdict))

        if verdict.terminal:
            s.combo_multiplier = verdict.new_combo_multiplier
            s.close_matches = verdict.new_close_matches
            self._game_over(verdict.reason)
            return verdict

        s.phase = Phase.RESOLVING
        self.clock.stop()
        self._pending_verdict = verdict
        rating = next_performance_rating(s.performance_rating, verdict.is_exact_match)
        self._request(s.level + 1, rating, "advance")
        self.poll()
        return verdict

    def update(self) -> None:
        """Per-frame driver: apply finished color requests, then pump ticks."""
        self.poll()
        for _ in range(self.clock.due_ticks()):
            if self.state.phase not in TICKING:
                break
            self.tick()

    def poll(self) -> None:
        if self._pending is None:
            return
        token, kind, fut = self._pending
        if not fut.done():
            return
        self._pending = None
        if token != self._token:
            logger.debug("Dropping stale %s result", kind)
            return

        next_level = 1 if kind == "start" else self.state.level + 1
        try:
            colors = validate_color_set(fut.result(), difficulty(next_level).option_count)
        except Exception as exc:  # noqa: BLE001 - any pool failure ends the round
            self._generation_failed(kind, exc)
            return

        if kind == "start":
            self._begin_round(1, colors)
            return

        verdict = self._pending_verdict
        self._pending_verdict = None
        s = self.state
        if verdict is not None:
            s.score += verdict.total_points
            s.combo_multiplier = verdict.new_combo_multiplier
            s.close_matches = verdict.new_close_matches
            s.performance_rating = next_performance_rating(s.performance_rating, verdict.is_exact_match)
        self._begin_round(next_level, colors)

    def to_idle(self) -> None:
        self._discard_pending()
        self.clock.cancel()
        self.processing = False
        self.state.is_playing = False
        self.state.phase = Phase.IDLE

    def shutdown(self) -> None:
        self.to_idle()
        self.pool.close()

    # ---- Internals ----

    def _request(self, level: int, rating: float, kind: str) -> None:
        try:
            fut = self.pool.request(level, rating)
        except Exception as exc:  # noqa: BLE001 - same handling as a failed future
            fut = Future()
            fut.set_exception(exc)
        self._pending = (self._token, kind, fut)

    def _discard_pending(self) -> None:
        self._token += 1
        if self._pending is not None:
            self._pending[2].cancel()
        self._pending = None
        self._pending_verdict = None

    def _begin_round(self, level: int, colors: ColorSet) -> None:
        s = self.state
        s.level = level
        if starts_block(level):
            s.close_matches = 0
        s.target_color = colors.target
        s.options = list(colors.options)
        s.time_left = difficulty(level).view_time
        s.phase = Phase.SHOWING_TARGET
        s.is_playing = True
        self.processing = False
        self.clock.start()
        logger.info("Level %d: %d options, score %d", level, len(s.options), s.score)

    def _generation_failed(self, kind: str, exc: BaseException) -> None:
        logger.warning("Color generation failed (%s): %s", kind, exc)
        if kind == "start":
            self.to_idle()
            self.toasts.push("Error", "Failed to start the game. Please try again.", kind="error")
            return
        self._game_over(EndReason.GENERATION.value)

    def _game_over(self, reason: str) -> None:
        self._discard_pending()
        self.clock.cancel()
        s = self.state
        s.phase = Phase.GAME_OVER
        s.is_playing = False
        self.processing = False
        logger.info("Game over at level %d with %d points: %s", s.level, s.score, reason)

        is_new = False
        if self.scores is not None:
            is_new = self.scores.record_run(s.score, s.level)
        self.last_result = RunResult(score=s.score, level=s.level, reason=reason, is_new_high_score=is_new)


__all__ = ["GameEngine", "ColorSource", "RunRecorder"]
