from __future__ import annotations

from typing import Callable


class RoundClock:
    """Clock that hands out whole ticks of ``interval`` seconds.

    The engine pulls ticks with ``due_ticks()`` once per frame. ``stop()``
    freezes the clock and ``start()`` begins a fresh phase; time spent
    stopped or cancelled never produces ticks.
    """

    def __init__(self, now_fn: Callable[[], float], interval: float = 1.0) -> None:
        self._now = now_fn
        self.interval = float(interval)
        self.running = False
        self._anchor = 0.0
        self._carry = 0.0

    def start(self) -> None:
        self._carry = 0.0
        self._anchor = self._now()
        self.running = True

    def stop(self) -> None:
        if self.running:
            self._carry += max(0.0, self._now() - self._anchor)
            self.running = False

    def cancel(self) -> None:
        self.running = False
        self._carry = 0.0
        self._anchor = 0.0

    def elapsed(self) -> float:
        """Seconds accumulated toward the next tick."""
        if not self.running:
            return self._carry
        return self._carry + max(0.0, self._now() - self._anchor)

    def due_ticks(self) -> int:
        total = self.elapsed()
        n = int(total // self.interval)
        if n <= 0:
            return 0
        rest = total - n * self.interval
        self._carry = rest
        if self.running:
            self._anchor = self._now()
        return n

    def fraction(self) -> float:
        """Progress through the current tick, 0..1, for smooth bars."""
        return max(0.0, min(1.0, self.elapsed() / self.interval))


__all__ = ["RoundClock"]
