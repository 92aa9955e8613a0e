from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .constants import TOAST_HOLD_SEC, TOAST_IN_SEC, TOAST_MAX_VISIBLE, TOAST_OUT_SEC

logger = logging.getLogger(__name__)


@dataclass
class Toast:
    title: str
    description: str
    started: float
    kind: str = "info"


class ToastManager:
    """Sink for feedback strings; the renderer draws whatever is active."""

    def __init__(
        self,
        now_fn: Callable[[], float] = time.time,
        *,
        in_sec: float = TOAST_IN_SEC,
        hold_sec: float = TOAST_HOLD_SEC,
        out_sec: float = TOAST_OUT_SEC,
    ) -> None:
        self._now = now_fn
        self.in_sec = float(in_sec)
        self.hold_sec = float(hold_sec)
        self.out_sec = float(out_sec)
        self.total = self.in_sec + self.hold_sec + self.out_sec
        self.toasts: List[Toast] = []

    def push(self, title: str, description: str = "", *, kind: str = "info") -> Toast:
        toast = Toast(title=title, description=description, started=self._now(), kind=kind)
        self.toasts.append(toast)
        logger.info("toast %s: %s", title, description)
        return toast

    def prune(self, now: Optional[float] = None) -> None:
        now = self._now() if now is None else now
        self.toasts = [t for t in self.toasts if now - t.started < self.total]

    def active(self, now: Optional[float] = None) -> List[Toast]:
        now = self._now() if now is None else now
        self.prune(now)
        return self.toasts[-TOAST_MAX_VISIBLE:]

    def latest(self, kind: Optional[str] = None) -> Optional[Toast]:
        for toast in reversed(self.toasts):
            if kind is None or toast.kind == kind:
                return toast
        return None

    def phase(self, toast: Toast, now: Optional[float] = None) -> Tuple[str, float]:
        now = self._now() if now is None else now
        t = max(0.0, min(self.total, now - toast.started))
        if t <= self.in_sec:
            return "in", (t / max(1e-6, self.in_sec))
        if t <= self.in_sec + self.hold_sec:
            return "hold", 1.0
        return "out", ((t - self.in_sec - self.hold_sec) / max(1e-6, self.out_sec))

    def clear(self) -> None:
        self.toasts.clear()


__all__ = ["Toast", "ToastManager"]
