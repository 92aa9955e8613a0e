from __future__ import annotations

from collections import deque
from typing import Deque, List


class InputQueue:
    """Swatch picks collected from mouse and keyboard between frames."""

    def __init__(self) -> None:
        self._q: Deque[str] = deque()

    def push(self, color: str) -> None:
        self._q.append(color)

    def pop_all(self) -> List[str]:
        out: List[str] = list(self._q)
        self._q.clear()
        return out

    def clear(self) -> None:
        self._q.clear()

    def __len__(self) -> int:
        return len(self._q)


__all__ = ["InputQueue"]
