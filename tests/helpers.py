"""Shared fakes for engine tests."""
from concurrent.futures import Future

from huematch.difficulty import option_count
from huematch.errors import GenerationError
from huematch.models import ColorSet

TARGET = "#112233"
CLOSE = "#112234"
WRONG = "#ff0000"


def make_set(level, target=TARGET):
    n = option_count(level)
    others = [f"#0000{i:02x}" for i in range(1, n)]
    return ColorSet(target=target, options=[target] + others)


def table_distance(close_value=3.0):
    """Distance stub: exact for equal colors, CLOSE is near, anything else far."""
    def distance(a, b):
        if a == b:
            return 0.0
        if CLOSE in (a, b):
            return close_value
        return 80.0
    return distance


class FakeClock:
    def __init__(self, t=1000.0):
        self.t = t

    def __call__(self):
        return self.t

    def advance(self, seconds):
        self.t += seconds


class ImmediatePool:
    """Resolves every request right away."""

    def __init__(self, fail_at=None):
        self.requests = []
        self.fail_at = fail_at
        self.closed = False

    def request(self, level, performance_rating=1.0):
        self.requests.append((level, performance_rating))
        fut = Future()
        if self.fail_at is not None and level >= self.fail_at:
            fut.set_exception(GenerationError(f"no colors for level {level}"))
        else:
            fut.set_result(make_set(level))
        return fut

    def close(self):
        self.closed = True


class DeferredPool:
    """Hands out pending futures; the test resolves them explicitly."""

    def __init__(self):
        self.pending = []

    def request(self, level, performance_rating=1.0):
        fut = Future()
        self.pending.append((level, fut))
        return fut

    def resolve_next(self, colors=None):
        level, fut = self.pending.pop(0)
        if not fut.cancelled():
            fut.set_result(colors or make_set(level))
        return fut

    def fail_next(self, exc=None):
        level, fut = self.pending.pop(0)
        if not fut.cancelled():
            fut.set_exception(exc or GenerationError("worker died"))
        return fut

    def close(self):
        pass


class RecordingScores:
    def __init__(self, best=0):
        self.best = best
        self.runs = []

    def record_run(self, score, level):
        self.runs.append((score, level))
        return score > self.best


class RaisingPool(ImmediatePool):
    """Raises from ``request`` itself, like a pool whose executor is shut down."""

    def request(self, level, performance_rating=1.0):
        if self.fail_at is not None and level >= self.fail_at:
            raise RuntimeError("cannot schedule new futures after shutdown")
        return super().request(level, performance_rating)
