"""Color pool: target + candidate swatches for a level.

Distractors are placed at controlled delta E from the target. When the close
tolerance for the level leaves room for it, one distractor is a near miss that
still counts as a close pick; the rest sit beyond the tolerance.
"""
from __future__ import annotations

import logging
import math
import random
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence

from .colors import delta_e, hex_to_lab, hsv_to_hex, lab_to_hex, normalize_hex
from .constants import (
    DISTRACTOR_MIN_SPACING,
    DISTRACTOR_SPREAD,
    EXACT_THRESHOLD,
    POOL_ATTEMPTS,
)
from .difficulty import difficulty
from .errors import GenerationError
from .models import ColorSet
from .scoring import close_tolerance

logger = logging.getLogger(__name__)

TARGET_TRIES = 8


def _random_target(rng: random.Random) -> str:
    return hsv_to_hex(rng.random(), rng.uniform(0.35, 0.95), rng.uniform(0.35, 0.95))


def _unit_vector(rng: random.Random) -> tuple[float, float, float]:
    while True:
        v = (rng.gauss(0, 1), rng.gauss(0, 1), rng.gauss(0, 1))
        n = math.sqrt(sum(c * c for c in v))
        if n > 1e-9:
            return v[0] / n, v[1] / n, v[2] / n


def _sample_at_distance(
    rng: random.Random,
    target: str,
    lo: float,
    hi: float,
    taken: Sequence[str],
) -> Optional[str]:
    """Find a color whose delta E from ``target`` lies in [lo, hi]."""
    base = hex_to_lab(target)
    taken_labs = [hex_to_lab(c) for c in taken]
    for _ in range(POOL_ATTEMPTS):
        d = rng.uniform(lo, hi)
        u = _unit_vector(rng)
        candidate = lab_to_hex((base[0] + u[0] * d, base[1] + u[1] * d, base[2] + u[2] * d))
        if candidate in taken:
            continue
        lab = hex_to_lab(candidate)
        if not lo <= delta_e(base, lab) <= hi:
            continue
        if any(delta_e(lab, other) < DISTRACTOR_MIN_SPACING for other in taken_labs):
            continue
        return candidate
    return None


def distractor_bands(level: int, performance_rating: float = 1.0) -> tuple[Optional[tuple[float, float]], tuple[float, float]]:
    """Return (near-miss band or None, far band) in delta E for ``level``."""
    sim = difficulty(level).similarity_threshold
    tol = close_tolerance(level)
    near = None
    if tol * 0.9 - (EXACT_THRESHOLD + 0.5) >= 0.5:
        near = (EXACT_THRESHOLD + 0.5, tol * 0.9)
    lo = max(tol * 1.15, EXACT_THRESHOLD + 1.0)
    spread = DISTRACTOR_SPREAD * (1.0 - sim) / max(0.5, performance_rating)
    return near, (lo, lo + spread + 4.0)


def generate_options(level: int, performance_rating: float = 1.0, rng: Optional[random.Random] = None) -> ColorSet:
    rng = rng or random.Random()
    count = difficulty(level).option_count
    near, far = distractor_bands(level, performance_rating)

    for _ in range(TARGET_TRIES):
        target = _random_target(rng)
        chosen: List[str] = [target]
        if near is not None:
            c = _sample_at_distance(rng, target, near[0], near[1], chosen)
            if c is not None:
                chosen.append(c)
        while len(chosen) < count:
            c = _sample_at_distance(rng, target, far[0], far[1], chosen)
            if c is None:
                break
            chosen.append(c)
        if len(chosen) == count:
            options = list(chosen)
            rng.shuffle(options)
            return validate_color_set(ColorSet(target=target, options=options), count)
        logger.debug("Target %s too close to gamut edge for level %d, retrying", target, level)

    raise GenerationError(f"could not build {count} options for level {level}")


def validate_color_set(colors: ColorSet, expected_count: int) -> ColorSet:
    try:
        target = normalize_hex(colors.target)
        options = [normalize_hex(c) for c in colors.options]
    except (AttributeError, TypeError, ValueError) as exc:
        raise GenerationError(f"malformed color set: {exc}") from exc
    if len(options) != expected_count:
        raise GenerationError(f"expected {expected_count} options, got {len(options)}")
    if options.count(target) != 1:
        raise GenerationError("options must contain the target exactly once")
    return ColorSet(target=target, options=options)


class ColorPool:
    """Runs generation on a worker thread; results come back as futures."""

    def __init__(self, *, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="color-pool")

    def request(self, level: int, performance_rating: float = 1.0) -> "Future[ColorSet]":
        return self._executor.submit(generate_options, level, performance_rating, self._rng)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)


class InlineColorPool:
    """Same contract as ColorPool, generating on the calling thread."""

    def __init__(self, *, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def request(self, level: int, performance_rating: float = 1.0) -> "Future[ColorSet]":
        fut: "Future[ColorSet]" = Future()
        try:
            fut.set_result(generate_options(level, performance_rating, self._rng))
        except GenerationError as exc:
            fut.set_exception(exc)
        return fut

    def close(self) -> None:
        pass


__all__ = [
    "distractor_bands",
    "generate_options",
    "validate_color_set",
    "ColorPool",
    "InlineColorPool",
]
