from __future__ import annotations


class HuematchError(Exception):
    """Base class for game errors."""


class GenerationError(HuematchError):
    """The color pool could not produce a valid round."""


class PersistenceError(HuematchError):
    """Saving or reading leaderboard / profile data failed."""


__all__ = ["HuematchError", "GenerationError", "PersistenceError"]
