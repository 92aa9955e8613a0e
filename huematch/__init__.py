"""Huematch - a timed color-matching game."""

__version__ = "0.3.0"
