"""Leaderboard store and end-of-run score keeping.

``Leaderboard`` is the persistence side: a JSON file of best runs per
username. ``ScoreKeeper`` is the glue the engine calls when a run ends; it
owns the local profile and never lets a storage failure touch the run.
"""
from __future__ import annotations

import json
import logging
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from .config import CFG, save_config
from .constants import LEADERBOARD_SIZE, USERNAME_MAX_LEN
from .errors import PersistenceError
from .models import PersistedUser, UserLookup
from .notifications import ToastManager

logger = logging.getLogger(__name__)


def clean_username(name: str) -> str:
    return " ".join(str(name or "").split())[:USERNAME_MAX_LEN]


class Leaderboard:
    def __init__(self, path: str) -> None:
        self.path = path
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {"users": {}}
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"cannot read leaderboard {self.path}: {exc}") from exc
        if not isinstance(data, dict) or not isinstance(data.get("users"), dict):
            raise PersistenceError(f"leaderboard {self.path} is malformed")
        return data

    def _write(self, data: Dict[str, Any]) -> None:
        tmp = f"{self.path}.tmp"
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)
        except OSError as exc:
            raise PersistenceError(f"cannot write leaderboard {self.path}: {exc}") from exc

    def report_run_end(self, username: str, score: int, level: int) -> PersistedUser:
        name = clean_username(username)
        if not name:
            raise PersistenceError("username is empty")
        with self._lock:
            data = self._read()
            entry = data["users"].get(name) or {"highest_score": 0, "best_level": 0, "runs": 0}
            entry["runs"] = int(entry.get("runs", 0)) + 1
            if int(score) > int(entry.get("highest_score", 0)):
                entry["highest_score"] = int(score)
                entry["best_level"] = int(level)
            entry["updated"] = time.time()
            data["users"][name] = entry
            self._write(data)
        logger.info("Recorded run for %s: score=%d level=%d", name, score, level)
        return PersistedUser(username=name, highest_score=int(entry["highest_score"]))

    def lookup_user(self, username: str) -> UserLookup:
        name = clean_username(username)
        with self._lock:
            entry = self._read()["users"].get(name)
        if entry is None:
            return UserLookup(exists=False)
        return UserLookup(exists=True, highest_score=int(entry.get("highest_score", 0)))

    def top(self, limit: int = LEADERBOARD_SIZE) -> List[Dict[str, Any]]:
        with self._lock:
            users = self._read()["users"]
        rows = [
            {"username": name, "highest_score": int(e.get("highest_score", 0)), "best_level": int(e.get("best_level", 0))}
            for name, e in users.items()
        ]
        rows.sort(key=lambda r: (-r["highest_score"], -r["best_level"], r["username"]))
        return rows[:limit]


def load_profile(cfg: Optional[dict] = None) -> Optional[PersistedUser]:
    prof = (cfg or CFG).get("profile", {}) or {}
    name = clean_username(prof.get("username", ""))
    if not name:
        return None
    return PersistedUser(username=name, highest_score=int(prof.get("highest_score", 0)))


def save_profile(user: PersistedUser) -> None:
    payload = {"username": user.username, "highest_score": int(user.highest_score)}
    CFG["profile"] = dict(payload)
    save_config({"profile": payload})


class ScoreKeeper:
    def __init__(
        self,
        leaderboard: Leaderboard,
        toasts: ToastManager,
        *,
        user: Optional[PersistedUser] = None,
        persist_profile: Callable[[PersistedUser], None] = save_profile,
    ) -> None:
        self.leaderboard = leaderboard
        self.toasts = toasts
        self.user = user
        self._persist_profile = persist_profile

    @property
    def needs_username(self) -> bool:
        return self.user is None

    @property
    def best_score(self) -> int:
        return self.user.highest_score if self.user else 0

    def is_new_high_score(self, score: int) -> bool:
        return score > self.best_score

    def _set_user(self, user: PersistedUser) -> None:
        self.user = user
        self._persist_profile(user)

    def _report(self, username: str, score: int, level: int) -> None:
        try:
            saved = self.leaderboard.report_run_end(username, score, level)
        except PersistenceError as exc:
            logger.warning("Failed to save score for %s: %s", username, exc)
            self.toasts.push("Error", "Failed to save your score. Please try again.", kind="error")
            return
        if self.user and saved.highest_score > self.user.highest_score:
            self._set_user(PersistedUser(self.user.username, saved.highest_score))

    def record_run(self, score: int, level: int) -> bool:
        """Handle a finished run; returns True when it beat the local best."""
        is_new = self.is_new_high_score(score)
        if is_new:
            self.toasts.push(
                "New High Score!",
                f"Congratulations! You've set a new high score of {score} points!",
                kind="success",
            )
        if self.user is not None:
            if is_new:
                self._set_user(PersistedUser(self.user.username, int(score)))
            self._report(self.user.username, score, level)
        return is_new

    def submit_username(self, username: str, score: int, level: int) -> bool:
        name = clean_username(username)
        if not name:
            return False
        try:
            found = self.leaderboard.lookup_user(name)
        except PersistenceError as exc:
            logger.warning("Username lookup failed for %s: %s", name, exc)
            found = UserLookup(exists=False)
        best = max(found.highest_score, int(score)) if found.exists else int(score)
        self._set_user(PersistedUser(name, best))
        self._report(name, score, level)
        return True


__all__ = [
    "clean_username",
    "Leaderboard",
    "load_profile",
    "save_profile",
    "ScoreKeeper",
]
