# huematch/settings.py
from __future__ import annotations
from typing import Any, Dict

# ------------- snapshot (runtime) -------------

def make_runtime_settings(CFG: Dict[str, Any]) -> Dict[str, Any]:
    """Flat settings dict used by the window (snapshot of CFG)."""
    disp = CFG.get("display", {}) or {}
    return {
        "fullscreen":       bool(disp.get("fullscreen", False)),
        "fps":              int(disp.get("fps", 60)),
        "windowed_size":    tuple(disp.get("windowed_size", (720, 1280))),
        "leaderboard_path": str(CFG.get("storage", {}).get("leaderboard", "")),
        "log_level":        str(CFG.get("logging", {}).get("level", "INFO")),
    }

# ------------- clamp -------------

def clamp_settings(s: Dict[str, Any]) -> None:
    """Same ranges as _sanitize_cfg() in huematch/config.py."""
    s["fps"] = max(30, min(240, int(s.get("fps", 60))))
    w, h = s.get("windowed_size", (720, 1280))
    s["windowed_size"] = (max(200, min(10000, int(w))), max(200, min(10000, int(h))))
    s["fullscreen"] = bool(s.get("fullscreen", False))
