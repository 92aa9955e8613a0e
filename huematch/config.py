# huematch/config.py
from __future__ import annotations
import json, logging, os
from typing import Dict, Any

from pathlib import Path
PKG_DIR = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)

# per-user data directory; holds the leaderboard
DATA_DIR = Path(os.environ.get("HUEMATCH_HOME") or Path.home() / ".huematch").expanduser()

def _abs(path: str) -> str:
    # relative paths land in DATA_DIR; absolute paths are kept as given
    p = Path(path).expanduser()
    return str(p) if p.is_absolute() else str((DATA_DIR / p).resolve())

CONFIG_PATH = os.environ.get("HUEMATCH_CONFIG") or os.path.join(PKG_DIR, "config.json")

DEFAULT_CFG: Dict[str, Any] = {
    "display": {"fullscreen": False, "fps": 60, "windowed_size": [720, 1280]},
    "storage": {"leaderboard": "leaderboard.json"},
    "profile": {"username": "", "highest_score": 0},
    "logging": {"level": "INFO"},
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

def _deepcopy(obj):
    return json.loads(json.dumps(obj))

def _merge(dst: dict, src: dict) -> dict:
    for k, v in src.items():
        if isinstance(v, dict) and isinstance(dst.get(k), dict):
            _merge(dst[k], v)
        else:
            dst[k] = v
    return dst

def _sanitize_cfg(cfg: dict) -> dict:
    d = cfg.setdefault("display", {})
    d["fullscreen"] = bool(d.get("fullscreen", False))
    d["fps"] = int(max(30, min(240, d.get("fps", 60))))
    ws = d.get("windowed_size", [720, 1280])
    if isinstance(ws, (list, tuple)) and len(ws) == 2 and all(isinstance(x, (int, float)) for x in ws):
        w, h = max(200, min(10000, int(ws[0]))), max(200, min(10000, int(ws[1])))
        d["windowed_size"] = [w, h]
    else:
        d["windowed_size"] = [720, 1280]

    p = cfg.setdefault("profile", {})
    p["username"] = str(p.get("username") or "").strip()
    try:
        p["highest_score"] = max(0, int(p.get("highest_score", 0)))
    except (TypeError, ValueError):
        p["highest_score"] = 0

    lg = cfg.setdefault("logging", {})
    level = str(lg.get("level", "INFO")).upper()
    lg["level"] = level if level in LOG_LEVELS else "INFO"

    s = cfg.setdefault("storage", {})
    s["leaderboard"] = _abs(str(s.get("leaderboard") or DEFAULT_CFG["storage"]["leaderboard"]))
    cfg["config_path"] = str(Path(CONFIG_PATH).resolve())
    return cfg

def save_config(partial_cfg: dict) -> None:
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            base = json.load(f)
        if not isinstance(base, dict): base = {}
    except (OSError, ValueError):
        base = {}
    merged = _merge(base, partial_cfg)
    merged.pop("config_path", None)
    try:
        with open(CONFIG_PATH, "w", encoding="utf-8") as f:
            json.dump(merged, f, ensure_ascii=False, indent=2)
    except OSError as exc:
        logger.warning("Could not write %s: %s", CONFIG_PATH, exc)

def load_config() -> dict:
    cfg = _deepcopy(DEFAULT_CFG)
    try:
        with open(CONFIG_PATH, "r", encoding="utf-8") as f:
            user = json.load(f)
        if isinstance(user, dict):
            _merge(cfg, user)
    except FileNotFoundError:
        save_config(cfg)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", CONFIG_PATH, exc)
    return _sanitize_cfg(cfg)

def persist_windowed_size(width: int, height: int) -> None:
    save_config({"display": {"windowed_size": [int(width), int(height)]}})

CFG = load_config()
