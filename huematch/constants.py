from __future__ import annotations

from pathlib import Path

from .config import CFG

PKG_DIR = Path(__file__).resolve().parent


# --- Palette ----------------------------------------------------------------
BG = (8, 10, 12)                 # default background
INK = (235, 235, 235)            # primary text colour
ACCENT = (255, 210, 90)          # accent colour for highlights
GOOD = (90, 200, 120)
WARN = (255, 170, 80)

# --- Layout ----------------------------------------------------------------
FPS = int(CFG.get("display", {}).get("fps", 60))
TEXT_SHADOW_OFFSET = (2, 2)
UI_RADIUS = 8

# --- Round timing -----------------------------------------------------------
VIEW_TIME = 3                     # seconds the target stays visible
SELECTION_TIME_BASE = 15
SELECTION_TIME_MIN = 2
SELECTION_TIME_STEP_LEVELS = 5
TICK_SECONDS = 1.0

# --- Difficulty curve -------------------------------------------------------
OPTION_COUNT_MIN = 3
OPTION_COUNT_MAX = 10
SIMILARITY_MAX = 0.99
LEVEL_BLOCK = 10                  # close matches reset at every block start
CLOSE_MATCH_LIMIT_EARLY = 3
CLOSE_MATCH_LIMIT_LATE = 1
CLOSE_MATCH_LATE_FROM = 51

# --- Classification & scoring -----------------------------------------------
EXACT_THRESHOLD = 0.5             # delta E below which two colors count as the same
CLOSE_FACTOR = 25.0               # close tolerance = CLOSE_FACTOR * (1 - similarity)
COMBO_STEP = 0.5
COMBO_MAX = 5.0
ACCURACY_POINTS_MAX = 100
ACCURACY_PENALTY = 1000           # per unit delta E; only identical colors keep accuracy points
SPEED_POINTS_MAX = 50

# Performance rating forwarded to the color pool
PERFORMANCE_MIN = 0.9
PERFORMANCE_MAX = 1.1
PERFORMANCE_GAIN = 0.01
PERFORMANCE_LOSS = 0.02

# --- Color pool -------------------------------------------------------------
POOL_ATTEMPTS = 400
DISTRACTOR_SPREAD = 40.0          # extra delta E headroom at similarity 0
DISTRACTOR_MIN_SPACING = 2.0      # min delta E between any two options

# --- Swatch grid ------------------------------------------------------------
GRID_COLUMNS = 3
SWATCH_GAP_FACTOR = 0.04
SWATCH_BORDER = (160, 180, 200)
SWATCH_HOVER_BORDER = ACCENT
TARGET_SWATCH_FACTOR = 0.55

# --- Timer bar --------------------------------------------------------------
TIMER_BAR_WIDTH_FACTOR = 0.66
TIMER_BAR_HEIGHT = 18
TIMER_BAR_BG = (40, 40, 50)
TIMER_BAR_FILL = (90, 200, 255)
TIMER_BAR_BORDER = (160, 180, 200)
TIMER_BAR_BORDER_W = 2
TIMER_BAR_WARN_COLOR = (255, 170, 80)
TIMER_BAR_CRIT_COLOR = (220, 80, 80)
TIMER_BAR_WARN_TIME = 0.50
TIMER_BAR_CRIT_TIME = 0.25
TIMER_BAR_BORDER_RADIUS = UI_RADIUS
TIMER_BOTTOM_MARGIN_FACTOR = 0.04
TIMER_BAR_TEXT_COLOR = INK
TIMER_POSITION_INDICATOR_W = 4
TIMER_POSITION_INDICATOR_PAD = 3
TIMER_LABEL_GAP = 8

# --- Toasts -----------------------------------------------------------------
TOAST_IN_SEC = 0.25
TOAST_HOLD_SEC = 1.60
TOAST_OUT_SEC = 0.35
TOAST_MAX_VISIBLE = 3
TOAST_BG = (22, 26, 34, 200)
TOAST_BORDER = (120, 200, 255, 200)
FEEDBACK_SEC = 1.0

# --- Leaderboard ------------------------------------------------------------
LEADERBOARD_SIZE = 10
USERNAME_MAX_LEN = 20

# --- Window configuration ----------------------------------------------------
WINDOWED_DEFAULT_SIZE = tuple(CFG.get("display", {}).get("windowed_size", (720, 1280)))
WINDOW_TITLE = "Huematch"

# --- HUD --------------------------------------------------------------------
TOPBAR_HEIGHT_FACTOR = 0.095
TOPBAR_PAD_X_FACTOR = 0.045
TOPBAR_UNDERLINE_THICKNESS = 4
TOPBAR_UNDERLINE_COLOR = (90, 200, 255)
HUD_BG = (22, 26, 34, 170)
HUD_LABEL_COLOR = (180, 200, 230)
HUD_VALUE_COLOR = INK

# Typography defaults (scaled at runtime)
FONT_PATH = str(PKG_DIR / "assets" / "font" / "Orbitron-VariableFont_wght.ttf")
FONT_SIZE_SMALL = 18
FONT_SIZE_MID = 24
FONT_SIZE_BIG = 60
HUD_LABEL_FONT_SIZE = 22
HUD_VALUE_FONT_SIZE = 40
TIMER_FONT_SIZE = 36
