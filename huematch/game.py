from __future__ import annotations

import logging
import os
import sys
import time
from typing import List, Optional, Tuple

import pygame

from .config import CFG, persist_windowed_size
from .constants import *  # noqa: F401,F403
from .engine import GameEngine
from .errors import PersistenceError
from .input_queue import InputQueue
from .leaderboard import Leaderboard, ScoreKeeper, clean_username, load_profile
from .models import Phase, Scene
from .notifications import ToastManager
from .palette import ColorPool
from .settings import clamp_settings, make_runtime_settings
from .ui_components import SwatchGrid, TimeBar, draw_swatch

logger = logging.getLogger(__name__)


class Game:

    # ---- Core lifecycle wiring ----

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.cfg = CFG
        self.settings = make_runtime_settings(CFG)
        clamp_settings(self.settings)
        self.scene: Scene = Scene.MENU

        self.w, self.h = self.screen.get_size()
        self.clock = pygame.time.Clock()

        # --- Window state ---
        self.last_windowed_size = tuple(self.settings.get("windowed_size", WINDOWED_DEFAULT_SIZE))

        # --- Font cache ---
        self._font_cache: dict[tuple[str, int, bool], pygame.font.Font] = {}
        self._sysfont_fallback = "arial"
        self.ui_scale = 1.0
        self._recompute_layout()

        # --- Collaborators ---
        self.toasts = ToastManager(self.now)
        self.leaderboard = Leaderboard(self.settings["leaderboard_path"])
        self.scores = ScoreKeeper(self.leaderboard, self.toasts, user=load_profile(CFG))
        self.pool = ColorPool()
        self.engine = GameEngine(self.pool, toasts=self.toasts, scores=self.scores, now_fn=self.now)

        # --- Render helpers ---
        self.grid = SwatchGrid(self)
        self.timebar = TimeBar(self)
        self.hover: Optional[Tuple[int, int]] = None

        # --- Over / leaderboard scratchpad ---
        self.username_buffer = ""
        self.asking_username = False
        self.leaderboard_rows: List[dict] = []
        self.leaderboard_back: Scene = Scene.MENU

    def start_game(self) -> None:
        self.asking_username = False
        self.username_buffer = ""
        if self.engine.start() and self.engine.phase is not Phase.IDLE:
            self.scene = Scene.GAME

    def end_game(self) -> None:
        self.scene = Scene.OVER
        self.asking_username = self.scores.needs_username
        self.username_buffer = ""

    def quit(self) -> None:
        self.engine.shutdown()
        pygame.quit(); sys.exit(0)

    # ---- Timing utilities ----

    def now(self) -> float:
        return time.time()

    def px(self, v: float) -> int:
        return max(1, int(round(v * getattr(self, "ui_scale", 1.0))))

    # ---- Fonts & layout ----

    def _compute_ui_scale(self) -> float:
        ref_w, ref_h = 720, 1280
        s = min(self.w / ref_w, self.h / ref_h)
        return max(0.6, min(2.2, s))

    def _load_font_file(self, size: int, *, bold: bool = False) -> pygame.font.Font:
        if FONT_PATH and os.path.exists(FONT_PATH):
            try:
                f = pygame.font.Font(FONT_PATH, size)
                f.set_bold(bold)
                return f
            except (OSError, pygame.error) as exc:
                logger.debug("Falling back to system font: %s", exc)
        return pygame.font.SysFont(self._sysfont_fallback, size, bold=bold)

    def _font(self, px: int, *, bold: bool = False) -> pygame.font.Font:
        size = max(8, int(round(px)))
        key = (FONT_PATH, size, bool(bold))
        f = self._font_cache.get(key)
        if f is None:
            f = self._load_font_file(size, bold=bold)
            self._font_cache[key] = f
        return f

    def _rebuild_fonts(self) -> None:
        self.ui_scale = self._compute_ui_scale()
        self._font_cache.clear()

        def S(px: int) -> int:
            return max(8, int(round(px * self.ui_scale)))

        self.font           = self._font(S(FONT_SIZE_SMALL))
        self.mid            = self._font(S(FONT_SIZE_MID))
        self.big            = self._font(S(FONT_SIZE_BIG), bold=True)
        self.timer_font     = self._font(S(TIMER_FONT_SIZE))
        self.hud_label_font = self._font(S(HUD_LABEL_FONT_SIZE))
        self.hud_value_font = self._font(S(HUD_VALUE_FONT_SIZE), bold=True)

    def _recompute_layout(self) -> None:
        self.w, self.h = self.screen.get_size()
        self._rebuild_fonts()

        top_h = int(self.h * TOPBAR_HEIGHT_FACTOR)
        self.topbar_rect = pygame.Rect(0, 0, self.w, top_h)

        bottom_reserved = int(self.h * TIMER_BOTTOM_MARGIN_FACTOR) + self.px(TIMER_BAR_HEIGHT) + self.timer_font.get_height() + self.px(24)
        pad = int(self.w * TOPBAR_PAD_X_FACTOR)
        self.play_rect = pygame.Rect(pad, top_h + pad, self.w - pad * 2, self.h - top_h - pad * 2 - bottom_reserved)

        side = int(min(self.play_rect.width, self.play_rect.height) * TARGET_SWATCH_FACTOR)
        self.target_rect = pygame.Rect(0, 0, side, side)
        self.target_rect.center = self.play_rect.center

    def _set_windowed_size(self, width: int, height: int) -> None:
        if self.screen.get_size() == (width, height):
            return
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        self.last_windowed_size = (width, height)
        persist_windowed_size(width, height)
        self._recompute_layout()

    def _set_display_mode(self, fullscreen: bool) -> None:
        if fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
            self._recompute_layout()
        else:
            w, h = self.last_windowed_size
            self._set_windowed_size(int(w), int(h))
        pygame.display.set_caption(WINDOW_TITLE)

    def handle_resize(self, width: int, height: int) -> None:
        if self.settings.get("fullscreen", False):
            return
        self._set_windowed_size(width, height)

    def _open_leaderboard(self) -> None:
        self.leaderboard_back = self.scene
        try:
            self.leaderboard_rows = self.leaderboard.top(LEADERBOARD_SIZE)
        except PersistenceError as exc:
            logger.warning("Leaderboard unavailable: %s", exc)
            self.toasts.push("Error", "Could not load the leaderboard.", kind="error")
            self.leaderboard_rows = []
        self.scene = Scene.LEADERBOARD

    def _submit_username(self) -> None:
        name = clean_username(self.username_buffer)
        if not name:
            return
        result = self.engine.last_result
        score = result.score if result else self.engine.state.score
        level = result.level if result else self.engine.state.level
        if self.scores.submit_username(name, score, level):
            self.start_game()

    # ---- Input ----

    def _key_to_option(self, key: int) -> Optional[str]:
        digits = [pygame.K_1, pygame.K_2, pygame.K_3, pygame.K_4, pygame.K_5,
                  pygame.K_6, pygame.K_7, pygame.K_8, pygame.K_9, pygame.K_0]
        if key not in digits:
            return None
        idx = digits.index(key)
        options = self.engine.state.options
        return options[idx] if idx < len(options) else None

    def handle_event(self, event: pygame.event.Event, iq: InputQueue):
        if event.type == pygame.VIDEORESIZE:
            self.handle_resize(event.w, event.h)
            return

        if event.type == pygame.MOUSEMOTION:
            self.hover = event.pos
            return

        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.scene is Scene.GAME and self.engine.phase is Phase.AWAITING_SELECTION:
                color = self.grid.hit(event.pos)
                if color:
                    iq.push(color)
            return

        if event.type != pygame.KEYDOWN:
            return

        if self.scene is Scene.OVER and self.asking_username:
            if event.key == pygame.K_RETURN:
                self._submit_username()
            elif event.key == pygame.K_ESCAPE:
                self.asking_username = False
            elif event.key == pygame.K_BACKSPACE:
                self.username_buffer = self.username_buffer[:-1]
            elif event.unicode and event.unicode.isprintable() and len(self.username_buffer) < USERNAME_MAX_LEN:
                self.username_buffer += event.unicode
            return

        if event.key in (pygame.K_ESCAPE, pygame.K_q):
            if self.scene is Scene.LEADERBOARD:
                self.scene = self.leaderboard_back
                return
            self.quit()

        if self.scene is Scene.MENU:
            if event.key == pygame.K_RETURN:
                self.start_game()
            elif event.key == pygame.K_l:
                self._open_leaderboard()

        elif self.scene is Scene.OVER:
            if event.key == pygame.K_SPACE:
                self.start_game()
            elif event.key == pygame.K_l:
                self._open_leaderboard()

        elif self.scene is Scene.LEADERBOARD:
            if event.key in (pygame.K_RETURN, pygame.K_SPACE, pygame.K_l):
                self.scene = self.leaderboard_back

        elif self.scene is Scene.GAME:
            color = self._key_to_option(event.key)
            if color and self.engine.phase is Phase.AWAITING_SELECTION:
                iq.push(color)

    def update(self, iq: InputQueue) -> None:
        self.toasts.prune()
        if self.scene is not Scene.GAME:
            iq.clear()
            return

        self.engine.update()
        for color in iq.pop_all():
            self.engine.select(color)

        if self.engine.phase is Phase.GAME_OVER:
            self.end_game()
        elif self.engine.phase is Phase.IDLE:
            self.scene = Scene.MENU

    # ---- Rendering ----

    def _draw_round_rect(self, surf: pygame.Surface, rect: pygame.Rect, fill, border=None, border_w=1, radius=12) -> None:
        rr = pygame.Surface((rect.width, rect.height), pygame.SRCALPHA)
        pygame.draw.rect(rr, fill, rr.get_rect(), border_radius=radius)
        if border is not None and border_w > 0:
            pygame.draw.rect(rr, border, rr.get_rect(), width=border_w, border_radius=radius)
        surf.blit(rr, rect.topleft)

    def _shadow_text(self, surf: pygame.Surface) -> pygame.Surface:
        sh = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        sh.blit(surf, (0, 0))
        tint = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        tint.fill((0, 0, 0, 255))
        sh.blit(tint, (0, 0), special_flags=pygame.BLEND_RGBA_MULT)
        return sh

    def draw_text(self, text: str, *, pos: Optional[tuple[float, float]] = None,
                  font: Optional[pygame.font.Font] = None, color=INK, shadow=True,
                  alpha: Optional[int] = None, shadow_offset=TEXT_SHADOW_OFFSET) -> pygame.Surface:
        font = font or self.font
        base = font.render(text, True, color)

        out = base
        if shadow:
            dx, dy = shadow_offset
            sh = self._shadow_text(base)
            surf = pygame.Surface((base.get_width() + max(0, int(dx)), base.get_height() + max(0, int(dy))), pygame.SRCALPHA)
            surf.blit(sh, (int(dx), int(dy))); surf.blit(base, (0, 0))
            out = surf

        if alpha is not None:
            out.set_alpha(alpha)

        if pos is not None:
            x, y = pos
            self.screen.blit(out, (int(x), int(y)))

        return out

    def _center_text(self, text: str, y: float, *, font=None, color=INK) -> pygame.Surface:
        surf = self.draw_text(text, font=font, color=color)
        self.screen.blit(surf, (self.w // 2 - surf.get_width() // 2, int(y)))
        return surf

    def draw_chip(self, text: str, x: int, y: int, pad: int = 10, radius: int = 10,
                  bg=TOAST_BG, border=TOAST_BORDER, text_color=INK, *,
                  font: Optional[pygame.font.Font] = None) -> pygame.Rect:
        fnt = font or self.font
        t_surf = fnt.render(text, True, text_color)
        rect = pygame.Rect(x, y, t_surf.get_width() + pad * 2, t_surf.get_height() + pad * 2)
        self._draw_round_rect(self.screen, rect.move(3, 4), (0, 0, 0, 120), radius=radius + 2)
        self._draw_round_rect(self.screen, rect, bg, border=border, radius=radius)
        self.screen.blit(t_surf, (x + pad, y + pad))
        return rect

    def _draw_label_value(self, label: str, value: str, center_x: int, *, value_color=HUD_VALUE_COLOR) -> None:
        lab = self.draw_text(label, font=self.hud_label_font, color=HUD_LABEL_COLOR)
        val = self.draw_text(value, font=self.hud_value_font, color=value_color)
        total_h = lab.get_height() + val.get_height()
        y = self.topbar_rect.centery - total_h // 2
        self.screen.blit(lab, (center_x - lab.get_width() // 2, y))
        self.screen.blit(val, (center_x - val.get_width() // 2, y + lab.get_height()))

    def _draw_hud(self) -> None:
        s = self.engine.state
        top_bg = pygame.Surface(self.topbar_rect.size, pygame.SRCALPHA)
        top_bg.fill(HUD_BG)
        self.screen.blit(top_bg, self.topbar_rect.topleft)
        pygame.draw.rect(
            self.screen, TOPBAR_UNDERLINE_COLOR,
            (0, self.topbar_rect.bottom - TOPBAR_UNDERLINE_THICKNESS, self.w, TOPBAR_UNDERLINE_THICKNESS),
        )

        quarter = self.w // 4
        self._draw_label_value("LEVEL", str(s.level), quarter // 2)
        score_color = ACCENT if s.score > self.scores.best_score else HUD_VALUE_COLOR
        self._draw_label_value("SCORE", str(s.score), quarter + quarter // 2, value_color=score_color)
        combo_color = GOOD if s.combo_multiplier > 1 else HUD_VALUE_COLOR
        self._draw_label_value("COMBO", f"{s.combo_multiplier:.1f}x", 2 * quarter + quarter // 2, value_color=combo_color)
        limit = self.engine.close_match_limit
        close_color = WARN if s.close_matches >= limit else HUD_VALUE_COLOR
        self._draw_label_value("CLOSE", f"{s.close_matches}/{limit}", 3 * quarter + quarter // 2, value_color=close_color)

    def _draw_gameplay(self) -> None:
        self.screen.fill(BG)
        self._draw_hud()
        s = self.engine.state
        phase = self.engine.phase

        if phase is Phase.SHOWING_TARGET:
            draw_swatch(self.screen, self.target_rect, s.target_color, border=INK, border_w=3)
            self._center_text("Memorize this color", self.target_rect.bottom + self.px(16), font=self.mid)
            self.timebar.draw(self.engine.time_ratio(), f"{s.time_left}s")
        elif phase in (Phase.AWAITING_SELECTION, Phase.RESOLVING):
            self.grid.layout(s.options, self.play_rect)
            self.grid.draw(hover=self.hover if phase is Phase.AWAITING_SELECTION else None)
            self.timebar.draw(self.engine.time_ratio(), f"{s.time_left}s")
        else:
            self._center_text("Loading...", self.play_rect.centery, font=self.mid)

        self._draw_feedback()

    def _draw_feedback(self) -> None:
        toast = self.toasts.latest("feedback")
        if toast is None or self.now() - toast.started > FEEDBACK_SEC:
            return
        exact = bool(self.engine.last_verdict and self.engine.last_verdict.is_exact_match)
        color = GOOD if exact else ACCENT
        surf = self.draw_text(toast.title, font=self.mid, color=color)
        self.screen.blit(surf, (self.w - surf.get_width() - self.px(16), self.topbar_rect.bottom + self.px(12)))

    def _draw_toasts(self) -> None:
        now = self.now()
        y = self.h - self.px(16)
        for toast in reversed([t for t in self.toasts.active(now) if t.kind != "feedback"]):
            phase, t = self.toasts.phase(toast, now)
            alpha = int(255 * (t if phase == "in" else (1.0 - t) if phase == "out" else 1.0))
            text = f"{toast.title}  {toast.description}".strip()
            surf = self.font.render(text, True, INK)
            pad = self.px(10)
            rect = pygame.Rect(0, 0, surf.get_width() + pad * 2, surf.get_height() + pad * 2)
            rect.bottomright = (self.w - self.px(16), y)
            layer = pygame.Surface(rect.size, pygame.SRCALPHA)
            self._draw_round_rect(layer, layer.get_rect(), TOAST_BG, border=TOAST_BORDER, radius=self.px(10))
            layer.blit(surf, (pad, pad))
            layer.set_alpha(alpha)
            self.screen.blit(layer, rect.topleft)
            y = rect.top - self.px(8)

    def _draw_menu(self) -> None:
        self.screen.fill(BG)
        y = int(self.h * 0.22)
        title = self._center_text("HUEMATCH", y, font=self.big, color=ACCENT)
        y += title.get_height() + self.px(24)
        for line in (
            "A color will appear briefly",
            "Memorize it, then choose the matching color",
            "Close matches are tolerated, 3 per ten levels early on",
            "Be quick and accurate to score high!",
        ):
            surf = self._center_text(line, y, font=self.mid)
            y += surf.get_height() + self.px(10)

        if self.scores.user:
            y += self.px(20)
            self._center_text(f"{self.scores.user.username}  -  best {self.scores.best_score}", y, font=self.mid, color=HUD_LABEL_COLOR)

        hint = "ENTER = start    -    L = leaderboard    -    ESC = quit"
        self._center_text(hint, self.h - self.font.get_height() - self.px(24), font=self.font, color=(210, 220, 235))

    def _draw_over(self) -> None:
        self.screen.fill(BG)
        result = self.engine.last_result
        score = result.score if result else self.engine.state.score
        level = result.level if result else self.engine.state.level
        cy = self.h // 2

        self._center_text("Game Over!", cy - self.px(200), font=self.big, color=ACCENT)
        if result and result.reason:
            self._center_text(result.reason, cy - self.px(120), font=self.mid, color=HUD_LABEL_COLOR)
        score_surf = self._center_text(f"Your Score: {score}", cy - self.px(60), font=self.hud_value_font)
        self._center_text(f"Level Reached: {level}", cy - self.px(60) + score_surf.get_height() + self.px(8), font=self.mid)

        if result and result.is_new_high_score:
            badge = "NEW BEST!"
            bw = self.font.size(badge)[0]
            self.draw_chip(badge, self.w // 2 - bw // 2 - self.px(10), cy + self.px(40), pad=self.px(8), font=self.font)

        if self.asking_username:
            self._center_text("Enter a username to save your score:", cy + self.px(100), font=self.font)
            box = pygame.Rect(0, 0, int(self.w * 0.6), self.mid.get_height() + self.px(16))
            box.center = (self.w // 2, cy + self.px(150))
            self._draw_round_rect(self.screen, box, TOAST_BG, border=TOAST_BORDER, border_w=2, radius=self.px(8))
            cursor = "_" if int(self.now() * 2) % 2 == 0 else " "
            self.draw_text(self.username_buffer + cursor, pos=(box.x + self.px(10), box.y + self.px(8)), font=self.mid)
            info = "ENTER = save score and play again   -   ESC = skip"
        else:
            info = "SPACE = play again   -   L = leaderboard   -   ESC = quit"
        self._center_text(info, self.h - self.font.get_height() - self.px(24), font=self.font, color=(210, 220, 235))

    def _draw_leaderboard(self) -> None:
        self.screen.fill(BG)
        y = int(self.h * 0.08)
        title = self._center_text("Champions", y, font=self.big, color=ACCENT)
        y += title.get_height() + self.px(24)
        me = self.scores.user.username if self.scores.user else None
        if not self.leaderboard_rows:
            self._center_text("No scores yet", y, font=self.mid, color=HUD_LABEL_COLOR)
        for rank, row in enumerate(self.leaderboard_rows, start=1):
            color = ACCENT if row["username"] == me else INK
            line = f"{rank:>2}.  {row['username']:<{USERNAME_MAX_LEN}}  {row['highest_score']:>7}   L{row['best_level']}"
            surf = self._center_text(line, y, font=self.mid, color=color)
            y += surf.get_height() + self.px(8)
        self._center_text("ENTER = back", self.h - self.font.get_height() - self.px(24), font=self.font, color=(210, 220, 235))

    def draw(self):
        if self.scene is Scene.GAME:
            self._draw_gameplay()
        elif self.scene is Scene.MENU:
            self._draw_menu()
        elif self.scene is Scene.OVER:
            self._draw_over()
        elif self.scene is Scene.LEADERBOARD:
            self._draw_leaderboard()
        self._draw_toasts()
        pygame.display.flip()


__all__ = ["Game"]
