from __future__ import annotations

import math
from typing import TYPE_CHECKING, List, Optional, Sequence

import pygame

from .colors import parse_hex
from .constants import *  # noqa: F401,F403

if TYPE_CHECKING:
    from .game import Game


class SwatchGrid:
    """Lays out option swatches in a fixed-column grid and hit-tests clicks."""

    def __init__(self, game: "Game", columns: int = GRID_COLUMNS) -> None:
        self.g = game
        self.columns = columns
        self.rects: List[pygame.Rect] = []
        self.colors: List[str] = []

    def layout(self, colors: Sequence[str], area: pygame.Rect) -> List[pygame.Rect]:
        self.colors = list(colors)
        n = len(self.colors)
        if n == 0:
            self.rects = []
            return self.rects
        cols = min(self.columns, n)
        rows = math.ceil(n / cols)
        gap = int(area.width * SWATCH_GAP_FACTOR)
        size = min((area.width - gap * (cols - 1)) // cols, (area.height - gap * (rows - 1)) // rows)
        size = max(8, size)
        grid_h = rows * size + (rows - 1) * gap
        top = area.top + (area.height - grid_h) // 2

        self.rects = []
        for i in range(n):
            r, c = divmod(i, cols)
            in_row = min(cols, n - r * cols)
            row_w = in_row * size + (in_row - 1) * gap
            left = area.left + (area.width - row_w) // 2
            self.rects.append(pygame.Rect(left + c * (size + gap), top + r * (size + gap), size, size))
        return self.rects

    def hit(self, pos: tuple[int, int]) -> Optional[str]:
        for rect, color in zip(self.rects, self.colors):
            if rect.collidepoint(pos):
                return color
        return None

    def draw(self, *, hover: Optional[tuple[int, int]] = None, show_keys: bool = True) -> None:
        g = self.g
        for i, (rect, color) in enumerate(zip(self.rects, self.colors)):
            hovered = hover is not None and rect.collidepoint(hover)
            draw_swatch(g.screen, rect, color, border=SWATCH_HOVER_BORDER if hovered else SWATCH_BORDER, border_w=4 if hovered else 2)
            if show_keys and i < 10:
                key = str((i + 1) % 10)
                g.draw_text(key, pos=(rect.x + g.px(8), rect.y + g.px(6)), font=g.font, color=INK, shadow=True)


def draw_swatch(surface: pygame.Surface, rect: pygame.Rect, color: str, *, border=SWATCH_BORDER, border_w: int = 2) -> None:
    shadow = rect.move(3, 5)
    pygame.draw.rect(surface, (0, 0, 0), shadow, border_radius=UI_RADIUS + 2)
    pygame.draw.rect(surface, parse_hex(color), rect, border_radius=UI_RADIUS)
    pygame.draw.rect(surface, border, rect, width=border_w, border_radius=UI_RADIUS)


class TimeBar:
    def __init__(self, game: "Game") -> None:
        self.g = game

    def draw(self, ratio: float, label: Optional[str] = None) -> None:
        g = self.g
        ratio = max(0.0, min(1.0, ratio))
        if ratio <= TIMER_BAR_CRIT_TIME:
            fill_color = TIMER_BAR_CRIT_COLOR
        elif ratio <= TIMER_BAR_WARN_TIME:
            fill_color = TIMER_BAR_WARN_COLOR
        else:
            fill_color = TIMER_BAR_FILL

        bar_w = int(g.w * TIMER_BAR_WIDTH_FACTOR)
        bar_h = max(1, g.px(TIMER_BAR_HEIGHT))
        bar_x = (g.w - bar_w) // 2
        bottom_margin = int(g.h * TIMER_BOTTOM_MARGIN_FACTOR)
        bar_y = g.h - bottom_margin - bar_h

        pygame.draw.rect(g.screen, TIMER_BAR_BG, (bar_x, bar_y, bar_w, bar_h), border_radius=TIMER_BAR_BORDER_RADIUS)

        fill_w = int(bar_w * ratio)
        if fill_w > 0:
            pygame.draw.rect(g.screen, fill_color, (bar_x, bar_y, fill_w, bar_h), border_radius=TIMER_BAR_BORDER_RADIUS)

        pygame.draw.rect(
            g.screen,
            TIMER_BAR_BORDER,
            (bar_x, bar_y, bar_w, bar_h),
            width=TIMER_BAR_BORDER_W,
            border_radius=TIMER_BAR_BORDER_RADIUS,
        )

        indicator_x = max(bar_x, min(bar_x + bar_w, bar_x + fill_w))
        indicator_rect = pygame.Rect(
            indicator_x - TIMER_POSITION_INDICATOR_W // 2,
            bar_y - TIMER_POSITION_INDICATOR_PAD,
            TIMER_POSITION_INDICATOR_W,
            bar_h + TIMER_POSITION_INDICATOR_PAD * 2,
        )
        pygame.draw.rect(g.screen, ACCENT, indicator_rect)

        if label:
            surf = g.draw_text(label, color=TIMER_BAR_TEXT_COLOR, font=g.timer_font, shadow=True)
            tx = bar_x + (bar_w - surf.get_width()) // 2
            ty = bar_y - surf.get_height() - TIMER_LABEL_GAP
            g.screen.blit(surf, (tx, ty))


__all__ = ["SwatchGrid", "TimeBar", "draw_swatch"]
