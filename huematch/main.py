from __future__ import annotations

import logging
import os
import sys

import pygame

from .config import CFG
from .constants import FPS, WINDOW_TITLE
from .game import Game
from .input_queue import InputQueue


def setup_logging() -> None:
    level = CFG.get("logging", {}).get("level", "INFO")
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

# ============================== MAIN LOOP ============================== #
def main():
    setup_logging()
    os.environ.setdefault("SDL_VIDEO_CENTERED", "1")
    pygame.init()
    pygame.key.set_repeat(400, 40)
    fullscreen = bool(CFG.get("display", {}).get("fullscreen", False))
    screen = pygame.display.set_mode((1, 1))  # tiny placeholder; real size set next
    game = Game(screen)
    game._set_display_mode(fullscreen)
    pygame.display.set_caption(WINDOW_TITLE)
    iq = InputQueue()

    while True:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                game.quit()
            game.handle_event(event, iq)
        game.update(iq)
        game.draw()
        game.clock.tick(int(game.settings.get("fps", FPS)))

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        pygame.quit(); sys.exit(0)
