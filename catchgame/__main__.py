"""Play the catch game in a desktop window.

Move the mouse (or a finger) to steer the basket. Space starts or plays
again, P pauses, R returns to the title after a game over, Esc quits.
Resizing the window re-lays the playfield out for the new viewport class.
"""

import argparse
import logging
import sys
from pathlib import Path

import pygame

from catchgame.clock import PygameClock
from catchgame.config import FPS
from catchgame.engine import CatchGame
from catchgame.logging_config import setup_logging
from catchgame.ports import JsonHighScoreStore, PointerInput
from catchgame.render import SnapshotRenderer
from catchgame.session import Status

logger = logging.getLogger(__name__)

DEFAULT_SCORES_PATH = Path.home() / ".catchgame" / "scores.json"
WINDOW_BG = (245, 232, 214)
MISS_FLASH_FRAMES = 8


class HostPresentation:
    """Feedback hooks for the desktop window: a red flash on a miss and a
    high score banner until the next start."""

    def __init__(self):
        self.flash_miss = 0
        self.celebrate = False

    def on_catch(self, kind) -> None:
        logger.debug("Caught a %s item", kind.value)

    def on_miss(self) -> None:
        self.flash_miss = MISS_FLASH_FRAMES

    def on_new_high_score(self) -> None:
        self.celebrate = True

    def decay(self) -> None:
        if self.flash_miss > 0:
            self.flash_miss -= 1


class Host:
    def __init__(self, width, height, scores_path, seed=None):
        pygame.init()
        pygame.display.set_caption("Catch the Cookies!")
        self.window = pygame.display.set_mode((width, height), pygame.RESIZABLE)

        self.pointer = PointerInput()
        self.presentation = HostPresentation()
        self.game = CatchGame(
            PygameClock(FPS),
            pointer=self.pointer,
            store=JsonHighScoreStore(scores_path),
            presentation=self.presentation,
            viewport=(width, height),
            seed=seed,
            defer_writes=True,
        )
        self.renderer = SnapshotRenderer(self.game.config)

    def playfield_offset(self):
        window_w, window_h = self.window.get_size()
        geometry = self.game.geometry
        return (window_w - geometry.width) / 2, (window_h - geometry.height) / 2

    def handle_event(self, event) -> bool:
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            elif event.key == pygame.K_SPACE:
                self.presentation.celebrate = False
                self.game.start()
            elif event.key == pygame.K_p:
                if not self.game.pause():
                    self.game.resume()
            elif event.key == pygame.K_r:
                self.game.reset()
        elif event.type == pygame.MOUSEMOTION:
            offset_x, offset_y = self.playfield_offset()
            self.pointer.move(event.pos[0] - offset_x, event.pos[1] - offset_y)
        elif event.type in (pygame.FINGERMOTION, pygame.FINGERDOWN):
            # Finger coordinates are normalized to the window
            window_w, window_h = self.window.get_size()
            offset_x, offset_y = self.playfield_offset()
            self.pointer.move(event.x * window_w - offset_x, event.y * window_h - offset_y)
        elif event.type == pygame.VIDEORESIZE:
            self.window = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
            self.game.resize(event.w, event.h)
        elif event.type == pygame.WINDOWFOCUSLOST:
            self.game.pause()
        return True

    def draw(self):
        geometry = self.game.geometry
        playfield = pygame.Surface((int(geometry.width), int(geometry.height)))
        self.renderer.draw(
            playfield,
            self.game.snapshot(),
            new_high_score=self.presentation.celebrate,
            flash_miss=self.presentation.flash_miss,
        )
        self.window.fill(WINDOW_BG)
        offset_x, offset_y = self.playfield_offset()
        self.window.blit(playfield, (int(offset_x), int(offset_y)))
        pygame.display.flip()

    def run(self):
        running = True
        try:
            while running:
                for event in pygame.event.get():
                    if not self.handle_event(event):
                        running = False
                        break
                self.game.clock.advance()
                self.game.flush_high_score()
                self.presentation.decay()
                self.draw()
        finally:
            self.game.close()
            pygame.quit()
        if self.game.status is Status.GAME_OVER:
            logger.info("Final score %d, best %d", self.game.session.score, self.game.best_score)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="catchgame", description="Catch the falling treats.")
    parser.add_argument("--width", type=int, default=390, help="Initial window width")
    parser.add_argument("--height", type=int, default=844, help="Initial window height")
    parser.add_argument("--scores", type=Path, default=DEFAULT_SCORES_PATH, help="High score file")
    parser.add_argument("--seed", type=int, default=None, help="Seed for item placement")
    parser.add_argument("--log-level", default=None, help="Log level name (default: $CATCHGAME_LOG_LEVEL or INFO)")
    parser.add_argument("--log-file", default=None)
    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_level, args.log_file)
    except ValueError as e:
        parser.error(str(e))
    Host(args.width, args.height, args.scores, seed=args.seed).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
