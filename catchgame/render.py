import numpy as np
import pygame
import pygame.gfxdraw

from catchgame.config import DEFAULT_CONFIG
from catchgame.session import Status, catch_zone_top


class SnapshotRenderer:
    """Draws a GameSnapshot onto a pygame surface the size of the playfield."""

    # Colors
    COLOR_BG = (253, 246, 236)
    COLOR_GRID = (240, 228, 212)
    COLOR_BASKET = (232, 201, 160)
    COLOR_BASKET_RIM = (212, 165, 116)
    COLOR_CATCH_LINE = (235, 215, 190)
    COLOR_TEXT = (101, 67, 33)
    COLOR_HEART_FULL = (232, 93, 117)
    COLOR_HEART_EMPTY = (225, 210, 200)
    COLOR_OVERLAY = (253, 246, 236, 200)
    COLOR_FLASH_MISS = (232, 93, 117, 60)
    FLAVOR_COLORS = {
        "cookie": (196, 137, 79),
        "cupcake": (244, 164, 196),
        "heart": (232, 93, 117),
    }

    def __init__(self, config=DEFAULT_CONFIG):
        self.config = config
        pygame.font.init()
        self.font_main = pygame.font.SysFont("sans-serif", 22, bold=True)
        self.font_large = pygame.font.SysFont("sans-serif", 36, bold=True)
        self.font_small = pygame.font.SysFont("sans-serif", 16)

    def draw(self, surface, snapshot, new_high_score=False, flash_miss=0):
        width, height = surface.get_size()
        surface.fill(self.COLOR_BG)
        for y in range(0, height, 40):
            pygame.draw.line(surface, self.COLOR_GRID, (0, y), (width, y))

        size = snapshot.geometry.item_size
        for item in snapshot.items:
            self._draw_item(surface, item, size)
        self._draw_catcher(surface, snapshot)

        if flash_miss > 0:
            overlay = pygame.Surface((width, height), pygame.SRCALPHA)
            overlay.fill(self.COLOR_FLASH_MISS)
            surface.blit(overlay, (0, 0))

        self._draw_ui(surface, snapshot, new_high_score)

    def to_array(self, surface):
        arr = pygame.surfarray.array3d(surface)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def _draw_item(self, surface, item, size):
        color = self.FLAVOR_COLORS.get(item.flavor, self.FLAVOR_COLORS["cookie"])
        cx = int(item.x + size / 2)
        cy = int(item.y + size / 2)
        r = int(size / 2)
        if item.flavor == "heart":
            # Two lobes and a point
            lobe = max(1, r // 2)
            pygame.gfxdraw.filled_circle(surface, cx - lobe, cy - lobe // 2, lobe, color)
            pygame.gfxdraw.filled_circle(surface, cx + lobe, cy - lobe // 2, lobe, color)
            pygame.gfxdraw.filled_polygon(
                surface, [(cx - r, cy - lobe // 4), (cx + r, cy - lobe // 4), (cx, cy + r)], color
            )
        elif item.flavor == "cupcake":
            pygame.gfxdraw.filled_circle(surface, cx, cy - r // 4, int(r * 0.7), color)
            pygame.draw.rect(surface, self.COLOR_BASKET_RIM, (cx - r // 2, cy, r, r // 2))
        else:
            pygame.gfxdraw.aacircle(surface, cx, cy, int(r * 0.8), color)
            pygame.gfxdraw.filled_circle(surface, cx, cy, int(r * 0.8), color)

    def _draw_catcher(self, surface, snapshot):
        catcher = snapshot.catcher
        geometry = snapshot.geometry
        top = geometry.height - catcher.height
        mouth = catch_zone_top(catcher, geometry, self.config)

        pygame.draw.line(surface, self.COLOR_CATCH_LINE, (0, int(mouth)), (int(geometry.width), int(mouth)))
        body = pygame.Rect(int(catcher.x), int(mouth), int(catcher.width), int(geometry.height - mouth))
        pygame.draw.ellipse(surface, self.COLOR_BASKET, body)
        pygame.draw.ellipse(surface, self.COLOR_BASKET_RIM, body, 2)
        rim = pygame.Rect(int(catcher.x), int(mouth) - 4, int(catcher.width), 8)
        pygame.draw.ellipse(surface, self.COLOR_BASKET_RIM, rim)
        # Handle arcs above the mouth
        handle = pygame.Rect(int(catcher.x + catcher.width * 0.2), int(top),
                             int(catcher.width * 0.6), int(mouth - top) * 2)
        pygame.draw.arc(surface, self.COLOR_BASKET_RIM, handle, 0, np.pi, 3)

    def _draw_ui(self, surface, snapshot, new_high_score):
        width, height = surface.get_size()

        score_text = self.font_main.render(f"SCORE: {snapshot.score}", True, self.COLOR_TEXT)
        surface.blit(score_text, (10, 10))

        for i in range(self.config.max_lives):
            color = self.COLOR_HEART_FULL if i < snapshot.lives else self.COLOR_HEART_EMPTY
            pygame.gfxdraw.filled_circle(surface, width - 20 - i * 22, 20, 8, color)

        if snapshot.status is Status.PLAYING and not snapshot.paused:
            return

        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        overlay.fill(self.COLOR_OVERLAY)
        surface.blit(overlay, (0, 0))

        if snapshot.status is Status.GAME_OVER:
            message = "NEW HIGH SCORE!" if new_high_score else "GAME OVER"
            hint = "Press Space to play again"
        elif snapshot.paused:
            message = "PAUSED"
            hint = "Press P to resume"
        else:
            message = "CATCH THE TREATS!"
            hint = "Hearts = 3 points. Press Space to start"

        end_text = self.font_large.render(message, True, self.COLOR_HEART_FULL)
        surface.blit(end_text, end_text.get_rect(center=(width / 2, height / 2 - 20)))

        hint_text = self.font_small.render(hint, True, self.COLOR_TEXT)
        surface.blit(hint_text, hint_text.get_rect(center=(width / 2, height / 2 + 14)))

        if snapshot.high_score > 0:
            best_text = self.font_main.render(f"HIGH SCORE: {snapshot.high_score}", True, self.COLOR_TEXT)
            surface.blit(best_text, best_text.get_rect(center=(width / 2, height / 2 + 44)))
