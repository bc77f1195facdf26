import logging
import math
import numbers
from dataclasses import dataclass
from typing import Optional

from catchgame.config import (
    DEFAULT_CONFIG,
    MIN_PLAYFIELD_HEIGHT,
    MIN_PLAYFIELD_WIDTH,
    MIN_VIEWPORT,
    MOBILE_MAX_WIDTH,
    TABLET_MAX_WIDTH,
    GameConfig,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlayfieldGeometry:
    viewport_class: str
    width: float
    height: float
    item_size: float
    catcher_width: float
    catcher_height: float

    @property
    def max_catcher_x(self) -> float:
        return max(0.0, self.width - self.catcher_width)

    @property
    def max_item_x(self) -> float:
        return max(0.0, self.width - self.item_size)


def _usable(value) -> bool:
    return value is not None and isinstance(value, numbers.Real) and math.isfinite(value) and value > 0


def classify_viewport(viewport_width: float) -> str:
    if viewport_width < MOBILE_MAX_WIDTH:
        return 'mobile'
    if viewport_width < TABLET_MAX_WIDTH:
        return 'tablet'
    return 'desktop'


def resolve_geometry(viewport_width: Optional[float], viewport_height: Optional[float],
                     config: GameConfig = DEFAULT_CONFIG) -> PlayfieldGeometry:
    """Map a viewport size to playfield dimensions.

    Pure and total: a missing, non-finite or non-positive dimension is
    replaced by MIN_VIEWPORT, and the playfield is floored at
    MIN_PLAYFIELD_WIDTH x MIN_PLAYFIELD_HEIGHT so a tiny viewport still
    yields a playable field.
    """
    if not _usable(viewport_width) or not _usable(viewport_height):
        logger.debug("Degenerate viewport %rx%r, using minimum %s",
                     viewport_width, viewport_height, MIN_VIEWPORT)
        viewport_width, viewport_height = MIN_VIEWPORT

    preset = config.presets[classify_viewport(viewport_width)]

    width = min(viewport_width - 2 * preset.side_margin, preset.max_width)
    height = min(viewport_height - preset.chrome_height, preset.max_height)

    # Floors must also leave room for the catcher and one item
    width = max(width, MIN_PLAYFIELD_WIDTH, preset.catcher_width, preset.item_size)
    height = max(height, MIN_PLAYFIELD_HEIGHT, preset.catcher_height + preset.item_size)

    return PlayfieldGeometry(
        viewport_class=preset.name,
        width=float(width),
        height=float(height),
        item_size=preset.item_size,
        catcher_width=preset.catcher_width,
        catcher_height=preset.catcher_height,
    )
