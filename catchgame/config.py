"""Tuning constants for the catch game.

Screen presets, difficulty knobs and scoring values live here so the
simulation modules stay free of magic numbers.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Tuple

# Viewport breakpoints (viewport width, exclusive upper bound)
MOBILE_MAX_WIDTH: int = 640
TABLET_MAX_WIDTH: int = 1024

# Safe minimums substituted for degenerate viewports
MIN_VIEWPORT: Tuple[int, int] = (320, 480)
MIN_PLAYFIELD_WIDTH: int = 200
MIN_PLAYFIELD_HEIGHT: int = 240

# Frame pacing for hosts that drive the loop themselves
FPS: int = 60
FRAME_MS: float = 1000.0 / FPS

HIGH_SCORE_KEY: str = "catch_game_high_score"

COMMON_FLAVORS: Tuple[str, ...] = ("cookie", "cupcake")
RARE_FLAVORS: Tuple[str, ...] = ("heart",)


@dataclass(frozen=True)
class ViewportPreset:
    """Playfield dimensions for one viewport class.

    Item and catcher sizes belong to the preset so they scale together
    with the playfield instead of independently.
    """

    name: str
    max_width: float        # Playfield cap
    max_height: float
    side_margin: float      # Horizontal padding taken from the viewport
    chrome_height: float    # Vertical room for header and buttons
    item_size: float
    catcher_width: float
    catcher_height: float


VIEWPORT_PRESETS: Dict[str, ViewportPreset] = {
    'mobile': ViewportPreset(
        name='mobile',
        max_width=350.0,
        max_height=450.0,
        side_margin=16.0,
        chrome_height=280.0,
        item_size=40.0,
        catcher_width=64.0,
        catcher_height=48.0,
    ),
    'tablet': ViewportPreset(
        name='tablet',
        max_width=420.0,
        max_height=520.0,
        side_margin=32.0,
        chrome_height=260.0,
        item_size=45.0,
        catcher_width=72.0,
        catcher_height=54.0,
    ),
    'desktop': ViewportPreset(
        name='desktop',
        max_width=480.0,
        max_height=560.0,
        side_margin=48.0,
        chrome_height=240.0,
        item_size=50.0,
        catcher_width=80.0,
        catcher_height=60.0,
    ),
}


@dataclass(frozen=True)
class GameConfig:
    """Difficulty curve, scoring and collision tuning.

    The values were tuned by play-feel; treat them as knobs, not physics.
    """

    max_lives: int = 3

    # Spawn interval: max(base - score * decay, min)
    base_interval_ms: float = 800.0
    interval_decay_per_point: float = 20.0
    min_interval_ms: float = 400.0

    # Fall speed: base + U(0, jitter) + floor(score / divisor) * increment
    base_speed: float = 2.0
    speed_jitter: float = 2.0
    speed_step_divisor: int = 10
    speed_step_increment: float = 0.5

    rare_weight: float = 1.0 / 3.0
    common_points: int = 1
    rare_points: int = 3

    # Fraction of catcher height above which the basket mouth starts
    basket_opening_ratio: float = 0.42

    # Read-only; left out of the hash
    presets: Mapping[str, ViewportPreset] = field(
        default_factory=lambda: MappingProxyType(dict(VIEWPORT_PRESETS)), hash=False
    )

    def __post_init__(self):
        if not isinstance(self.presets, MappingProxyType):
            object.__setattr__(self, 'presets', MappingProxyType(dict(self.presets)))
        if self.max_lives < 1:
            raise ValueError(f"max_lives must be at least 1, got {self.max_lives}")
        if self.min_interval_ms <= 0 or self.base_interval_ms < self.min_interval_ms:
            raise ValueError(
                f"Invalid spawn interval range: base={self.base_interval_ms}, min={self.min_interval_ms}"
            )
        if self.interval_decay_per_point < 0:
            raise ValueError("interval_decay_per_point must be non-negative")
        if self.base_speed <= 0 or self.speed_jitter < 0 or self.speed_step_increment < 0:
            raise ValueError("Fall speed parameters must be positive")
        if self.speed_step_divisor < 1:
            raise ValueError("speed_step_divisor must be at least 1")
        if not 0.0 <= self.rare_weight <= 1.0:
            raise ValueError(f"rare_weight must be within [0, 1], got {self.rare_weight}")
        if not 0.0 <= self.basket_opening_ratio < 1.0:
            raise ValueError(f"basket_opening_ratio must be within [0, 1), got {self.basket_opening_ratio}")
        missing = {'mobile', 'tablet', 'desktop'} - set(self.presets)
        if missing:
            raise ValueError(f"Missing viewport presets: {sorted(missing)}")

    def with_overrides(self, **overrides) -> "GameConfig":
        return replace(self, **overrides)


DEFAULT_CONFIG = GameConfig()
