"""Score-driven difficulty curve."""

import math

import numpy as np

from catchgame.config import DEFAULT_CONFIG, GameConfig


def spawn_interval_ms(score: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    # Non-increasing in score, never below the floor
    return max(config.base_interval_ms - score * config.interval_decay_per_point, config.min_interval_ms)


def speed_step(score: int, config: GameConfig = DEFAULT_CONFIG) -> float:
    return math.floor(score / config.speed_step_divisor) * config.speed_step_increment


def fall_speed(score: int, rng: np.random.Generator, config: GameConfig = DEFAULT_CONFIG) -> float:
    """Per-tick fall speed for a newly spawned item.

    The jitter stays inside [base_speed, base_speed + speed_jitter), so the
    expected speed is a non-decreasing step function of score.
    """
    jitter = rng.uniform(0.0, config.speed_jitter) if config.speed_jitter > 0 else 0.0
    return config.base_speed + float(jitter) + speed_step(score, config)
