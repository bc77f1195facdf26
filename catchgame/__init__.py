"""Falling-treat catch game: simulation core, frame-driven engine and gym environment."""

from catchgame.clock import FrameClock, PygameClock, SteppedClock, TickHandle
from catchgame.config import DEFAULT_CONFIG, VIEWPORT_PRESETS, GameConfig, ViewportPreset
from catchgame.difficulty import fall_speed, spawn_interval_ms
from catchgame.engine import CatchGame, GameSnapshot
from catchgame.geometry import PlayfieldGeometry, classify_viewport, resolve_geometry
from catchgame.ports import JsonHighScoreStore, MemoryHighScoreStore, NullPresentation, PointerInput
from catchgame.session import (
    Catcher,
    EventType,
    FallingItem,
    GameSession,
    ItemKind,
    Outcome,
    SessionEvent,
    Status,
    TickInput,
    tick,
)

__all__ = [
    "CatchGame",
    "Catcher",
    "DEFAULT_CONFIG",
    "EventType",
    "FallingItem",
    "FrameClock",
    "GameConfig",
    "GameSession",
    "GameSnapshot",
    "ItemKind",
    "JsonHighScoreStore",
    "MemoryHighScoreStore",
    "NullPresentation",
    "Outcome",
    "PlayfieldGeometry",
    "PointerInput",
    "PygameClock",
    "SessionEvent",
    "Status",
    "SteppedClock",
    "TickHandle",
    "TickInput",
    "VIEWPORT_PRESETS",
    "ViewportPreset",
    "classify_viewport",
    "fall_speed",
    "resolve_geometry",
    "spawn_interval_ms",
    "tick",
]
