"""Game session state and the per-tick transition.

Every function here is a pure ``(session, input) -> session'`` step: the
session and its items are frozen dataclasses and each tick returns a new
session together with the events it produced. The only injected side
channel is the numpy random Generator used for spawns.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from catchgame.config import COMMON_FLAVORS, DEFAULT_CONFIG, RARE_FLAVORS, GameConfig
from catchgame.difficulty import fall_speed, spawn_interval_ms
from catchgame.geometry import PlayfieldGeometry

logger = logging.getLogger(__name__)


class Status(Enum):
    IDLE = 'idle'
    PLAYING = 'playing'
    GAME_OVER = 'game_over'


class ItemKind(Enum):
    COMMON = 'common'
    RARE = 'rare'


class Outcome(Enum):
    CAUGHT = 'caught'
    MISSED = 'missed'
    FALLING = 'falling'


class EventType(Enum):
    CAUGHT = 'caught'
    MISSED = 'missed'
    GAME_OVER = 'game_over'


@dataclass(frozen=True)
class FallingItem:
    id: int
    x: float
    y: float
    kind: ItemKind
    fall_speed: float
    flavor: str = 'cookie'

    def center_x(self, item_size: float) -> float:
        return self.x + item_size / 2

    def bottom(self, item_size: float) -> float:
        return self.y + item_size


@dataclass(frozen=True)
class Catcher:
    x: float
    width: float
    height: float


@dataclass(frozen=True)
class TickInput:
    timestamp_ms: float
    pointer_x: Optional[float] = None


@dataclass(frozen=True)
class SessionEvent:
    type: EventType
    item: Optional[FallingItem] = None
    score: int = 0
    lives: int = 0


@dataclass(frozen=True)
class GameSession:
    score: int
    lives: int
    status: Status
    catcher: Catcher
    items: Tuple[FallingItem, ...] = ()
    next_item_id: int = 0
    # None until the first spawn of the session, which happens immediately
    since_spawn_ms: Optional[float] = None
    # None right after start or resume, so paused time never counts
    last_tick_ms: Optional[float] = None
    caught_count: int = 0
    missed_count: int = 0


# --- Input Tracker ---

def clamp_catcher_x(x: float, geometry: PlayfieldGeometry) -> float:
    return min(max(x, 0.0), geometry.max_catcher_x)


def track_pointer(catcher: Catcher, pointer_x: Optional[float], geometry: PlayfieldGeometry) -> Catcher:
    """Centre the catcher under the pointer, clamped to the playfield."""
    if pointer_x is None:
        return catcher
    return replace(catcher, x=clamp_catcher_x(pointer_x - catcher.width / 2, geometry))


def _centered_catcher(geometry: PlayfieldGeometry) -> Catcher:
    return Catcher(
        x=clamp_catcher_x((geometry.width - geometry.catcher_width) / 2, geometry),
        width=geometry.catcher_width,
        height=geometry.catcher_height,
    )


# --- Lifecycle ---

def new_session(geometry: PlayfieldGeometry, config: GameConfig = DEFAULT_CONFIG) -> GameSession:
    return GameSession(score=0, lives=config.max_lives, status=Status.IDLE, catcher=_centered_catcher(geometry))


def start_session(session: GameSession, geometry: PlayfieldGeometry,
                  config: GameConfig = DEFAULT_CONFIG) -> GameSession:
    if session.status is Status.PLAYING:
        return session
    fresh = new_session(geometry, config)
    return replace(fresh, status=Status.PLAYING)


def reset_session(session: GameSession, geometry: PlayfieldGeometry,
                  config: GameConfig = DEFAULT_CONFIG) -> GameSession:
    # GameOver -> Idle is the only reset edge
    if session.status is not Status.GAME_OVER:
        return session
    return new_session(geometry, config)


def resume_session(session: GameSession) -> GameSession:
    return replace(session, last_tick_ms=None)


def apply_geometry(session: GameSession, geometry: PlayfieldGeometry) -> GameSession:
    """Swap in new catcher dimensions and re-clamp its position."""
    if session.status is Status.GAME_OVER:
        return session
    catcher = Catcher(
        x=clamp_catcher_x(session.catcher.x, geometry),
        width=geometry.catcher_width,
        height=geometry.catcher_height,
    )
    return replace(session, catcher=catcher)


# --- Spawn Controller ---

def _roll_kind(rng: np.random.Generator, config: GameConfig) -> Tuple[ItemKind, str]:
    if rng.random() < config.rare_weight:
        return ItemKind.RARE, str(rng.choice(RARE_FLAVORS))
    return ItemKind.COMMON, str(rng.choice(COMMON_FLAVORS))


def spawn_item(session: GameSession, geometry: PlayfieldGeometry, rng: np.random.Generator,
               config: GameConfig = DEFAULT_CONFIG) -> Tuple[GameSession, FallingItem]:
    kind, flavor = _roll_kind(rng, config)
    item = FallingItem(
        id=session.next_item_id,
        x=float(rng.uniform(0.0, geometry.max_item_x)),
        y=-geometry.item_size,
        kind=kind,
        fall_speed=fall_speed(session.score, rng, config),
        flavor=flavor,
    )
    session = replace(
        session,
        items=session.items + (item,),
        next_item_id=session.next_item_id + 1,
        since_spawn_ms=0.0,
    )
    return session, item


def maybe_spawn(session: GameSession, elapsed_ms: float, geometry: PlayfieldGeometry,
                rng: np.random.Generator, config: GameConfig = DEFAULT_CONFIG) -> GameSession:
    if session.since_spawn_ms is None:
        session, item = spawn_item(session, geometry, rng, config)
        logger.debug("Spawned first item %s", item)
        return session

    since = session.since_spawn_ms + elapsed_ms
    if since > spawn_interval_ms(session.score, config):
        session, item = spawn_item(session, geometry, rng, config)
        logger.debug("Spawned item %s after %.1f ms", item, since)
        return session
    return replace(session, since_spawn_ms=since)


# --- Physics Integrator ---

def integrate(items: Tuple[FallingItem, ...]) -> Tuple[FallingItem, ...]:
    return tuple(replace(item, y=item.y + item.fall_speed) for item in items)


# --- Collision Resolver ---

def catch_zone_top(catcher: Catcher, geometry: PlayfieldGeometry, config: GameConfig = DEFAULT_CONFIG) -> float:
    # Collide against the basket mouth, not the full bounding box
    return geometry.height - catcher.height + catcher.height * config.basket_opening_ratio


def classify(item: FallingItem, catcher: Catcher, geometry: PlayfieldGeometry,
             config: GameConfig = DEFAULT_CONFIG) -> Outcome:
    bottom = item.bottom(geometry.item_size)
    center = item.center_x(geometry.item_size)
    if (bottom >= catch_zone_top(catcher, geometry, config)
            and catcher.x <= center <= catcher.x + catcher.width
            and bottom <= geometry.height):
        return Outcome.CAUGHT
    if item.y > geometry.height:
        return Outcome.MISSED
    return Outcome.FALLING


# --- Score Keeper ---

def points_for(kind: ItemKind, config: GameConfig = DEFAULT_CONFIG) -> int:
    return config.rare_points if kind is ItemKind.RARE else config.common_points


def record_catch(session: GameSession, item: FallingItem, config: GameConfig = DEFAULT_CONFIG) -> GameSession:
    if session.status is not Status.PLAYING:
        return session
    return replace(
        session,
        score=session.score + points_for(item.kind, config),
        caught_count=session.caught_count + 1,
    )


def record_miss(session: GameSession) -> GameSession:
    if session.status is not Status.PLAYING:
        return session
    lives = max(session.lives - 1, 0)
    status = Status.GAME_OVER if lives == 0 else session.status
    return replace(session, lives=lives, status=status, missed_count=session.missed_count + 1)


# --- Tick ---

def tick(session: GameSession, geometry: PlayfieldGeometry, tick_input: TickInput,
         rng: np.random.Generator, config: GameConfig = DEFAULT_CONFIG) -> Tuple[GameSession, List[SessionEvent]]:
    """Advance a playing session by one frame.

    Order: input, spawn, physics, collisions. Once the last life is lost
    the remaining items are left untouched and the session is frozen.
    """
    if session.status is not Status.PLAYING:
        return session, []

    if session.last_tick_ms is None:
        elapsed = 0.0
    else:
        elapsed = max(tick_input.timestamp_ms - session.last_tick_ms, 0.0)

    session = replace(
        session,
        catcher=track_pointer(session.catcher, tick_input.pointer_x, geometry),
        last_tick_ms=tick_input.timestamp_ms,
    )
    session = maybe_spawn(session, elapsed, geometry, rng, config)

    moved = integrate(session.items)
    events: List[SessionEvent] = []
    survivors: List[FallingItem] = []

    for index, item in enumerate(moved):
        outcome = classify(item, session.catcher, geometry, config)
        if outcome is Outcome.CAUGHT:
            session = record_catch(session, item, config)
            events.append(SessionEvent(EventType.CAUGHT, item=item, score=session.score, lives=session.lives))
        elif outcome is Outcome.MISSED:
            session = record_miss(session)
            events.append(SessionEvent(EventType.MISSED, item=item, score=session.score, lives=session.lives))
            if session.status is Status.GAME_OVER:
                survivors.extend(moved[index + 1:])
                events.append(SessionEvent(EventType.GAME_OVER, score=session.score, lives=0))
                break
        else:
            survivors.append(item)

    return replace(session, items=tuple(survivors)), events
