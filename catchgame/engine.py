import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from catchgame.clock import FrameClock, TickHandle
from catchgame.config import DEFAULT_CONFIG, MIN_VIEWPORT, GameConfig
from catchgame.geometry import PlayfieldGeometry, resolve_geometry
from catchgame.ports import HighScoreStore, MemoryHighScoreStore, NullPresentation, PointerInput, Presentation
from catchgame.session import (
    Catcher,
    EventType,
    FallingItem,
    GameSession,
    SessionEvent,
    Status,
    TickInput,
    apply_geometry,
    new_session,
    reset_session,
    resume_session,
    start_session,
    tick,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSnapshot:
    items: Tuple[FallingItem, ...]
    catcher: Catcher
    score: int
    lives: int
    status: Status
    high_score: int
    paused: bool
    geometry: PlayfieldGeometry


class CatchGame:
    """Runs one catch-game session per start() on a frame clock.

    Each scheduled frame reads the current pointer, geometry and session,
    applies one tick and reschedules itself while the session is playing
    and not paused. Lifecycle calls that are invalid for the current status
    are ignored.
    """

    def __init__(self, clock: FrameClock, pointer: Optional[PointerInput] = None,
                 store: Optional[HighScoreStore] = None, presentation: Optional[Presentation] = None,
                 config: GameConfig = DEFAULT_CONFIG, viewport: Tuple[float, float] = MIN_VIEWPORT,
                 seed: Optional[int] = None, defer_writes: bool = False):
        self.clock = clock
        self.pointer = pointer if pointer is not None else PointerInput()
        self.store = store if store is not None else MemoryHighScoreStore()
        self.presentation = presentation if presentation is not None else NullPresentation()
        self.config = config

        self.geometry = resolve_geometry(*viewport, config=config)
        self.session: GameSession = new_session(self.geometry, config)
        self.rng = np.random.default_rng(seed)

        self.paused = False
        self.new_high_score = False
        self.high_score = self._read_high_score()
        self.defer_writes = defer_writes
        self._pending_score: Optional[int] = None
        self._handle: Optional[TickHandle] = None

    # --- Properties ---

    @property
    def status(self) -> Status:
        return self.session.status

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def best_score(self) -> int:
        return max(self.high_score, self.session.score)

    def seed(self, seed: Optional[int]) -> None:
        self.rng = np.random.default_rng(seed)

    def snapshot(self) -> GameSnapshot:
        session = self.session
        return GameSnapshot(
            items=session.items,
            catcher=session.catcher,
            score=session.score,
            lives=session.lives,
            status=session.status,
            high_score=self.best_score,
            paused=self.paused,
            geometry=self.geometry,
        )

    # --- Lifecycle ---

    def start(self) -> bool:
        if self.session.status is Status.PLAYING:
            logger.debug("start() ignored: already playing")
            return False
        self._cancel()
        self.flush_high_score()
        self.high_score = self._read_high_score()
        self.session = start_session(self.session, self.geometry, self.config)
        self.paused = False
        self.new_high_score = False
        self._schedule()
        logger.info("Session started (%s playfield %.0fx%.0f, high score %d)",
                    self.geometry.viewport_class, self.geometry.width, self.geometry.height, self.high_score)
        return True

    def pause(self) -> bool:
        if self.session.status is not Status.PLAYING or self.paused:
            logger.debug("pause() ignored in status %s", self.session.status.value)
            return False
        self.paused = True
        self._cancel()
        return True

    def resume(self) -> bool:
        if self.session.status is not Status.PLAYING or not self.paused:
            logger.debug("resume() ignored in status %s", self.session.status.value)
            return False
        self.paused = False
        self.session = resume_session(self.session)
        self._schedule()
        return True

    def reset(self) -> bool:
        if self.session.status is not Status.GAME_OVER:
            logger.debug("reset() ignored in status %s", self.session.status.value)
            return False
        self._cancel()
        self.flush_high_score()
        self.session = reset_session(self.session, self.geometry, self.config)
        self.paused = False
        self.new_high_score = False
        return True

    def close(self) -> None:
        """Stop scheduling frames. The session is kept for reading."""
        self._cancel()
        self.flush_high_score()
        if self.session.status is Status.PLAYING:
            self.paused = True

    def resize(self, viewport_width: float, viewport_height: float) -> PlayfieldGeometry:
        geometry = resolve_geometry(viewport_width, viewport_height, config=self.config)
        if geometry != self.geometry:
            logger.debug("Playfield resized to %s", geometry)
            self.geometry = geometry
            self.session = apply_geometry(self.session, geometry)
        return self.geometry

    # --- Loop ---

    def _schedule(self) -> None:
        if self._handle is None:
            self._handle = self.clock.schedule_next_tick(self._on_frame)

    def _cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_frame(self, timestamp_ms: float) -> None:
        self._handle = None
        if self.session.status is not Status.PLAYING or self.paused:
            return

        pointer = self.pointer.current_pointer()
        tick_input = TickInput(timestamp_ms=timestamp_ms, pointer_x=pointer[0] if pointer else None)
        self.session, events = tick(self.session, self.geometry, tick_input, self.rng, self.config)
        self._dispatch(events)

        if self.session.status is Status.PLAYING and not self.paused:
            self._schedule()

    def _dispatch(self, events) -> None:
        for event in events:
            if event.type is EventType.CAUGHT:
                self._notify('on_catch', event.item.kind)
            elif event.type is EventType.MISSED:
                self._notify('on_miss')
            elif event.type is EventType.GAME_OVER:
                self._finish(event)

    def _finish(self, event: SessionEvent) -> None:
        logger.info("Game over: score %d (%d caught, %d missed)",
                    event.score, self.session.caught_count, self.session.missed_count)
        self._pending_score = event.score
        if not self.defer_writes:
            self.flush_high_score()

    def flush_high_score(self) -> bool:
        """Settle a finished session's score against the store.

        The score is compared with the value the store holds now, not the
        one read at start().
        Hosts built with ``defer_writes`` call this outside the frame
        callback. Returns True when a new high score was recorded.
        """
        if self._pending_score is None:
            return False
        score, self._pending_score = self._pending_score, None
        stored = self._read_high_score()
        if score <= stored:
            self.high_score = stored
            return False
        logger.info("New high score %d (was %d)", score, stored)
        self.high_score = score
        self.new_high_score = True
        self._write_high_score(score)
        self._notify('on_new_high_score')
        return True

    # --- Ports ---

    def _notify(self, hook: str, *args) -> None:
        try:
            getattr(self.presentation, hook)(*args)
        except Exception:
            logger.warning("Presentation hook %s failed", hook, exc_info=True)

    def _read_high_score(self) -> int:
        try:
            return max(0, int(self.store.read_high_score()))
        except Exception:
            logger.warning("High score store unavailable, treating as 0", exc_info=True)
            return 0

    def _write_high_score(self, value: int) -> None:
        try:
            self.store.write_high_score(value)
        except Exception:
            logger.warning("High score store rejected write of %d", value, exc_info=True)
