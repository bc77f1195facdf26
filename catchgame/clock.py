"""Frame clocks.

A clock hands out at most one callback per scheduled frame. The host
decides when a frame happens by calling ``advance()``; cancelling a
handle removes it from the pending list immediately.
"""

from typing import Callable, List, Optional

import pygame

from catchgame.config import FPS, FRAME_MS

FrameCallback = Callable[[float], None]


class TickHandle:
    def __init__(self, clock: "FrameClock", callback: FrameCallback):
        self._clock = clock
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._clock._discard(self)

    def _fire(self, timestamp_ms: float) -> None:
        self.cancelled = True
        self._callback(timestamp_ms)


class FrameClock:
    def __init__(self):
        self._pending: List[TickHandle] = []

    def schedule_next_tick(self, callback: FrameCallback) -> TickHandle:
        handle = TickHandle(self, callback)
        self._pending.append(handle)
        return handle

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _discard(self, handle: TickHandle) -> None:
        if handle in self._pending:
            self._pending.remove(handle)

    def _run_due(self, timestamp_ms: float) -> int:
        # Callbacks scheduled while firing wait for the next frame
        due, self._pending = self._pending, []
        fired = 0
        for handle in due:
            # An earlier callback in this frame may have cancelled it
            if handle.cancelled:
                continue
            handle._fire(timestamp_ms)
            fired += 1
        return fired


class SteppedClock(FrameClock):
    """Clock advanced explicitly by the host, one frame at a time."""

    def __init__(self, start_ms: float = 0.0, frame_ms: float = FRAME_MS):
        super().__init__()
        self.now_ms = float(start_ms)
        self.frame_ms = frame_ms

    def advance(self, ms: Optional[float] = None) -> int:
        self.now_ms += self.frame_ms if ms is None else ms
        return self._run_due(self.now_ms)


class PygameClock(FrameClock):
    """Real-time clock capped at ``fps`` using pygame's frame limiter."""

    def __init__(self, fps: int = FPS):
        super().__init__()
        self.fps = fps
        self._clock = pygame.time.Clock()

    @property
    def now_ms(self) -> float:
        return float(pygame.time.get_ticks())

    def advance(self) -> int:
        self._clock.tick(self.fps)
        return self._run_due(self.now_ms)
