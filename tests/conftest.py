import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np
import pytest

from catchgame.clock import SteppedClock
from catchgame.geometry import PlayfieldGeometry
from catchgame.ports import MemoryHighScoreStore, PointerInput
from catchgame.session import Catcher, FallingItem, GameSession, ItemKind, Status


class RecordingPresentation:
    def __init__(self):
        self.catches = []
        self.misses = 0
        self.celebrations = 0

    def on_catch(self, kind):
        self.catches.append(kind)

    def on_miss(self):
        self.misses += 1

    def on_new_high_score(self):
        self.celebrations += 1


@pytest.fixture
def geometry():
    # 400x400 field, 40px items, 60x60 catcher
    return PlayfieldGeometry(
        viewport_class="mobile",
        width=400.0,
        height=400.0,
        item_size=40.0,
        catcher_width=60.0,
        catcher_height=60.0,
    )


@pytest.fixture
def catcher():
    return Catcher(x=170.0, width=60.0, height=60.0)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def playing(catcher):
    """A playing session that will not spawn on its next short tick."""
    def build(items=(), score=0, lives=3, last_tick_ms=1000.0):
        return GameSession(
            score=score,
            lives=lives,
            status=Status.PLAYING,
            catcher=catcher,
            items=tuple(items),
            next_item_id=len(items),
            since_spawn_ms=0.0,
            last_tick_ms=last_tick_ms,
        )
    return build


@pytest.fixture
def make_item():
    def build(id=0, x=0.0, y=0.0, kind=ItemKind.COMMON, fall_speed=4.0):
        flavor = "heart" if kind is ItemKind.RARE else "cookie"
        return FallingItem(id=id, x=x, y=y, kind=kind, fall_speed=fall_speed, flavor=flavor)
    return build


@pytest.fixture
def clock():
    return SteppedClock(start_ms=0.0)


@pytest.fixture
def pointer():
    return PointerInput()


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def presentation():
    return RecordingPresentation()
