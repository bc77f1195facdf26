from dataclasses import replace

import pytest

from catchgame.clock import SteppedClock
from catchgame.engine import CatchGame
from catchgame.ports import MemoryHighScoreStore, PointerInput
from catchgame.session import FallingItem, ItemKind, Status

PHONE = (390, 844)
DESKTOP = (1440, 900)


@pytest.fixture
def game(clock, pointer, store, presentation):
    return CatchGame(clock, pointer, store, presentation, viewport=PHONE, seed=7)


def doomed_session(game, score=0, lives=1):
    """A playing session whose single item drops past the floor on the next frame."""
    geometry = game.geometry
    item = FallingItem(id=0, x=0.0, y=geometry.height - 1, kind=ItemKind.COMMON, fall_speed=5.0)
    # Keep the catcher away from the item
    catcher = replace(game.session.catcher, x=geometry.max_catcher_x)
    return replace(game.session, score=score, lives=lives, items=(item,), catcher=catcher,
                   since_spawn_ms=0.0, last_tick_ms=None)


def run_until_over(game, clock, limit=20000):
    for _ in range(limit):
        if game.status is not Status.PLAYING:
            return
        clock.advance()
    raise AssertionError("session never ended")


def test_new_game_is_idle(game, clock):
    assert game.status is Status.IDLE
    assert game.session.score == 0
    assert game.session.lives == 3
    assert game.session.items == ()
    assert clock.pending == 0


def test_start_begins_a_fresh_session(game, clock):
    assert game.start()
    assert game.status is Status.PLAYING
    assert game.session.score == 0
    assert game.session.lives == 3
    assert game.session.items == ()
    assert clock.pending == 1


def test_start_while_playing_is_ignored(game, clock):
    game.start()
    clock.advance()
    items = game.session.items

    assert not game.start()
    assert game.session.items == items
    assert clock.pending == 1


def test_each_frame_schedules_exactly_one_more(game, clock):
    game.start()
    for _ in range(10):
        assert clock.advance() == 1
        assert clock.pending == 1


def test_pause_stops_the_loop(game, clock):
    game.start()
    clock.advance()
    assert game.pause()
    assert clock.pending == 0

    frozen = game.session
    clock.advance(5000)
    assert game.session is frozen
    assert not game.pause()


def test_resume_continues_without_counting_paused_time(game, clock):
    game.start()
    clock.advance()
    game.pause()
    clock.advance(60000)

    assert game.resume()
    assert clock.pending == 1
    clock.advance()
    # Only the first item exists: the paused minute did not trigger spawns
    assert [item.id for item in game.session.items] == [0]


def test_resume_when_not_paused_is_ignored(game, clock):
    assert not game.resume()
    game.start()
    assert not game.resume()
    assert clock.pending == 1


def test_close_releases_the_schedule(game, clock):
    game.start()
    game.close()
    assert clock.pending == 0
    assert not game.running


def test_pointer_is_read_every_frame(game, clock, pointer):
    game.start()
    pointer.move(100.0, 10.0)
    clock.advance()
    assert game.session.catcher.x == pytest.approx(100.0 - game.geometry.catcher_width / 2)

    pointer.move(5000.0, 10.0)
    clock.advance()
    assert game.session.catcher.x == game.geometry.max_catcher_x


def test_pointer_ignored_while_idle(game, clock, pointer):
    before = game.session.catcher
    pointer.move(0.0)
    clock.advance()
    assert game.session.catcher == before


def test_resize_reclamps_catcher(clock, pointer, store, presentation):
    game = CatchGame(clock, pointer, store, presentation, viewport=DESKTOP, seed=1)
    game.start()
    pointer.move(10000.0)
    clock.advance()
    assert game.session.catcher.x == game.geometry.max_catcher_x

    geometry = game.resize(375, 812)
    assert geometry.viewport_class == "mobile"
    assert game.session.catcher.width == geometry.catcher_width
    assert 0 <= game.session.catcher.x <= geometry.width - geometry.catcher_width

    clock.advance()
    assert game.status is Status.PLAYING
    assert game.session.catcher.x == geometry.max_catcher_x


def test_resize_to_degenerate_viewport_does_not_crash(game, clock):
    game.start()
    clock.advance()
    geometry = game.resize(0, float("nan"))
    assert geometry.width > 0 and geometry.height > 0
    clock.advance()
    assert game.status is Status.PLAYING


def test_miss_notifies_presentation(game, clock, presentation):
    game.start()
    game.session = doomed_session(game, lives=3)
    clock.advance()
    assert presentation.misses == 1
    assert game.session.lives == 2


def test_last_miss_ends_game_and_stops_loop(game, clock):
    game.start()
    game.session = doomed_session(game, score=4)
    clock.advance()

    assert game.status is Status.GAME_OVER
    assert game.session.lives == 0
    assert clock.pending == 0
    assert not game.running


def test_game_over_is_frozen(game, clock, pointer):
    game.start()
    game.session = doomed_session(game, score=4)
    clock.advance()
    over = game.session

    pointer.move(0.0)
    assert not game.pause()
    assert not game.resume()
    clock.advance()
    assert game.session is over


def test_new_high_score_is_stored_and_celebrated(game, clock, store, presentation):
    game.start()
    game.session = doomed_session(game, score=7)
    clock.advance()

    assert store.read_high_score() == 7
    assert game.high_score == 7
    assert game.new_high_score
    assert presentation.celebrations == 1


def test_lower_or_equal_score_never_lowers_high_score(clock, pointer, presentation):
    store = MemoryHighScoreStore(10)
    game = CatchGame(clock, pointer, store, presentation, viewport=PHONE)

    for score in (7, 10, 10):
        game.start()
        game.session = doomed_session(game, score=score)
        clock.advance()
        assert game.status is Status.GAME_OVER
        assert store.read_high_score() == 10
        assert not game.new_high_score

    assert presentation.celebrations == 0


def test_zero_score_is_never_celebrated(game, clock, presentation):
    game.start()
    game.session = doomed_session(game, score=0)
    clock.advance()
    assert presentation.celebrations == 0
    assert not game.new_high_score


def test_best_score_tracks_live_score(clock, pointer, presentation):
    game = CatchGame(clock, pointer, MemoryHighScoreStore(5), presentation, viewport=PHONE)
    game.start()
    assert game.best_score == 5
    game.session = replace(game.session, score=9)
    assert game.best_score == 9
    assert game.snapshot().high_score == 9


def test_reset_returns_to_idle_only_after_game_over(game, clock):
    assert not game.reset()
    game.start()
    assert not game.reset()

    game.session = doomed_session(game, score=2)
    clock.advance()
    assert game.reset()
    assert game.status is Status.IDLE
    assert game.session.score == 0
    assert game.session.lives == 3


def test_play_again_after_game_over(game, clock):
    game.start()
    game.session = doomed_session(game, score=2)
    clock.advance()

    assert game.start()
    assert game.status is Status.PLAYING
    assert game.session.score == 0
    assert game.session.items == ()
    clock.advance()
    assert [item.id for item in game.session.items] == [0]


def test_full_run_ends_with_three_misses(game, clock, presentation):
    game.start()
    run_until_over(game, clock)

    assert game.status is Status.GAME_OVER
    assert game.session.missed_count == 3
    assert presentation.misses == 3
    assert len(presentation.catches) == game.session.caught_count
    assert clock.pending == 0


def test_same_seed_replays_identically(pointer):
    def play(seed):
        clock = SteppedClock()
        game = CatchGame(clock, pointer, MemoryHighScoreStore(), viewport=PHONE, seed=seed)
        game.start()
        run_until_over(game, clock)
        return game.session.score, game.session.caught_count, game.session.next_item_id

    assert play(42) == play(42)


class BrokenStore:
    def read_high_score(self):
        raise OSError("storage disabled")

    def write_high_score(self, value):
        raise OSError("storage disabled")


class BrokenPresentation:
    def on_catch(self, kind):
        raise RuntimeError("no audio")

    def on_miss(self):
        raise RuntimeError("no audio")

    def on_new_high_score(self):
        raise RuntimeError("no confetti")


def test_unavailable_store_reads_as_zero_and_never_raises(clock, pointer):
    game = CatchGame(clock, pointer, BrokenStore(), viewport=PHONE)
    assert game.high_score == 0

    game.start()
    game.session = doomed_session(game, score=3)
    clock.advance()
    assert game.status is Status.GAME_OVER
    assert game.high_score == 3


def test_failing_presentation_does_not_affect_play(clock, pointer):
    game = CatchGame(clock, pointer, MemoryHighScoreStore(), BrokenPresentation(), viewport=PHONE, seed=3)
    game.start()
    run_until_over(game, clock)
    assert game.status is Status.GAME_OVER
    assert game.session.lives == 0


def test_snapshot_reflects_session(game, clock):
    game.start()
    clock.advance()
    snapshot = game.snapshot()
    assert snapshot.status is Status.PLAYING
    assert snapshot.items == game.session.items
    assert snapshot.catcher == game.session.catcher
    assert snapshot.lives == 3
    assert not snapshot.paused
    assert snapshot.geometry == game.geometry


def test_score_is_compared_with_the_store_at_game_over(clock, pointer, presentation):
    store = MemoryHighScoreStore()
    game = CatchGame(clock, pointer, store, presentation, viewport=PHONE)
    other = CatchGame(SteppedClock(), PointerInput(), store, viewport=PHONE)

    game.start()
    other.start()
    other.session = doomed_session(other, score=500)
    other.clock.advance()
    assert store.read_high_score() == 500

    game.session = doomed_session(game, score=1)
    clock.advance()
    assert game.status is Status.GAME_OVER
    assert store.read_high_score() == 500
    assert game.high_score == 500
    assert not game.new_high_score
    assert presentation.celebrations == 0


def test_deferred_write_waits_for_flush(clock, pointer, store, presentation):
    game = CatchGame(clock, pointer, store, presentation, viewport=PHONE, defer_writes=True)
    game.start()
    game.session = doomed_session(game, score=6)
    clock.advance()

    assert game.status is Status.GAME_OVER
    assert store.read_high_score() == 0
    assert presentation.celebrations == 0

    assert game.flush_high_score()
    assert store.read_high_score() == 6
    assert game.new_high_score
    assert presentation.celebrations == 1
    assert not game.flush_high_score()


def test_pending_write_is_flushed_on_close(clock, pointer, store):
    game = CatchGame(clock, pointer, store, viewport=PHONE, defer_writes=True)
    game.start()
    game.session = doomed_session(game, score=4)
    clock.advance()

    game.close()
    assert store.read_high_score() == 4
