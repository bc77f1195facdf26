import os

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np
import pygame

from catchgame.clock import SteppedClock
from catchgame.config import DEFAULT_CONFIG, FRAME_MS
from catchgame.engine import CatchGame
from catchgame.ports import MemoryHighScoreStore, PointerInput
from catchgame.render import SnapshotRenderer
from catchgame.session import Status

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")


class CatchEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 60}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: Use ← and → to slide the basket. Catch the falling treats!"
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Catch falling cookies and cupcakes for 1 point and hearts for 3. "
        "Treats fall faster and more often as your score climbs. Drop 3 and the game is over."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = True

    # --- Constants ---
    MAX_STEPS = 5000
    POINTER_SPEED = 12

    def __init__(self, render_mode="rgb_array", viewport=(390, 844), config=DEFAULT_CONFIG, store=None):
        super().__init__()
        self.render_mode = render_mode
        self.viewport = viewport
        self.config = config

        self.clock = SteppedClock(frame_ms=FRAME_MS)
        self.pointer = PointerInput()
        self.store = store if store is not None else MemoryHighScoreStore()
        self.engine = self._make_engine()

        self.WIDTH = int(self.engine.geometry.width)
        self.HEIGHT = int(self.engine.geometry.height)

        # EXACT spaces:
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.HEIGHT, self.WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        # Pygame setup
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.WIDTH, self.HEIGHT))
        self.renderer = SnapshotRenderer(config)

        # The following are re-initialized in reset().
        self.steps = 0
        self.game_over = False
        self.pointer_x = self.WIDTH / 2

        self.validate_implementation()

    def _make_engine(self):
        return CatchGame(self.clock, self.pointer, self.store, config=self.config, viewport=self.viewport)

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.steps = 0
        self.game_over = False

        # Fresh engine and clock per episode
        self.engine.close()
        self.clock = SteppedClock(frame_ms=FRAME_MS)
        self.engine = self._make_engine()
        self.engine.rng = self.np_random
        self.engine.start()

        catcher = self.engine.session.catcher
        self.pointer_x = catcher.x + catcher.width / 2
        self.pointer.move(self.pointer_x)

        return self._get_observation(), self._get_info()

    def step(self, action):
        if self.game_over:
            return self._get_observation(), 0, True, False, self._get_info()

        # Unpack factorized action
        movement = action[0]  # 3=left, 4=right

        self._handle_input(movement)

        prev_score = self.engine.session.score
        prev_lives = self.engine.session.lives

        # One frame of simulated time
        self.clock.advance()
        self.steps += 1

        session = self.engine.session
        reward = (session.score - prev_score) - (prev_lives - session.lives)

        terminated = session.status is Status.GAME_OVER or self.steps >= self.MAX_STEPS
        if terminated:
            self.game_over = True
            self.engine.close()

        return (
            self._get_observation(),
            reward,
            terminated,
            False,
            self._get_info()
        )

    def _handle_input(self, movement):
        if movement == 3:  # Left
            self.pointer_x -= self.POINTER_SPEED
        elif movement == 4:  # Right
            self.pointer_x += self.POINTER_SPEED

        # Keep the virtual pointer on the playfield; the engine clamps the catcher
        self.pointer_x = max(0, min(self.WIDTH, self.pointer_x))
        self.pointer.move(self.pointer_x)

    def _get_observation(self):
        self.renderer.draw(self.screen, self.engine.snapshot(), new_high_score=self.engine.new_high_score)
        return self.renderer.to_array(self.screen)

    def render(self):
        return self._get_observation()

    def _get_info(self):
        session = self.engine.session
        return {
            "score": session.score,
            "lives": session.lives,
            "steps": self.steps,
            "high_score": self.engine.best_score,
            "caught": session.caught_count,
            "missed": session.missed_count,
            "items": len(session.items),
        }

    def close(self):
        self.engine.close()
        pygame.quit()

    def validate_implementation(self):
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.HEIGHT, self.WIDTH, 3)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.HEIGHT, self.WIDTH, 3)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.HEIGHT, self.WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)
