import logging
import os

import gymnasium as gym
from gymnasium.spaces import MultiDiscrete
import numpy as np

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
import pygame  # noqa: E402

from .config import DEFAULT_CONFIG  # noqa: E402
from .renderer import Renderer  # noqa: E402
from .session import GameEvent, GameSession, InputState, Phase  # noqa: E402

logger = logging.getLogger(__name__)


class BounceShieldEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    # Must be a short, user-facing control string:
    user_guide = (
        "Controls: ←→ to move the bar. Shift pauses, space restarts after game over."
    )

    # Must be a short, user-facing description of the game:
    game_description = (
        "Bounce Shield: keep the ball in play with your bar. Every hit scores, quick hits build combos, "
        "milestones grant hearts and power-ups change the rules for a while."
    )

    # Should frames auto-advance or wait for user input?
    auto_advance = True

    def __init__(self, render_mode="rgb_array", config=None, max_steps=5000):
        super().__init__()

        self.config = config or DEFAULT_CONFIG
        self.render_mode = render_mode

        # --- Game Constants ---
        self.SCREEN_WIDTH = int(self.config.screen_width)
        self.SCREEN_HEIGHT = int(self.config.screen_height)
        self.FPS = self.metadata["render_fps"]
        self.MAX_STEPS = max_steps

        # --- Rewards ---
        self.REWARD_POINT = 1.0
        self.REWARD_POWERUP = 0.1
        self.PENALTY_HEART = -1.0
        self.PENALTY_GAME_OVER = -10.0

        # --- Gymnasium Spaces ---
        self.observation_space = gym.spaces.Box(
            low=0, high=255, shape=(self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3), dtype=np.uint8
        )
        self.action_space = MultiDiscrete([5, 2, 2])

        # --- Pygame Setup ---
        pygame.init()
        pygame.font.init()
        self.screen = pygame.Surface((self.SCREEN_WIDTH, self.SCREEN_HEIGHT))
        self.renderer = Renderer(self.screen)

        # --- State Variables ---
        self.session = None
        self.steps = 0
        self.prev_space_held = False
        self.prev_shift_held = False
        self.last_events = []

        self.reset()
        self.validate_implementation()

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)

        self.session = GameSession(self.config, rng=self.np_random)
        self.steps = 0
        self.prev_space_held = False
        self.prev_shift_held = False
        self.last_events = []

        return self._get_observation(), self._get_info()

    def step(self, action):
        self.steps += 1

        # --- Handle Actions ---
        movement, space_held, shift_held = action[0], action[1] == 1, action[2] == 1

        # Pause and restart fire on press, not hold
        inputs = InputState(
            left=movement == 3,
            right=movement == 4,
            restart=space_held and not self.prev_space_held,
            pause=shift_held and not self.prev_shift_held,
        )
        self.prev_space_held = space_held
        self.prev_shift_held = shift_held

        # --- Update Game State ---
        prev_score = self.session.score
        prev_hearts = self.session.hearts
        self.last_events = self.session.update(1.0 / self.FPS, inputs)

        # --- Calculate Reward ---
        reward = 0.0
        reward += max(0, self.session.score - prev_score) * self.REWARD_POINT
        reward += self.last_events.count(GameEvent.POWERUP_COLLECTED) * self.REWARD_POWERUP
        reward += max(0, prev_hearts - self.session.hearts) * self.PENALTY_HEART
        if GameEvent.GAME_OVER in self.last_events:
            reward += self.PENALTY_GAME_OVER

        # --- Check Termination ---
        terminated = self.session.phase is Phase.GAME_OVER
        truncated = self.steps >= self.MAX_STEPS

        return self._get_observation(), reward, terminated, truncated, self._get_info()

    def _get_info(self):
        session = self.session
        return {
            "score": session.score,
            "high_score": session.high_score,
            "hearts": session.hearts,
            "combo": session.combo,
            "level": session.level,
            "phase": session.phase.value,
            "steps": self.steps,
        }

    def _get_observation(self):
        self.renderer.draw(self.session.render_state())
        arr = pygame.surfarray.array3d(self.screen)
        return np.transpose(arr, (1, 0, 2)).astype(np.uint8)

    def render(self):
        return self._get_observation()

    def close(self):
        pygame.quit()

    def validate_implementation(self):
        # Test action space
        assert self.action_space.shape == (3,)
        assert self.action_space.nvec.tolist() == [5, 2, 2]

        # Test observation space
        test_obs = self._get_observation()
        assert test_obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert test_obs.dtype == np.uint8

        # Test reset
        obs, info = self.reset()
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(info, dict)

        # Test step
        test_action = self.action_space.sample()
        obs, reward, term, trunc, info = self.step(test_action)
        assert obs.shape == (self.SCREEN_HEIGHT, self.SCREEN_WIDTH, 3)
        assert isinstance(reward, (int, float))
        assert isinstance(term, bool)
        assert trunc == False
        assert isinstance(info, dict)

        logger.info("✓ Implementation validated successfully")
