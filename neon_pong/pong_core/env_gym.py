"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the Pong game. One env step is
one animation frame with the chosen paddle action held for that frame.

Reward is the score gained this frame (1 per scoring-wall bounce).
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from neon_pong.pong_core.config_loader import GameConfig, load_config
from neon_pong.pong_core.game import CoreGame
from neon_pong.pong_core.input_state import InputAction
from neon_pong.pong_core.state_snapshot import MAX_SPEED_RATIO, GameSnapshot

ACTION_STAY = 0
ACTION_UP = 1
ACTION_DOWN = 2


class PongEnv(gym.Env):
    """
    Single-player wall Pong as a Gymnasium environment.

    Action Space:
        Discrete(3): 0 = stay, 1 = move up, 2 = move down.

    Observation Space:
        Dict containing ball, paddle and board state, plus an optional
        RGB image of the playfield.

    Reward:
        Score gained this frame.

    Episode end:
        terminated when the ball is lost, truncated after
        ``env.max_episode_steps`` frames.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        render_style: str = "solid",
        difficulty: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        max_episode_steps: Optional[int] = None,
    ):
        """
        Initialize Pong environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            render_style: "solid" for flat numpy drawing, "full" for the neon look.
            difficulty: Difficulty for every episode. Configured default if None.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            max_episode_steps: Override the truncation limit.
        """
        super().__init__()

        if render_mode is not None and render_mode not in self.metadata["render_modes"]:
            raise ValueError(f"Unsupported render_mode: {render_mode!r}")

        self._config = load_config(config_path)
        env_cfg = self._config.env

        self.render_mode = render_mode
        self._render_style = render_style
        self._image_obs = image_obs
        self._img_width = image_width or env_cfg.image_width
        self._img_height = image_height or env_cfg.image_height
        self._max_steps = max_episode_steps or env_cfg.max_episode_steps

        self._game = CoreGame(
            config=self._config,
            width=env_cfg.width,
            height=env_cfg.height,
            difficulty=difficulty
        )
        self._steps = 0

        # Renderers (lazy)
        self._renderer = None
        self._screen_renderer = None

        self.action_space = spaces.Discrete(3)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        w = float(self._config.env.width)
        h = float(self._config.env.height)
        unbounded = dict(low=-np.inf, high=np.inf, shape=(), dtype=np.float32)

        obs_dict = {
            "ball_x": spaces.Box(**unbounded),
            "ball_y": spaces.Box(**unbounded),
            "ball_dx": spaces.Box(**unbounded),
            "ball_dy": spaces.Box(**unbounded),
            "ball_radius": spaces.Box(low=0, high=max(w, h), shape=(), dtype=np.float32),
            "paddle_x": spaces.Box(low=0, high=w, shape=(), dtype=np.float32),
            "paddle_y": spaces.Box(low=0, high=h, shape=(), dtype=np.float32),
            "paddle_height": spaces.Box(low=0, high=h, shape=(), dtype=np.float32),
            "board_width": spaces.Box(low=0, high=w, shape=(), dtype=np.float32),
            "board_height": spaces.Box(low=0, high=h, shape=(), dtype=np.float32),
            "wall_x": spaces.Box(low=0, high=w, shape=(), dtype=np.float32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "combo": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "speed_ratio": spaces.Box(low=0, high=MAX_SPEED_RATIO, shape=(), dtype=np.float32),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and launch the ball.

        Args:
            seed: Random seed for particle effects.
            options: Optional {"difficulty": name} applied before launch.

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        if options and "difficulty" in options:
            self._game.set_difficulty(options["difficulty"])
        self._game.start()
        self._steps = 0

        snapshot = self._game.snapshot()
        obs = self._snapshot_to_obs(snapshot)
        info = self._game.get_info()
        info["delta_score"] = 0

        if self.render_mode == "human":
            self.render()

        return obs, info

    def step(
        self,
        action: Union[int, np.integer, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Advance one frame with the paddle action held.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action: {action!r}")

        self._apply_action(action)
        result = self._game.step()
        self._steps += 1

        terminated = result.game_over
        truncated = not terminated and self._steps >= self._max_steps
        reward = float(result.delta_score)

        obs = self._snapshot_to_obs(result.snapshot)
        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["paddle_hit"] = result.events.paddle_hit
        info["steps"] = self._steps

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _apply_action(self, action: int) -> None:
        game = self._game
        if action == ACTION_UP:
            game.hold(InputAction.MOVE_UP)
            game.release(InputAction.MOVE_DOWN)
        elif action == ACTION_DOWN:
            game.hold(InputAction.MOVE_DOWN)
            game.release(InputAction.MOVE_UP)
        else:
            game.release(InputAction.MOVE_UP)
            game.release(InputAction.MOVE_DOWN)

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()
        if self._image_obs:
            obs["board_rgb"] = self._render_to_array(snapshot)
        return obs

    def _render_to_array(self, snapshot: GameSnapshot) -> np.ndarray:
        if self._renderer is None:
            self._init_renderer()
        return self._renderer.render(snapshot, self._img_width, self._img_height)

    def _init_renderer(self) -> None:
        """Initialize array renderer based on style."""
        if self._render_style == "full":
            from neon_pong.pong_core.render_pygame import PygameRenderer
            self._renderer = PygameRenderer(self._config)
        else:
            from neon_pong.pong_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        snapshot = self._game.snapshot()

        if self.render_mode == "rgb_array":
            viewport = snapshot.viewport
            if self._renderer is None:
                self._init_renderer()
            return self._renderer.render(snapshot, int(viewport.width), int(viewport.height))

        if self.render_mode == "human":
            if self._screen_renderer is None:
                from neon_pong.pong_core.render_pygame import PygameRenderer
                self._screen_renderer = PygameRenderer(self._config)
            self._screen_renderer.render_to_screen(snapshot)
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None
        if self._screen_renderer is not None:
            self._screen_renderer.close()
            self._screen_renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
