"""
World State
===========

Single owner of all mutable simulation data: ball, paddle, effects and the
scalar game state. Every per-frame system receives the World explicitly.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, List, Optional, Union

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.entities import (
    Ball,
    FloatingText,
    Paddle,
    Particle,
    TrailPoint,
    Viewport,
)


class Difficulty(str, Enum):
    """Launch speed tier, selectable only before the game starts."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        """Convert a name (case-insensitive) to a Difficulty."""
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown difficulty: {value!r}") from None


@dataclass
class GameState:
    """Scalar game state shown in the HUD."""
    score: int = 0
    high_score: int = 0
    combo: int = 0
    max_combo: int = 0
    started: bool = False
    paused: bool = False
    game_over: bool = False
    difficulty: Difficulty = Difficulty.MEDIUM
    fps: int = 60

    @property
    def running(self) -> bool:
        """True when the simulation should advance this frame."""
        return self.started and not self.paused and not self.game_over


class World:
    """
    Mutable simulation state for one game.

    Size-dependent values (ball radius, paddle geometry, speeds) are derived
    from the viewport scale and only recomputed by ``recenter`` and ``resize``.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        difficulty: Optional[Difficulty] = None
    ):
        if config is None:
            config = get_config()

        self._config = config
        self.viewport = Viewport.from_config(
            config,
            width if width is not None else config.viewport.base_width,
            height if height is not None else config.viewport.base_height
        )

        if difficulty is None:
            difficulty = Difficulty.parse(config.difficulty.default)

        self.state = GameState(
            difficulty=difficulty,
            fps=config.frame.initial_fps
        )

        scale = self.viewport.scale
        self.ball = Ball(
            x=self.viewport.width / 2,
            y=self.viewport.height / 2,
            dx=0.0,
            dy=0.0,
            radius=config.ball.base_radius * scale
        )
        self.paddle = Paddle(
            x=config.paddle.base_x * scale,
            y=0.0,
            width=config.paddle.base_width * scale,
            height=config.paddle.base_height * scale
        )

        self.trail: Deque[TrailPoint] = deque(maxlen=config.trail.capacity)
        self.particles: List[Particle] = []
        self.floating_texts: List[FloatingText] = []

        # Decaying visual emphasis, 1.0 right after a hit
        self.wall_pulse: float = 0.0
        self.paddle_pulse: float = 0.0

        self.recenter()

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def width(self) -> float:
        return self.viewport.width

    @property
    def height(self) -> float:
        return self.viewport.height

    @property
    def paddle_max_y(self) -> float:
        """Largest valid paddle y (paddle bottom on the floor)."""
        return max(0.0, self.viewport.height - self.paddle.height)

    @property
    def paddle_speed(self) -> float:
        return self._config.paddle.base_speed * self.viewport.scale

    def launch_speed(self, difficulty: Optional[Difficulty] = None) -> float:
        """Per-axis launch speed for a difficulty at the current scale."""
        if difficulty is None:
            difficulty = self.state.difficulty
        multiplier = self._config.difficulty_multiplier(difficulty.value)
        return self._config.ball.base_speed * self.viewport.scale * multiplier

    def recenter(self) -> None:
        """Put the ball in the middle with launch velocity and center the paddle."""
        scale = self.viewport.scale
        speed = self.launch_speed()
        self.ball.x = self.viewport.width / 2
        self.ball.y = self.viewport.height / 2
        self.ball.dx = speed
        self.ball.dy = speed
        self.ball.radius = self._config.ball.base_radius * scale
        self.paddle.y = self.viewport.height / 2 - self.paddle.height / 2

    def clear_effects(self) -> None:
        self.trail.clear()
        self.particles.clear()
        self.floating_texts.clear()
        self.wall_pulse = 0.0
        self.paddle_pulse = 0.0

    def clamp_paddle(self) -> None:
        self.paddle.y = max(0.0, min(self.paddle_max_y, self.paddle.y))

    def resize(self, width: float, height: float) -> None:
        """
        Adopt new playfield dimensions.

        Recomputes ball radius and paddle geometry from the new scale and
        re-clamps the paddle. Ball position and velocity are left alone.
        """
        self.viewport = Viewport.from_config(self._config, width, height)
        scale = self.viewport.scale
        self.ball.radius = self._config.ball.base_radius * scale
        self.paddle.x = self._config.paddle.base_x * scale
        self.paddle.width = self._config.paddle.base_width * scale
        self.paddle.height = self._config.paddle.base_height * scale
        self.clamp_paddle()
