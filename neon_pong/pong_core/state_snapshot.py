"""
State Snapshot
==============

Read-only copy of everything a renderer or agent needs from one frame,
plus packing into numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import numpy as np

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.entities import (
    Ball,
    FloatingText,
    Paddle,
    Particle,
    TrailPoint,
    Viewport,
)
from neon_pong.pong_core.rules import GamePhase, get_phase
from neon_pong.pong_core.scoring import ScoreTracker
from neon_pong.pong_core.world import Difficulty, World

# Speed meter saturates at this multiple of the launch speed
MAX_SPEED_RATIO = 2.0


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete frame state.

    Entities are copies; mutating them does not affect the simulation.
    """
    # Entities
    ball: Ball
    paddle: Paddle
    particles: Tuple[Particle, ...]
    trail: Tuple[TrailPoint, ...]
    floating_texts: Tuple[FloatingText, ...]

    # Scalar state
    score: int
    high_score: int
    combo: int
    max_combo: int
    fps: int
    difficulty: Difficulty
    started: bool
    paused: bool
    game_over: bool

    # Presentation helpers
    viewport: Viewport
    wall_pulse: float
    paddle_pulse: float
    speed_ratio: float          # Ball speed / launch speed, capped at MAX_SPEED_RATIO
    is_new_high_score: bool

    @property
    def phase(self) -> GamePhase:
        return get_phase(self)

    @property
    def running(self) -> bool:
        return self.started and not self.paused and not self.game_over

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        ball = self.ball
        paddle = self.paddle
        return {
            "ball_x": np.array(ball.x, dtype=np.float32),
            "ball_y": np.array(ball.y, dtype=np.float32),
            "ball_dx": np.array(ball.dx, dtype=np.float32),
            "ball_dy": np.array(ball.dy, dtype=np.float32),
            "ball_radius": np.array(ball.radius, dtype=np.float32),
            "paddle_y": np.array(paddle.y, dtype=np.float32),
            "paddle_x": np.array(paddle.x, dtype=np.float32),
            "paddle_height": np.array(paddle.height, dtype=np.float32),
            "board_width": np.array(self.viewport.width, dtype=np.float32),
            "board_height": np.array(self.viewport.height, dtype=np.float32),
            "wall_x": np.array(self.viewport.wall_x, dtype=np.float32),
            "score": np.array(self.score, dtype=np.int64),
            "combo": np.array(self.combo, dtype=np.int64),
            "speed_ratio": np.array(self.speed_ratio, dtype=np.float32),
        }


class SnapshotBuilder:
    """Builds GameSnapshots from a World."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config

    def speed_ratio(self, world: World) -> float:
        # Launch velocity is (s, s), magnitude s * sqrt(2)
        base = world.launch_speed() * math.sqrt(2)
        if base <= 0:
            return 0.0
        return min(MAX_SPEED_RATIO, world.ball.speed / base)

    def build(self, world: World) -> GameSnapshot:
        state = world.state
        return GameSnapshot(
            ball=copy.copy(world.ball),
            paddle=copy.copy(world.paddle),
            particles=tuple(copy.copy(p) for p in world.particles),
            trail=tuple(copy.copy(p) for p in world.trail),
            floating_texts=tuple(copy.copy(t) for t in world.floating_texts),
            score=state.score,
            high_score=state.high_score,
            combo=state.combo,
            max_combo=state.max_combo,
            fps=state.fps,
            difficulty=state.difficulty,
            started=state.started,
            paused=state.paused,
            game_over=state.game_over,
            viewport=world.viewport,
            wall_pulse=world.wall_pulse,
            paddle_pulse=world.paddle_pulse,
            speed_ratio=self.speed_ratio(world),
            is_new_high_score=ScoreTracker.is_new_high_score(state),
        )
