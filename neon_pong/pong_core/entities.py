"""
Entities
========

Plain mutable records for everything that moves on the playfield, plus the
viewport geometry that all size-dependent quantities derive from.

Coordinates are screen-style: x grows to the right, y grows downward.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

from neon_pong.pong_core.config_loader import Color, GameConfig


@dataclass
class Ball:
    x: float
    y: float
    dx: float
    dy: float
    radius: float

    @property
    def speed(self) -> float:
        """Velocity magnitude."""
        return math.sqrt(self.dx * self.dx + self.dy * self.dy)


@dataclass
class Paddle:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass
class Particle:
    """A short-lived square spark, removed once life reaches zero."""
    x: float
    y: float
    dx: float
    dy: float
    life: int
    max_life: int
    size: float
    color: Color
    rotation: float
    rotation_speed: float

    @property
    def alpha(self) -> float:
        return max(0.0, self.life / self.max_life)


@dataclass
class TrailPoint:
    x: float
    y: float
    alpha: float


@dataclass
class FloatingText:
    """Text that drifts upward and fades out."""
    x: float
    y: float
    text: str
    life: int
    max_life: int
    color: Color

    @property
    def alpha(self) -> float:
        return max(0.0, self.life / self.max_life)


@dataclass(frozen=True)
class Viewport:
    """
    Playfield dimensions.

    Every size in the config is given at ``base_width`` and multiplied by
    ``scale``. The scoring wall is a fixed-thickness strip at the right edge.
    """
    width: float
    height: float
    base_width: float
    wall_thickness: float

    @property
    def scale(self) -> float:
        return self.width / self.base_width

    @property
    def wall_x(self) -> float:
        """X coordinate of the scoring wall's inner face."""
        return self.width - self.wall_thickness

    @classmethod
    def from_config(
        cls,
        config: GameConfig,
        width: float,
        height: float
    ) -> "Viewport":
        return cls(
            width=float(width),
            height=float(height),
            base_width=config.viewport.base_width,
            wall_thickness=config.viewport.wall_thickness
        )


def fit_viewport(
    container_width: float,
    window_height: float,
    config: GameConfig
) -> Tuple[float, float]:
    """
    Compute the largest playfield that fits a container at the configured aspect.

    Args:
        container_width: Width available to the game in pixels.
        window_height: Height of the whole window in pixels.
        config: Game configuration.

    Returns:
        (width, height) of the playfield.
    """
    vp = config.viewport
    max_width = min(container_width - vp.container_margin, vp.max_width)
    max_height = min(window_height * vp.max_height_fraction, vp.max_height)

    width = max_width
    height = width / vp.aspect_ratio

    if height > max_height:
        height = max_height
        width = height * vp.aspect_ratio

    return width, height
