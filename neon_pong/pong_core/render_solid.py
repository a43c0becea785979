"""
Solid Renderer
==============

Fast numpy-based renderer that draws the playfield with flat colors.
Used for image observations and headless recording; no pygame needed.
"""

from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.state_snapshot import GameSnapshot


class SolidRenderer:
    """
    Renders a GameSnapshot as solid shapes.

    Draws, back to front: background, scoring wall (brightened by the wall
    pulse), trail, particles, paddle (brightened by the paddle pulse), ball.
    Screen y grows downward, same as the simulation.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        self._bg_color = np.array([15, 23, 42], dtype=np.uint8)
        self._wall_color = np.array(config.particles.scoring_wall.color, dtype=np.float32)
        self._paddle_color = np.array(config.particles.paddle.color, dtype=np.float32)
        self._ball_color = np.array([255, 255, 255], dtype=np.uint8)
        self._trail_color = np.array([96, 165, 250], dtype=np.float32)
        self._flash_color = np.array([255, 255, 255], dtype=np.float32)

    def render(
        self,
        snapshot: GameSnapshot,
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            snapshot: Frame to draw.
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        viewport = snapshot.viewport
        sx = width / viewport.width
        sy = height / viewport.height

        # Scoring wall
        wall_left = int(viewport.wall_x * sx)
        img[:, wall_left:] = self._pulsed(self._wall_color, snapshot.wall_pulse)

        # Trail
        ball = snapshot.ball
        for point in snapshot.trail:
            color = self._blend(self._trail_color, point.alpha * 0.5)
            radius = max(1, int(ball.radius * point.alpha * min(sx, sy)))
            self._draw_circle(img, int(point.x * sx), int(point.y * sy), radius, color)

        # Particles
        for particle in snapshot.particles:
            color = self._blend(np.array(particle.color, dtype=np.float32), particle.alpha)
            half = max(1, int(particle.size * min(sx, sy) / 2))
            self._fill_rect(
                img,
                int(particle.x * sx) - half,
                int(particle.y * sy) - half,
                2 * half,
                2 * half,
                color
            )

        # Paddle
        paddle = snapshot.paddle
        self._fill_rect(
            img,
            int(paddle.x * sx),
            int(paddle.y * sy),
            max(1, int(paddle.width * sx)),
            max(1, int(paddle.height * sy)),
            self._pulsed(self._paddle_color, snapshot.paddle_pulse)
        )

        # Ball
        self._draw_circle(
            img,
            int(ball.x * sx),
            int(ball.y * sy),
            max(1, int(ball.radius * min(sx, sy))),
            self._ball_color
        )

        return img

    def _pulsed(self, base: np.ndarray, pulse: float) -> np.ndarray:
        """Mix ``base`` toward white by ``pulse`` (0..1)."""
        mixed = base + (self._flash_color - base) * min(1.0, max(0.0, pulse)) * 0.6
        return mixed.astype(np.uint8)

    def _blend(self, color: np.ndarray, alpha: float) -> np.ndarray:
        """Premultiply ``color`` against the background."""
        alpha = min(1.0, max(0.0, alpha))
        bg = self._bg_color.astype(np.float32)
        return (bg + (color - bg) * alpha).astype(np.uint8)

    def _fill_rect(
        self,
        img: np.ndarray,
        x: int,
        y: int,
        w: int,
        h: int,
        color: np.ndarray
    ) -> None:
        height, width = img.shape[:2]
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(width, x + w), min(height, y + h)
        if x0 >= x1 or y0 >= y1:
            return
        img[y0:y1, x0:x1] = color

    def _draw_circle(
        self,
        img: np.ndarray,
        cx: int,
        cy: int,
        radius: int,
        color: np.ndarray
    ) -> None:
        """Draw a filled circle using numpy."""
        height, width = img.shape[:2]

        y_min = max(0, cy - radius)
        y_max = min(height, cy + radius + 1)
        x_min = max(0, cx - radius)
        x_max = min(width, cx + radius + 1)

        if y_min >= y_max or x_min >= x_max:
            return

        yy, xx = np.meshgrid(
            np.arange(y_min, y_max),
            np.arange(x_min, x_max),
            indexing='ij'
        )
        mask = (xx - cx) ** 2 + (yy - cy) ** 2 <= radius ** 2
        img[y_min:y_max, x_min:x_max][mask] = color

    @staticmethod
    def output_shape(width: int, height: int) -> Tuple[int, int, int]:
        return (height, width, 3)

    def close(self) -> None:
        """Clean up resources (no-op for solid renderer)."""
        pass
