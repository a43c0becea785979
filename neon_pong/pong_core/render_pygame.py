"""
Neon Pygame Renderer
====================

Pretty renderer using pygame for the neon look: animated grid, dashed
center line, glowing scoring wall, rainbow trail, particles, floating combo
text, HUD with speed meter, and start / pause / game over overlays.

Supports both display mode (human play) and headless RGB output.
"""

from __future__ import annotations

import colorsys
import math
from typing import Dict, Optional, Tuple

import numpy as np
import pygame

from neon_pong.pong_core.config_loader import GameConfig, get_config
from neon_pong.pong_core.rules import GamePhase
from neon_pong.pong_core.state_snapshot import MAX_SPEED_RATIO, GameSnapshot
from neon_pong.pong_core.world import Difficulty

RGB = Tuple[int, int, int]

BG_TOP: RGB = (15, 23, 42)
BG_BOTTOM: RGB = (30, 41, 59)
BLUE: RGB = (59, 130, 246)
BLUE_LIGHT: RGB = (96, 165, 250)
BLUE_DARK: RGB = (37, 99, 235)
GREEN: RGB = (16, 185, 129)
AMBER: RGB = (251, 191, 36)
RED: RGB = (239, 68, 68)
SLATE: RGB = (148, 163, 184)
SLATE_DARK: RGB = (100, 116, 139)
WHITE: RGB = (255, 255, 255)


def _hsl(hue: float, saturation: float, lightness: float) -> RGB:
    """HSL (degrees, 0..1, 0..1) to an RGB tuple."""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness, saturation)
    return (int(r * 255), int(g * 255), int(b * 255))


def _lerp(a: RGB, b: RGB, t: float) -> RGB:
    t = min(1.0, max(0.0, t))
    return tuple(int(a[i] + (b[i] - a[i]) * t) for i in range(3))  # type: ignore[return-value]


class PygameRenderer:
    """
    Full-featured renderer using pygame.

    Draws at the snapshot's viewport size; ``render`` scales the result to
    the requested array size.
    """

    def __init__(self, config: Optional[GameConfig] = None, caption: str = "Neon Pong"):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
            caption: Window title in display mode.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._caption = caption

        if not pygame.get_init():
            pygame.init()
        pygame.font.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Font cache keyed by (size, bold)
        self._fonts: Dict[Tuple[int, bool], pygame.font.Font] = {}

    @property
    def screen(self) -> Optional[pygame.Surface]:
        return self._screen

    def _font(self, size: float, bold: bool = False) -> pygame.font.Font:
        key = (max(8, int(size)), bold)
        if key not in self._fonts:
            font = pygame.font.Font(None, key[0])
            font.set_bold(bold)
            self._fonts[key] = font
        return self._fonts[key]

    def render(
        self,
        snapshot: GameSnapshot,
        width: int,
        height: int,
        time_s: float = 0.0
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation or recording).

        Returns:
            (height, width, 3) uint8 array.
        """
        size = (int(snapshot.viewport.width), int(snapshot.viewport.height))
        surface = pygame.Surface(size)
        self.draw(surface, snapshot, time_s)
        if size != (width, height):
            surface = pygame.transform.smoothscale(surface, (width, height))
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        snapshot: GameSnapshot,
        time_s: Optional[float] = None
    ) -> None:
        """
        Render to the pygame window, resizing it to the viewport if needed.

        Args:
            snapshot: Frame to draw.
            time_s: Animation clock in seconds. pygame ticks if None.
        """
        size = (int(snapshot.viewport.width), int(snapshot.viewport.height))
        if self._screen is None or self._screen_size != size:
            self._screen = pygame.display.set_mode(size)
            self._screen_size = size
            pygame.display.set_caption(self._caption)

        if time_s is None:
            time_s = pygame.time.get_ticks() / 1000.0

        self.draw(self._screen, snapshot, time_s)
        pygame.display.flip()

    def draw(self, surface: pygame.Surface, snapshot: GameSnapshot, time_s: float) -> None:
        """Draw one full frame onto ``surface``."""
        self._draw_background(surface, snapshot, time_s)
        self._draw_center_line(surface, snapshot, time_s)
        self._draw_wall(surface, snapshot)
        self._draw_trail(surface, snapshot, time_s)
        self._draw_paddle(surface, snapshot)
        self._draw_ball(surface, snapshot, time_s)
        self._draw_particles(surface, snapshot)
        self._draw_floating_texts(surface, snapshot)
        self._draw_hud(surface, snapshot)

        phase = snapshot.phase
        if phase is GamePhase.NOT_STARTED:
            self._draw_start_overlay(surface, snapshot)
        elif phase is GamePhase.GAME_OVER:
            self._draw_game_over_overlay(surface, snapshot)
        elif phase is GamePhase.PAUSED:
            self._draw_pause_overlay(surface, snapshot)

    # Playfield

    def _draw_background(self, surface: pygame.Surface, snapshot: GameSnapshot, time_s: float) -> None:
        width, height = surface.get_size()
        middle = _hsl(220 + math.sin(time_s * 0.5) * 10, 0.45, 0.15)
        band = 8
        for y in range(0, height, band):
            t = y / max(1, height)
            color = _lerp(BG_TOP, middle, t * 2) if t < 0.5 else _lerp(middle, BG_BOTTOM, t * 2 - 1)
            pygame.draw.rect(surface, color, pygame.Rect(0, y, width, band))

        # Grid
        scale = snapshot.viewport.scale
        grid = max(4, int(30 * scale))
        grid_alpha = 0.1 + math.sin(time_s) * 0.05
        grid_color = _lerp(BG_TOP, BLUE, grid_alpha)
        for x in range(0, width, grid):
            pygame.draw.line(surface, grid_color, (x, 0), (x, height))
        for y in range(0, height, grid):
            pygame.draw.line(surface, grid_color, (0, y), (width, y))

    def _draw_center_line(self, surface: pygame.Surface, snapshot: GameSnapshot, time_s: float) -> None:
        width, height = surface.get_size()
        dash = max(2, int(10 * snapshot.viewport.scale))
        color = _lerp(BG_TOP, BLUE, 0.6 + math.sin(time_s * 2) * 0.4)
        line_width = max(1, int(round(2 + math.sin(time_s * 3) * 0.5)))
        x = width // 2
        for y in range(0, height, dash * 2):
            pygame.draw.line(surface, color, (x, y), (x, min(height, y + dash)), line_width)

    def _draw_wall(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        viewport = snapshot.viewport
        pulse = max(0.0, snapshot.wall_pulse)
        glow = int(25 + pulse * 30)
        self._glow_rect(
            surface,
            pygame.Rect(int(viewport.wall_x), 0, int(viewport.width - viewport.wall_x), int(viewport.height)),
            GREEN,
            glow
        )
        core = _lerp(GREEN, WHITE, pulse * 0.5)
        pygame.draw.rect(
            surface,
            core,
            pygame.Rect(int(viewport.wall_x), 0, int(viewport.width - viewport.wall_x), int(viewport.height))
        )

    def _draw_trail(self, surface: pygame.Surface, snapshot: GameSnapshot, time_s: float) -> None:
        radius = snapshot.ball.radius
        for index, point in enumerate(snapshot.trail):
            r = int(radius * point.alpha * 0.8)
            if r < 1:
                continue
            color = _hsl(index * 30 + time_s * 50, 0.8, 0.6)
            self._alpha_circle(surface, color, (point.x, point.y), r, point.alpha * 0.4)

    def _draw_paddle(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        paddle = snapshot.paddle
        pulse = max(0.0, snapshot.paddle_pulse)
        rect = pygame.Rect(int(paddle.x), int(paddle.y), max(1, int(paddle.width)), max(1, int(paddle.height)))
        self._glow_rect(surface, rect, BLUE, int(20 + pulse * 20))

        # Vertical gradient, light at the top
        radius = max(1, int(6 * snapshot.viewport.scale))
        body = pygame.Surface(rect.size, pygame.SRCALPHA)
        for y in range(rect.height):
            t = y / max(1, rect.height - 1)
            color = _lerp(BLUE_LIGHT, BLUE, t * 2) if t < 0.5 else _lerp(BLUE, BLUE_DARK, t * 2 - 1)
            pygame.draw.line(body, _lerp(color, WHITE, pulse * 0.4), (0, y), (rect.width, y))
        mask = pygame.Surface(rect.size, pygame.SRCALPHA)
        pygame.draw.rect(mask, (255, 255, 255, 255), mask.get_rect(), border_radius=radius)
        body.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
        surface.blit(body, rect.topleft)

    def _draw_ball(self, surface: pygame.Surface, snapshot: GameSnapshot, time_s: float) -> None:
        ball = snapshot.ball
        radius = max(1, int(ball.radius))
        glow = _hsl(time_s * 100, 0.8, 0.6)
        for i in range(3, 0, -1):
            self._alpha_circle(surface, glow, (ball.x, ball.y), radius + i * 4, 0.08 * (4 - i))
        pygame.draw.circle(surface, _lerp(WHITE, BLUE_LIGHT, 0.4), (int(ball.x), int(ball.y)), radius)
        highlight = max(1, radius // 2)
        pygame.draw.circle(
            surface,
            WHITE,
            (int(ball.x - radius * 0.3), int(ball.y - radius * 0.3)),
            highlight
        )

    def _draw_particles(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        for particle in snapshot.particles:
            size = max(1, int(particle.size))
            square = pygame.Surface((size, size), pygame.SRCALPHA)
            alpha = int(255 * min(1.0, max(0.0, particle.alpha)))
            square.fill((*particle.color, alpha))
            rotated = pygame.transform.rotate(square, -math.degrees(particle.rotation))
            surface.blit(rotated, rotated.get_rect(center=(int(particle.x), int(particle.y))))

    def _draw_floating_texts(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        font = self._font(26 * snapshot.viewport.scale, bold=True)
        for text in snapshot.floating_texts:
            rendered = font.render(text.text, True, text.color)
            rendered.set_alpha(int(255 * min(1.0, max(0.0, text.alpha))))
            surface.blit(rendered, rendered.get_rect(center=(int(text.x), int(text.y))))

    # HUD and overlays

    def _draw_hud(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        viewport = snapshot.viewport
        scale = viewport.scale
        font_size = max(36, 46 * scale)

        score = self._font(font_size, bold=True).render(str(snapshot.score), True, WHITE)
        surface.blit(score, (int(20 * scale), int(20 * scale)))

        if snapshot.combo > 1:
            combo = self._font(font_size * 0.7, bold=True).render(f"x{snapshot.combo} COMBO!", True, AMBER)
            combo.set_alpha(int(255 * min(1.0, snapshot.combo / 5)))
            surface.blit(combo, (int(20 * scale), int(62 * scale)))

        # Speed meter
        bar_x = int(viewport.width - 120 * scale)
        label = self._font(font_size * 0.5).render("SPEED", True, SLATE)
        surface.blit(label, (bar_x, int(18 * scale)))

        bar_w = int(100 * scale)
        bar_h = max(2, int(8 * scale))
        bar_y = int(40 * scale)
        pygame.draw.rect(surface, (51, 65, 85), pygame.Rect(bar_x, bar_y, bar_w, bar_h))
        fill = snapshot.speed_ratio / MAX_SPEED_RATIO
        fill_w = int(bar_w * min(1.0, fill))
        for x in range(fill_w):
            t = x / max(1, bar_w - 1)
            color = _lerp(GREEN, AMBER, t * 2) if t < 0.5 else _lerp(AMBER, RED, t * 2 - 1)
            pygame.draw.line(surface, color, (bar_x + x, bar_y), (bar_x + x, bar_y + bar_h - 1))

        fps = self._font(font_size * 0.4).render(f"{snapshot.fps} FPS", True, SLATE_DARK)
        surface.blit(fps, fps.get_rect(bottomright=(int(viewport.width - 10 * scale), int(viewport.height - 10 * scale))))

    def _dim(self, surface: pygame.Surface, alpha: float) -> None:
        shade = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
        shade.fill((*BG_TOP, int(255 * alpha)))
        surface.blit(shade, (0, 0))

    def _centered(
        self,
        surface: pygame.Surface,
        text: str,
        size: float,
        color: RGB,
        center: Tuple[float, float],
        bold: bool = False
    ) -> None:
        rendered = self._font(size, bold).render(text, True, color)
        surface.blit(rendered, rendered.get_rect(center=(int(center[0]), int(center[1]))))

    def _draw_start_overlay(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        self._dim(surface, 0.95)
        viewport = snapshot.viewport
        scale = viewport.scale
        cx, cy = viewport.width / 2, viewport.height / 2

        self._centered(surface, "PONG", max(64, 106 * scale), BLUE_LIGHT, (cx, cy - 100 * scale), bold=True)
        self._centered(surface, "DIFFICULTY", max(18, 24 * scale), SLATE, (cx, cy - 30 * scale))
        for index, difficulty in enumerate(Difficulty):
            selected = difficulty is snapshot.difficulty
            self._centered(
                surface,
                f"{index + 1} {difficulty.value.upper()}",
                max(20, 29 * scale),
                BLUE if selected else SLATE_DARK,
                (cx + (index - 1) * 120 * scale, cy + 10 * scale),
                bold=selected
            )
        self._centered(surface, "Press SPACE to start", max(18, 26 * scale), WHITE, (cx, cy + 70 * scale))
        self._centered(surface, "Click or tap to play", max(18, 26 * scale), WHITE, (cx, cy + 100 * scale))
        if snapshot.high_score > 0:
            self._centered(
                surface,
                f"High Score: {snapshot.high_score}",
                max(18, 24 * scale),
                AMBER,
                (cx, cy + 140 * scale)
            )

    def _draw_game_over_overlay(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        self._dim(surface, 0.97)
        viewport = snapshot.viewport
        scale = viewport.scale
        cx, cy = viewport.width / 2, viewport.height / 2

        self._centered(surface, "GAME OVER", max(56, 74 * scale), RED, (cx, cy - 90 * scale), bold=True)
        self._centered(surface, f"Score: {snapshot.score}", max(32, 42 * scale), WHITE, (cx, cy - 20 * scale), bold=True)
        if snapshot.max_combo > 1:
            self._centered(
                surface,
                f"Max Combo: x{snapshot.max_combo}",
                max(20, 26 * scale),
                AMBER,
                (cx, cy + 15 * scale)
            )
        if snapshot.is_new_high_score:
            self._centered(surface, "NEW HIGH SCORE!", max(24, 32 * scale), AMBER, (cx, cy + 55 * scale), bold=True)
        self._centered(surface, "Press R to restart", max(18, 24 * scale), SLATE, (cx, cy + 110 * scale))

    def _draw_pause_overlay(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        self._dim(surface, 0.92)
        viewport = snapshot.viewport
        scale = viewport.scale
        cx, cy = viewport.width / 2, viewport.height / 2

        self._centered(surface, "PAUSED", max(56, 74 * scale), AMBER, (cx, cy), bold=True)
        self._centered(surface, "Press SPACE to resume", max(20, 29 * scale), WHITE, (cx, cy + 60 * scale))

    # Primitives

    def _alpha_circle(
        self,
        surface: pygame.Surface,
        color: RGB,
        center: Tuple[float, float],
        radius: int,
        alpha: float
    ) -> None:
        layer = pygame.Surface((radius * 2 + 2, radius * 2 + 2), pygame.SRCALPHA)
        pygame.draw.circle(layer, (*color, int(255 * min(1.0, max(0.0, alpha)))), (radius + 1, radius + 1), radius)
        surface.blit(layer, (int(center[0]) - radius - 1, int(center[1]) - radius - 1))

    def _glow_rect(self, surface: pygame.Surface, rect: pygame.Rect, color: RGB, blur: int) -> None:
        """Approximate a canvas shadow blur with a few inflated translucent rects."""
        steps = 4
        for i in range(steps, 0, -1):
            grow = blur * i // steps
            layer_rect = rect.inflate(grow, grow)
            layer = pygame.Surface(layer_rect.size, pygame.SRCALPHA)
            pygame.draw.rect(
                layer,
                (*color, int(40 / i)),
                layer.get_rect(),
                border_radius=max(1, grow // 2)
            )
            surface.blit(layer, layer_rect.topleft)

    def handle_events(self) -> bool:
        """Handle pygame events. Returns False if quit requested."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        return True

    def close(self) -> None:
        """Clean up pygame resources."""
        self._fonts.clear()
        if self._screen is not None:
            pygame.display.quit()
            self._screen = None
            self._screen_size = None
